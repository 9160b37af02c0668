"""
Auth Models — tenants and users.

A tenant is an organisation identified by its e-mail domain (``acme.com``).
Users belong to exactly one tenant; the same e-mail may exist in different
tenants but is unique within one.
"""

from datetime import datetime, timezone

from app.models import db
from app.models.base import iso, utcnow

PLAN_TIERS = ("basic", "pro", "enterprise")
USER_ROLES = ("user", "admin")


# ═══════════════════════════════════════════════════════════════
# 1. TENANTS
# ═══════════════════════════════════════════════════════════════
class Tenant(db.Model):
    __tablename__ = "tenants"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    domain_name = db.Column(db.String(200), unique=True, nullable=False)
    plan_tier = db.Column(db.String(20), default="basic", nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    users = db.relationship("User", back_populates="tenant", lazy="dynamic", passive_deletes=True)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "domain_name": self.domain_name,
            "plan_tier": self.plan_tier,
            "is_active": self.is_active,
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
        }


# ═══════════════════════════════════════════════════════════════
# 2. USERS
# ═══════════════════════════════════════════════════════════════
class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    tenant_id = db.Column(
        db.Integer, db.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False
    )
    email = db.Column(db.String(200), nullable=False)
    name = db.Column(db.String(200))
    role = db.Column(db.String(20), default="user", nullable=False)  # user, admin
    password_hash = db.Column(db.String(256), nullable=False)
    reset_token_hash = db.Column(db.String(64), index=True)
    reset_token_expires_at = db.Column(db.DateTime)
    last_login_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    # Composite unique: same email can exist in different tenants
    __table_args__ = (
        db.UniqueConstraint("tenant_id", "email", name="uq_user_tenant_email"),
        db.Index("ix_users_tenant_id", "tenant_id"),
        db.Index("ix_users_email", "email"),
    )

    tenant = db.relationship("Tenant", back_populates="users")

    @property
    def is_admin(self):
        return self.role == "admin"

    @property
    def reset_token_expired(self):
        """True when no reset token is pending or it has passed its expiry."""
        expires = self.reset_token_expires_at
        if expires is None:
            return True
        # SQLite hands back naive datetimes
        if expires.tzinfo is None:
            expires = expires.replace(tzinfo=timezone.utc)
        return datetime.now(timezone.utc) >= expires

    def to_dict(self, include_tenant=False):
        """Serialize without password or reset-token material."""
        d = {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "email": self.email,
            "name": self.name,
            "role": self.role,
            "last_login_at": iso(self.last_login_at),
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
        }
        if include_tenant:
            d["tenant"] = self.tenant.to_dict() if self.tenant else None
        return d

    def to_brief(self):
        """Login/registration payload shape."""
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "tenant_id": self.tenant_id,
            "role": self.role,
        }
