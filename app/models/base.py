"""
TenantModel — Abstract base class for tenant-scoped models.

All Echo entities (goals, initiatives, customers, feedback, ideas, comments)
inherit from TenantModel instead of db.Model directly. This adds:
  - tenant_id FK column with index
  - created_at / updated_at timestamps
  - query_for_tenant(tenant_id) classmethod
  - Composite index macro helper
"""

from datetime import datetime, timezone

from app.models import db


def utcnow():
    return datetime.now(timezone.utc)


def iso(value):
    """Serialize a date/datetime column value (None-safe)."""
    return value.isoformat() if value else None


class TenantModel(db.Model):
    """Abstract base for tenant-scoped tables."""
    __abstract__ = True

    tenant_id = db.Column(
        db.Integer,
        db.ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    @classmethod
    def query_for_tenant(cls, tenant_id):
        """Return a query filtered by tenant_id."""
        return cls.query.filter_by(tenant_id=tenant_id)

    @classmethod
    def tenant_composite_index(cls, table_name, *extra_cols):
        """Build a (tenant_id, ...) composite index for ``__table_args__``."""
        name = f"ix_{table_name}_tenant_{'_'.join(extra_cols)}"
        cols = ("tenant_id",) + extra_cols
        return db.Index(name, *cols)
