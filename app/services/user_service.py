"""
User Service — registration, login, passwords and in-tenant user administration.

Tenancy is implicit: the e-mail domain picks the tenant (see tenant_service).
Administration (list / edit / remove users) never reaches outside the
caller's tenant; a foreign user id behaves as missing.
"""

import logging
from datetime import datetime, timedelta, timezone

from flask import current_app

from app.core.exceptions import ValidationError
from app.models import db
from app.models.auth import USER_ROLES, User
from app.services import email_service, tenant_service
from app.services.helpers.scoped_queries import get_scoped
from app.utils.crypto import generate_reset_token, hash_password, hash_token, verify_password
from app.utils.helpers import commit_or_raise
from app.utils.validation import check_choice, password_problem

logger = logging.getLogger(__name__)

DEFAULT_RESET_EXPIRES = 3600  # 1 hour
NAME_MAX_LENGTH = 200


class UserServiceError(Exception):
    """Custom exception for user service errors."""
    def __init__(self, message, status_code=400):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def _check_password(password: str) -> None:
    problem = password_problem(password)
    if problem:
        raise UserServiceError(problem, 400)


# ═══════════════════════════════════════════════════════════════
# Lookups
# ═══════════════════════════════════════════════════════════════
def get_user_by_email(tenant_id: int, email: str) -> User | None:
    """Find a user by email within a tenant."""
    return User.query.filter_by(tenant_id=tenant_id, email=email).first()


def get_user_by_id(user_id: int) -> User | None:
    """Find a user by ID."""
    return db.session.get(User, user_id)


# ═══════════════════════════════════════════════════════════════
# Registration & login
# ═══════════════════════════════════════════════════════════════
def register_user(email: str, password: str, name: str | None = None) -> User:
    """Create a user in the tenant owning the e-mail's domain.

    The tenant is created on first registration from a domain and its first
    user becomes the tenant admin.
    """
    if not email or not password:
        raise UserServiceError("Email and password are required", 400)

    _check_password(password)

    try:
        email = tenant_service.normalize_email(email)
        tenant, created = tenant_service.find_or_create_tenant_for_email(email)
    except ValueError as exc:
        raise UserServiceError(str(exc), 400) from exc

    if not tenant.is_active:
        raise UserServiceError("Tenant is inactive", 403)

    if get_user_by_email(tenant.id, email):
        raise UserServiceError("User with this email already exists in this tenant", 400)

    user = User(
        tenant_id=tenant.id,
        email=email,
        name=(name or "").strip() or email.split("@", 1)[0],
        role="admin" if created else "user",
        password_hash=hash_password(password),
    )
    db.session.add(user)
    db.session.commit()
    logger.info(
        "User registered",
        extra={"tenant_id": tenant.id, "event_type": "user_registered"},
    )
    return user


def authenticate_user(email: str, password: str) -> User:
    """Authenticate with email + password; the tenant comes from the domain."""
    if not email or not password:
        raise UserServiceError("Email and password are required", 400)

    try:
        tenant = tenant_service.get_tenant_for_email(email)
        email = tenant_service.normalize_email(email)
    except ValueError as exc:
        raise UserServiceError(str(exc), 400) from exc

    if not tenant:
        raise UserServiceError("No tenant found for this email domain", 404)
    if not tenant.is_active:
        raise UserServiceError("Tenant account is deactivated", 403)

    user = get_user_by_email(tenant.id, email)
    if not user or not verify_password(password, user.password_hash):
        logger.warning(
            "Failed login attempt",
            extra={"tenant_id": tenant.id, "event_type": "login_failed"},
        )
        raise UserServiceError("Invalid email or password", 401)

    user.last_login_at = datetime.now(timezone.utc)
    db.session.commit()
    return user


# ═══════════════════════════════════════════════════════════════
# Password management
# ═══════════════════════════════════════════════════════════════
def change_password(user_id: int, current_password: str, new_password: str) -> User:
    """Change a user's password after verifying the current one."""
    if not current_password or not new_password:
        raise UserServiceError("Current password and new password are required", 400)

    user = get_user_by_id(user_id)
    if not user:
        raise UserServiceError("User not found", 404)

    if not verify_password(current_password, user.password_hash):
        raise UserServiceError("Current password is incorrect", 400)

    _check_password(new_password)
    user.password_hash = hash_password(new_password)
    db.session.commit()
    logger.info(
        "Password changed",
        extra={"tenant_id": user.tenant_id, "event_type": "password_changed"},
    )
    return user


def request_password_reset(email: str) -> str | None:
    """Issue a reset token for the account behind ``email``.

    Returns the raw token, or None when no such account exists. Callers
    must answer both cases identically.
    """
    try:
        tenant = tenant_service.get_tenant_for_email(email)
        email = tenant_service.normalize_email(email)
    except ValueError:
        return None
    if not tenant:
        return None

    user = get_user_by_email(tenant.id, email)
    if not user:
        return None

    expires_in = current_app.config.get("PASSWORD_RESET_EXPIRES", DEFAULT_RESET_EXPIRES)
    raw_token = generate_reset_token()
    user.reset_token_hash = hash_token(raw_token)
    user.reset_token_expires_at = datetime.now(timezone.utc) + timedelta(seconds=expires_in)
    db.session.commit()

    email_service.send_password_reset(user, raw_token, expires_in)
    logger.info(
        "Password reset requested",
        extra={"tenant_id": tenant.id, "event_type": "password_reset_requested"},
    )
    return raw_token


def reset_password(token: str, new_password: str) -> User:
    """Consume a reset token and set a new password. Tokens are single-use."""
    if not token or not new_password:
        raise UserServiceError("Token and new password are required", 400)

    user = User.query.filter_by(reset_token_hash=hash_token(token)).first()
    if not user:
        raise UserServiceError("Invalid or expired reset token", 400)
    if user.reset_token_expired:
        user.reset_token_hash = None
        user.reset_token_expires_at = None
        db.session.commit()
        raise UserServiceError("Invalid or expired reset token", 400)

    _check_password(new_password)
    user.password_hash = hash_password(new_password)
    user.reset_token_hash = None
    user.reset_token_expires_at = None
    db.session.commit()
    logger.info(
        "Password reset completed",
        extra={"tenant_id": user.tenant_id, "event_type": "password_reset"},
    )
    return user


# ═══════════════════════════════════════════════════════════════
# Administration (same tenant only)
# ═══════════════════════════════════════════════════════════════
def _clean_name(value) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Name is required", details={"name": "required"})
    value = value.strip()
    if len(value) > NAME_MAX_LENGTH:
        raise ValidationError(
            f"Name must be at most {NAME_MAX_LENGTH} characters",
            details={"name": "too long"},
        )
    return value


def list_users(tenant_id: int) -> list[User]:
    """All users of a tenant, by name then e-mail."""
    return (
        User.query.filter_by(tenant_id=tenant_id)
        .order_by(User.name.asc(), User.email.asc(), User.id.asc())
        .all()
    )


def get_user(tenant_id: int, user_id: int) -> User:
    return get_scoped(User, user_id, tenant_id=tenant_id)


def update_profile(user: User, data: dict) -> User:
    """Self-service profile edit. Only the display name can change here;
    e-mail, role and tenant are ignored."""
    if "name" in data:
        user.name = _clean_name(data["name"])
        commit_or_raise("User")
    return user


def update_user(tenant_id: int, user_id: int, data: dict, acting_user: User) -> User:
    """Admin edit of name and role."""
    user = get_user(tenant_id, user_id)
    if "role" in data:
        problem = check_choice("role", data["role"], USER_ROLES)
        if problem:
            raise ValidationError(problem, details={"role": "invalid"})
    if "name" in data:
        user.name = _clean_name(data["name"])
    if "role" in data and data["role"] != user.role:
        user.role = data["role"]
        logger.info(
            "User %s role set to %s by %s",
            user.id, user.role, acting_user.id,
            extra={"tenant_id": tenant_id, "event_type": "user_role_changed"},
        )
    commit_or_raise("User")
    return user


def delete_user(tenant_id: int, user_id: int, acting_user: User) -> None:
    """Remove a user of the tenant. Their comments go with them."""
    user = get_user(tenant_id, user_id)
    if user.id == acting_user.id:
        raise ValidationError("Cannot delete yourself", details={"id": "self"})
    db.session.delete(user)
    commit_or_raise("User")
    logger.info(
        "User %s deleted by %s",
        user_id, acting_user.id,
        extra={"tenant_id": tenant_id, "event_type": "user_deleted"},
    )
