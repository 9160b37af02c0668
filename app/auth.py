"""
Echo
Authentication & Authorization decorators.

Provides:
    - require_auth: the route needs a valid Bearer JWT whose user still exists
    - require_role: minimum role check (admin > user)
    - CSRF mitigation for state-changing requests (Content-Type enforcement)

Token parsing happens in middleware/jwt_auth.py; these decorators only look
at what it left in ``g``.
"""

import functools
import logging

from flask import g, jsonify, request

from app.models import db
from app.models.auth import User

logger = logging.getLogger(__name__)

# ── Roles ────────────────────────────────────────────────────────────────────

# Role hierarchy: admin > user
ROLE_HIERARCHY = {
    "admin": {"admin", "user"},
    "user": {"user"},
}


# ── Authentication decorator ─────────────────────────────────────────────────

def require_auth(f):
    """
    Decorator: require a valid access token for the endpoint.

    Sets g.current_user and g.current_user_role.
    """
    @functools.wraps(f)
    def decorated(*args, **kwargs):
        user_id = getattr(g, "jwt_user_id", None)
        if user_id is None:
            return jsonify({"error": "Authentication required"}), 401

        user = db.session.get(User, user_id)
        if user is None or user.tenant_id != getattr(g, "jwt_tenant_id", None):
            logger.warning(
                "Token for unknown user %s",
                user_id,
                extra={"event_type": "token_user_missing"},
            )
            return jsonify({"error": "Invalid token"}), 401

        g.current_user = user
        g.current_user_role = user.role
        return f(*args, **kwargs)

    return decorated


def require_role(minimum_role: str):
    """
    Decorator: require a minimum role level.

    Usage:
        @require_auth
        @require_role("admin")
        def purge(): ...

    Role hierarchy: admin > user
    """
    def decorator(f):
        @functools.wraps(f)
        def decorated(*args, **kwargs):
            user_role = getattr(g, "current_user_role", None)
            if not user_role:
                return jsonify({"error": "Authentication required"}), 401

            allowed = ROLE_HIERARCHY.get(user_role, set())
            if minimum_role not in allowed:
                logger.warning(
                    "Access denied: role '%s' tried to access '%s'-level endpoint %s",
                    user_role, minimum_role, request.path,
                )
                return jsonify({"error": "Insufficient permissions"}), 403

            return f(*args, **kwargs)
        return decorated
    return decorator


# ── CSRF protection for API ──────────────────────────────────────────────────

def _check_content_type():
    """
    For state-changing requests (POST/PUT/PATCH/DELETE), require
    Content-Type: application/json. HTML forms cannot send that content
    type, which makes this a lightweight CSRF mitigation.
    """
    if request.method in ("POST", "PUT", "PATCH", "DELETE"):
        ct = request.content_type or ""
        if "application/json" not in ct and request.content_length and request.content_length > 0:
            return jsonify({
                "error": "Content-Type must be application/json for state-changing requests"
            }), 415
    return None


def init_auth(app):
    """Install the Content-Type guard for API routes."""
    @app.before_request
    def _before_request_auth():
        if not request.path.startswith("/api/v1/"):
            return None
        if request.method == "OPTIONS":
            return None
        return _check_content_type()

    logger.info("Auth middleware installed")
