"""
Auth Blueprint — JWT authentication endpoints.

  POST /api/v1/auth/register         — Email + password → user + JWT (tenant from domain)
  POST /api/v1/auth/login            — Email + password → JWT
  GET  /api/v1/auth/me               — Current user profile with tenant
  POST /api/v1/auth/change-password  — Verify current password, set a new one
  POST /api/v1/auth/forgot-password  — Issue a reset token (always same answer)
  POST /api/v1/auth/reset-password   — Consume a reset token
"""

from flask import Blueprint, current_app, g, jsonify

from app.auth import require_auth
from app.blueprints import json_body, text_field
from app.services.jwt_service import generate_access_token
from app.services.user_service import (
    UserServiceError,
    authenticate_user,
    change_password as change_user_password,
    register_user,
    request_password_reset,
    reset_password as reset_user_password,
)

auth_bp = Blueprint("auth", __name__, url_prefix="/api/v1/auth")

FORGOT_PASSWORD_MESSAGE = "If an account with that email exists, a password reset link has been sent"


def _token_for(user):
    return generate_access_token(user.id, user.tenant_id, user.role)


# ═══════════════════════════════════════════════════════════════
# POST /api/v1/auth/register
# ═══════════════════════════════════════════════════════════════
@auth_bp.route("/register", methods=["POST"])
def register():
    """
    Self-service signup. The e-mail domain selects (or creates) the tenant.

    Body: { "email": "...", "password": "...", "name": "..." }
    """
    data = json_body()
    try:
        user = register_user(
            (text_field(data, "email") or "").strip(),
            text_field(data, "password") or "",
            text_field(data, "name"),
        )
    except UserServiceError as e:
        return jsonify({"error": e.message}), e.status_code

    return jsonify({"token": _token_for(user), **user.to_brief()}), 201


# ═══════════════════════════════════════════════════════════════
# POST /api/v1/auth/login
# ═══════════════════════════════════════════════════════════════
@auth_bp.route("/login", methods=["POST"])
def login():
    """
    Authenticate with email + password, return an access token.

    Body: { "email": "...", "password": "..." }
    """
    data = json_body()
    try:
        user = authenticate_user(
            (text_field(data, "email") or "").strip(),
            text_field(data, "password") or "",
        )
    except UserServiceError as e:
        return jsonify({"error": e.message}), e.status_code

    return jsonify({"token": _token_for(user), "user": user.to_brief()}), 200


# ═══════════════════════════════════════════════════════════════
# GET /api/v1/auth/me
# ═══════════════════════════════════════════════════════════════
@auth_bp.route("/me", methods=["GET"])
@require_auth
def me():
    """Current user profile. Never includes password or reset fields."""
    return jsonify(g.current_user.to_dict(include_tenant=True)), 200


# ═══════════════════════════════════════════════════════════════
# POST /api/v1/auth/change-password
# ═══════════════════════════════════════════════════════════════
@auth_bp.route("/change-password", methods=["POST"])
@require_auth
def change_password():
    """
    Body: { "currentPassword": "...", "newPassword": "..." }
    """
    data = json_body()
    try:
        change_user_password(
            g.current_user.id,
            text_field(data, "currentPassword", "current_password"),
            text_field(data, "newPassword", "new_password"),
        )
    except UserServiceError as e:
        return jsonify({"error": e.message}), e.status_code
    return jsonify({"message": "Password changed successfully"}), 200


# ═══════════════════════════════════════════════════════════════
# POST /api/v1/auth/forgot-password
# ═══════════════════════════════════════════════════════════════
@auth_bp.route("/forgot-password", methods=["POST"])
def forgot_password():
    """
    Body: { "email": "..." }

    The answer is identical whether or not the account exists. In debug and
    test mode the raw token is echoed back so the flow can be exercised
    without a mail server.
    """
    data = json_body()
    email = (text_field(data, "email") or "").strip()
    if not email:
        return jsonify({"error": "Email is required"}), 400

    token = request_password_reset(email)
    body = {"message": FORGOT_PASSWORD_MESSAGE}
    if token and (current_app.debug or current_app.testing):
        body["token"] = token
    return jsonify(body), 200


# ═══════════════════════════════════════════════════════════════
# POST /api/v1/auth/reset-password
# ═══════════════════════════════════════════════════════════════
@auth_bp.route("/reset-password", methods=["POST"])
def reset_password():
    """
    Body: { "token": "...", "newPassword": "..." }
    """
    data = json_body()
    try:
        reset_user_password(text_field(data, "token"), text_field(data, "newPassword", "new_password"))
    except UserServiceError as e:
        return jsonify({"error": e.message}), e.status_code
    return jsonify({"message": "Password has been reset successfully"}), 200
