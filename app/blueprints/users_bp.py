"""
Users Blueprint — profile and in-tenant user administration.

  GET    /api/v1/users          — list the tenant's users (admin)
  GET    /api/v1/users/me       — own profile
  PUT    /api/v1/users/me       — edit own name (email, role, tenant are ignored)
  GET    /api/v1/users/<id>     — one user of the tenant (admin)
  PUT    /api/v1/users/<id>     — edit name / role (admin)
  DELETE /api/v1/users/<id>     — remove a user, never yourself (admin)
"""

from flask import Blueprint, g, jsonify

from app.auth import require_auth, require_role
from app.blueprints import json_body, list_response
from app.services import user_service as svc
from app.tenant import current_tenant_id

users_bp = Blueprint("users", __name__, url_prefix="/api/v1/users")


@users_bp.route("", methods=["GET"])
@require_auth
@require_role("admin")
def list_users():
    users = [u.to_dict() for u in svc.list_users(current_tenant_id())]
    return list_response(users, len(users))


@users_bp.route("/me", methods=["GET"])
@require_auth
def get_me():
    return jsonify(g.current_user.to_dict(include_tenant=True)), 200


@users_bp.route("/me", methods=["PUT"])
@require_auth
def update_me():
    user = svc.update_profile(g.current_user, json_body())
    return jsonify(user.to_dict(include_tenant=True)), 200


@users_bp.route("/<int:user_id>", methods=["GET"])
@require_auth
@require_role("admin")
def get_user(user_id):
    return jsonify(svc.get_user(current_tenant_id(), user_id).to_dict()), 200


@users_bp.route("/<int:user_id>", methods=["PUT"])
@require_auth
@require_role("admin")
def update_user(user_id):
    user = svc.update_user(current_tenant_id(), user_id, json_body(), g.current_user)
    return jsonify(user.to_dict()), 200


@users_bp.route("/<int:user_id>", methods=["DELETE"])
@require_auth
@require_role("admin")
def delete_user(user_id):
    svc.delete_user(current_tenant_id(), user_id, g.current_user)
    return "", 204
