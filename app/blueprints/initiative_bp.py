"""
Initiative Blueprint.

  GET    /api/v1/initiatives                 — list (status, goal_id, search, sort, page, limit)
  POST   /api/v1/initiatives                 — create
  GET    /api/v1/initiatives/<id>            — detail
  PUT    /api/v1/initiatives/<id>            — partial update
  DELETE /api/v1/initiatives/<id>            — delete (ideas / feedback are unlinked)
  GET    /api/v1/initiatives/<id>/comments   — comments, oldest first
  POST   /api/v1/initiatives/<id>/comments   — add a comment
"""

from flask import Blueprint, g, jsonify

from app.auth import require_auth
from app.blueprints import json_body, list_params, list_response
from app.services import comment_service
from app.services import initiative_service as svc
from app.tenant import current_tenant_id

initiative_bp = Blueprint("initiative", __name__, url_prefix="/api/v1/initiatives")


@initiative_bp.route("", methods=["GET"])
@require_auth
def list_initiatives():
    items, total = svc.list_initiatives(
        current_tenant_id(), **list_params(svc.handler.allowed_filters),
    )
    return list_response(items, total)


@initiative_bp.route("", methods=["POST"])
@require_auth
def create_initiative():
    return jsonify(svc.create_initiative(current_tenant_id(), json_body())), 201


@initiative_bp.route("/<int:initiative_id>", methods=["GET"])
@require_auth
def get_initiative(initiative_id):
    return jsonify(svc.get_initiative(current_tenant_id(), initiative_id)), 200


@initiative_bp.route("/<int:initiative_id>", methods=["PUT"])
@require_auth
def update_initiative(initiative_id):
    return jsonify(svc.update_initiative(current_tenant_id(), initiative_id, json_body())), 200


@initiative_bp.route("/<int:initiative_id>", methods=["DELETE"])
@require_auth
def delete_initiative(initiative_id):
    svc.delete_initiative(current_tenant_id(), initiative_id)
    return "", 204


# ── Comments ─────────────────────────────────────────────────────────────

@initiative_bp.route("/<int:initiative_id>/comments", methods=["GET"])
@require_auth
def list_comments(initiative_id):
    return jsonify(comment_service.list_comments(current_tenant_id(), "initiative", initiative_id)), 200


@initiative_bp.route("/<int:initiative_id>/comments", methods=["POST"])
@require_auth
def add_comment(initiative_id):
    comment = comment_service.create_comment(
        current_tenant_id(), g.current_user, "initiative", initiative_id,
        json_body().get("content"),
    )
    return jsonify(comment), 201
