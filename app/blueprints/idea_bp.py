"""
Idea Blueprint.

  GET    /api/v1/ideas                 — list (status, priority, effort, initiative_id, customer_id, ...)
  POST   /api/v1/ideas                 — create (lenient: unknown links are skipped)
  GET    /api/v1/ideas/<id>            — detail with customers and comments
  PUT    /api/v1/ideas/<id>            — partial update (strict: unknown links → 400)
  DELETE /api/v1/ideas/<id>            — delete (comments go with it)
  GET    /api/v1/ideas/<id>/comments   — comments, oldest first
  POST   /api/v1/ideas/<id>/comments   — add a comment
"""

from flask import Blueprint, g, jsonify

from app.auth import require_auth
from app.blueprints import json_body, list_params, list_response
from app.services import comment_service
from app.services import idea_service as svc
from app.tenant import current_tenant_id

idea_bp = Blueprint("idea", __name__, url_prefix="/api/v1/ideas")


@idea_bp.route("", methods=["GET"])
@require_auth
def list_ideas():
    items, total = svc.list_ideas(current_tenant_id(), **list_params(svc.handler.allowed_filters))
    return list_response(items, total)


@idea_bp.route("", methods=["POST"])
@require_auth
def create_idea():
    return jsonify(svc.create_idea(current_tenant_id(), json_body())), 201


@idea_bp.route("/<int:idea_id>", methods=["GET"])
@require_auth
def get_idea(idea_id):
    return jsonify(svc.get_idea(current_tenant_id(), idea_id)), 200


@idea_bp.route("/<int:idea_id>", methods=["PUT"])
@require_auth
def update_idea(idea_id):
    return jsonify(svc.update_idea(current_tenant_id(), idea_id, json_body())), 200


@idea_bp.route("/<int:idea_id>", methods=["DELETE"])
@require_auth
def delete_idea(idea_id):
    svc.delete_idea(current_tenant_id(), idea_id)
    return "", 204


# ── Comments ─────────────────────────────────────────────────────────────

@idea_bp.route("/<int:idea_id>/comments", methods=["GET"])
@require_auth
def list_comments(idea_id):
    return jsonify(comment_service.list_comments(current_tenant_id(), "idea", idea_id)), 200


@idea_bp.route("/<int:idea_id>/comments", methods=["POST"])
@require_auth
def add_comment(idea_id):
    comment = comment_service.create_comment(
        current_tenant_id(), g.current_user, "idea", idea_id, json_body().get("content"),
    )
    return jsonify(comment), 201
