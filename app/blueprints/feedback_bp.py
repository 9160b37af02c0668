"""
Feedback Blueprint.

  GET    /api/v1/feedback                 — list (sentiment, customer_id, initiative_id, ...)
  POST   /api/v1/feedback                 — create ("content" accepted for title)
  GET    /api/v1/feedback/<id>            — detail with comments
  PUT    /api/v1/feedback/<id>            — partial update
  DELETE /api/v1/feedback/<id>            — delete (comments go with it)
  GET    /api/v1/feedback/<id>/comments   — comments, oldest first
  POST   /api/v1/feedback/<id>/comments   — add a comment
"""

from flask import Blueprint, g, jsonify

from app.auth import require_auth
from app.blueprints import json_body, list_params, list_response
from app.services import comment_service
from app.services import feedback_service as svc
from app.tenant import current_tenant_id

feedback_bp = Blueprint("feedback", __name__, url_prefix="/api/v1/feedback")


@feedback_bp.route("", methods=["GET"])
@require_auth
def list_feedback():
    items, total = svc.list_feedback(
        current_tenant_id(), **list_params(svc.handler.allowed_filters),
    )
    return list_response(items, total)


@feedback_bp.route("", methods=["POST"])
@require_auth
def create_feedback():
    return jsonify(svc.create_feedback(current_tenant_id(), json_body())), 201


@feedback_bp.route("/<int:feedback_id>", methods=["GET"])
@require_auth
def get_feedback(feedback_id):
    return jsonify(svc.get_feedback(current_tenant_id(), feedback_id)), 200


@feedback_bp.route("/<int:feedback_id>", methods=["PUT"])
@require_auth
def update_feedback(feedback_id):
    return jsonify(svc.update_feedback(current_tenant_id(), feedback_id, json_body())), 200


@feedback_bp.route("/<int:feedback_id>", methods=["DELETE"])
@require_auth
def delete_feedback(feedback_id):
    svc.delete_feedback(current_tenant_id(), feedback_id)
    return "", 204


# ── Comments ─────────────────────────────────────────────────────────────

@feedback_bp.route("/<int:feedback_id>/comments", methods=["GET"])
@require_auth
def list_comments(feedback_id):
    return jsonify(comment_service.list_comments(current_tenant_id(), "feedback", feedback_id)), 200


@feedback_bp.route("/<int:feedback_id>/comments", methods=["POST"])
@require_auth
def add_comment(feedback_id):
    comment = comment_service.create_comment(
        current_tenant_id(), g.current_user, "feedback", feedback_id,
        json_body().get("content"),
    )
    return jsonify(comment), 201
