"""
Comment Blueprint — edit / delete a single comment (author or admin only).

Listing and creating comments live on the parent entity's blueprint.
"""

from flask import Blueprint, g, jsonify

from app.auth import require_auth
from app.blueprints import json_body
from app.services import comment_service as svc
from app.tenant import current_tenant_id

comment_bp = Blueprint("comment", __name__, url_prefix="/api/v1/comments")


@comment_bp.route("/<int:comment_id>", methods=["PUT"])
@require_auth
def update_comment(comment_id):
    comment = svc.update_comment(
        current_tenant_id(), g.current_user, comment_id, json_body().get("content"),
    )
    return jsonify(comment), 200


@comment_bp.route("/<int:comment_id>", methods=["DELETE"])
@require_auth
def delete_comment(comment_id):
    svc.delete_comment(current_tenant_id(), g.current_user, comment_id)
    return "", 204
