"""
Goal Blueprint.

  GET    /api/v1/goals                    — list (status, search, sort, page, limit)
  POST   /api/v1/goals                    — create
  GET    /api/v1/goals/<id>               — detail with initiatives
  PUT    /api/v1/goals/<id>               — partial update
  DELETE /api/v1/goals/<id>               — delete (initiatives are unlinked)
  POST   /api/v1/goals/<id>/initiatives   — create an initiative under the goal
"""

from flask import Blueprint, jsonify

from app.auth import require_auth
from app.blueprints import json_body, list_params, list_response
from app.services import goal_service as svc
from app.tenant import current_tenant_id

goal_bp = Blueprint("goal", __name__, url_prefix="/api/v1/goals")


@goal_bp.route("", methods=["GET"])
@require_auth
def list_goals():
    items, total = svc.list_goals(current_tenant_id(), **list_params(svc.handler.allowed_filters))
    return list_response(items, total)


@goal_bp.route("", methods=["POST"])
@require_auth
def create_goal():
    return jsonify(svc.create_goal(current_tenant_id(), json_body())), 201


@goal_bp.route("/<int:goal_id>", methods=["GET"])
@require_auth
def get_goal(goal_id):
    return jsonify(svc.get_goal(current_tenant_id(), goal_id)), 200


@goal_bp.route("/<int:goal_id>", methods=["PUT"])
@require_auth
def update_goal(goal_id):
    return jsonify(svc.update_goal(current_tenant_id(), goal_id, json_body())), 200


@goal_bp.route("/<int:goal_id>", methods=["DELETE"])
@require_auth
def delete_goal(goal_id):
    svc.delete_goal(current_tenant_id(), goal_id)
    return "", 204


@goal_bp.route("/<int:goal_id>/initiatives", methods=["POST"])
@require_auth
def add_initiative(goal_id):
    return jsonify(svc.add_initiative(current_tenant_id(), goal_id, json_body())), 201
