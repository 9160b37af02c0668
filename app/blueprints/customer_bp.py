"""
Customer Blueprint.

  GET    /api/v1/customers        — list (status, search, sort, page, limit; default name:asc)
  POST   /api/v1/customers        — create
  GET    /api/v1/customers/<id>   — detail
  PUT    /api/v1/customers/<id>   — partial update (revenue accepts "$1,200.50")
  DELETE /api/v1/customers/<id>   — delete
"""

from flask import Blueprint, jsonify

from app.auth import require_auth
from app.blueprints import json_body, list_params, list_response
from app.services import customer_service as svc
from app.tenant import current_tenant_id

customer_bp = Blueprint("customer", __name__, url_prefix="/api/v1/customers")


@customer_bp.route("", methods=["GET"])
@require_auth
def list_customers():
    items, total = svc.list_customers(
        current_tenant_id(), **list_params(svc.handler.allowed_filters),
    )
    return list_response(items, total)


@customer_bp.route("", methods=["POST"])
@require_auth
def create_customer():
    return jsonify(svc.create_customer(current_tenant_id(), json_body())), 201


@customer_bp.route("/<int:customer_id>", methods=["GET"])
@require_auth
def get_customer(customer_id):
    return jsonify(svc.get_customer(current_tenant_id(), customer_id)), 200


@customer_bp.route("/<int:customer_id>", methods=["PUT"])
@require_auth
def update_customer(customer_id):
    return jsonify(svc.update_customer(current_tenant_id(), customer_id, json_body())), 200


@customer_bp.route("/<int:customer_id>", methods=["DELETE"])
@require_auth
def delete_customer(customer_id):
    svc.delete_customer(current_tenant_id(), customer_id)
    return "", 204
