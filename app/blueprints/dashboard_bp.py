"""
Dashboard Blueprint — tenant home screen aggregates.
"""

from flask import Blueprint, jsonify

from app.auth import require_auth
from app.services import dashboard_service as svc
from app.tenant import current_tenant_id

dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/api/v1/dashboard")


@dashboard_bp.route("/summary", methods=["GET"])
@require_auth
def summary():
    """Totals, breakdowns, top customers and recent feedback."""
    return jsonify(svc.get_summary(current_tenant_id())), 200
