"""
Tenant Context Middleware — Enforces tenant isolation on API requests.

When a JWT-authenticated user makes a request:
  1. g.jwt_tenant_id is already set by jwt_auth middleware
  2. This middleware verifies the tenant exists and is active
  3. An X-Tenant-ID header / tenant_id cookie naming another tenant → 403
  4. Sets g.tenant and g.tenant_id for services and blueprints

Requests without a JWT pass through untouched; ``require_auth`` on the
route decides whether that is allowed.

Chain order:
  jwt_auth.py  →  tenant_context.py  →  route handler
"""

import logging

from flask import g, jsonify, request

from app.models import db
from app.models.auth import Tenant
from app.tenant import resolve_tenant

logger = logging.getLogger(__name__)

# Paths that skip tenant context (unauthenticated paths only)
TENANT_SKIP_PREFIXES = (
    "/api/v1/auth/login",
    "/api/v1/auth/register",
    "/api/v1/auth/forgot-password",
    "/api/v1/auth/reset-password",
    "/api/v1/health",
    "/static/",
)


def init_tenant_context(app):
    """Register tenant context middleware as a before_request hook."""

    @app.before_request
    def _tenant_context():
        g.tenant = None
        g.tenant_id = None

        if not request.path.startswith("/api/v1/"):
            return None
        for prefix in TENANT_SKIP_PREFIXES:
            if request.path.startswith(prefix):
                return None

        tenant_id = getattr(g, "jwt_tenant_id", None)
        if tenant_id is None:
            return None

        tenant = db.session.get(Tenant, tenant_id)
        if tenant is None:
            logger.warning(
                "JWT tenant_id %s not found in DB",
                tenant_id,
                extra={"event_type": "tenant_not_found"},
            )
            return jsonify({"error": "Tenant not found"}), 403

        if not tenant.is_active:
            logger.warning(
                "JWT tenant_id %s is deactivated",
                tenant_id,
                extra={"tenant_id": tenant_id, "event_type": "tenant_inactive"},
            )
            return jsonify({"error": "Tenant account is deactivated"}), 403

        requested = resolve_tenant()
        if requested is not None and requested != str(tenant_id):
            logger.warning(
                "Tenant mismatch: token=%s requested=%s",
                tenant_id,
                requested,
                extra={"tenant_id": tenant_id, "event_type": "tenant_mismatch"},
            )
            return jsonify({"error": "Tenant mismatch"}), 403

        g.tenant = tenant
        g.tenant_id = tenant.id
        return None

    logger.info("Tenant context middleware installed")
