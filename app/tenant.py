"""
Echo — Tenant resolution.

Strategy: one shared database, every row carries tenant_id. The tenant of a
request is the one in the caller's JWT. Clients may also name a tenant via:
    1. X-Tenant-ID HTTP header (API calls)
    2. tenant_id cookie (browser sessions)

A named tenant is only a cross-check: tenant_context rejects the request
with 403 when it differs from the JWT tenant.

Usage:
    from app.tenant import current_tenant_id
    tenant_id = current_tenant_id()
"""

from flask import g, has_request_context, request

TENANT_HEADER = "X-Tenant-ID"
TENANT_COOKIE = "tenant_id"


def resolve_tenant() -> str | None:
    """
    Return the tenant the client asked for, as sent, from (in priority order):
        1. X-Tenant-ID header
        2. tenant_id cookie
        3. None
    """
    if not has_request_context():
        return None
    header = request.headers.get(TENANT_HEADER, "").strip()
    if header:
        return header
    cookie = (request.cookies.get(TENANT_COOKIE) or "").strip()
    return cookie or None


def current_tenant_id() -> int | None:
    """Tenant of the authenticated caller (set by tenant_context), or None."""
    if not has_request_context():
        return None
    return getattr(g, "tenant_id", None)
