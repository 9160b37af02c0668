"""
Rate limiting configuration.

Applies per-blueprint rate limits using Flask-Limiter.
The Limiter instance is created in app/__init__.py with no default limits;
this module applies granular limits per route category.

Tenant-aware quota on top, keyed by tenant and sized by plan tier:
    - basic:      100 requests/minute
    - pro:        600 requests/minute
    - enterprise: 5000 requests/minute

Usage:
    from app.middleware.rate_limiter import init_rate_limits
    init_rate_limits(app, limiter)
"""

from flask import g, request as flask_request

# ── Plan-based rate limits ───────────────────────────────────────────────

PLAN_RATE_LIMITS = {
    "basic": "100/minute",
    "pro": "600/minute",
    "enterprise": "5000/minute",
}

DEFAULT_PLAN_LIMIT = "100/minute"

AUTH_LIMIT = "20/minute"
WRITE_LIMIT = "60/minute"

ENTITY_BLUEPRINTS = (
    "goal", "initiative", "customer", "feedback", "idea", "comment", "dashboard", "users",
)


def _get_tenant_rate_limit_key():
    """Dynamic rate limit key: tenant_id if available, else remote IP."""
    tenant_id = getattr(g, "tenant_id", None)
    if tenant_id:
        return f"tenant:{tenant_id}"
    return flask_request.remote_addr or "unknown"


def _get_tenant_plan_limit():
    """Return the rate limit string for the current tenant's plan."""
    tenant = getattr(g, "tenant", None)
    if tenant:
        return PLAN_RATE_LIMITS.get(tenant.plan_tier, DEFAULT_PLAN_LIMIT)
    return DEFAULT_PLAN_LIMIT


def _is_read():
    return flask_request.method in ("GET", "HEAD", "OPTIONS")


def init_rate_limits(app, limiter):
    """
    Apply rate limits to API blueprints.

    Limits:
        - Auth endpoints:   20/minute per IP  (credential stuffing)
        - Entity writes:    60/minute per IP  (POST/PUT/DELETE)
        - Entity traffic:   plan quota per tenant
        - Health check:     exempt

    Rate limiting is disabled in testing mode.
    """

    if app.config.get("TESTING"):
        app.logger.info("Rate limiter disabled (TESTING=True)")
        return

    bp = app.blueprints.get("auth")
    if bp:
        limiter.limit(AUTH_LIMIT)(bp)

    plan_quota = limiter.shared_limit(
        _get_tenant_plan_limit, scope="tenant_plan", key_func=_get_tenant_rate_limit_key,
    )
    for bp_name in ENTITY_BLUEPRINTS:
        bp = app.blueprints.get(bp_name)
        if bp:
            limiter.limit(WRITE_LIMIT, exempt_when=_is_read)(bp)
            plan_quota(bp)

    bp = app.blueprints.get("health")
    if bp:
        limiter.exempt(bp)

    app.logger.info(
        "Rate limiter configured — auth: %s, write: %s, tenant plans: %s",
        AUTH_LIMIT, WRITE_LIMIT, PLAN_RATE_LIMITS,
    )
