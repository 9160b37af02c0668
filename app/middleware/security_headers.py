"""
Security headers middleware.

Echo serves JSON only, so the policy is locked down: nothing may be framed,
embedded or executed from an API response. Auth responses carry tokens and
are additionally marked uncacheable.

Usage:
    from app.middleware.security_headers import init_security_headers
    init_security_headers(app)
"""

from flask import request

_NO_STORE_PREFIX = "/api/v1/auth/"


def init_security_headers(app):
    """Register after_request handler that injects security headers."""

    @app.after_request
    def _add_security_headers(response):
        response.headers.setdefault(
            "Content-Security-Policy", "default-src 'none'; frame-ancestors 'none'"
        )
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        # Ignored over plain HTTP
        response.headers.setdefault(
            "Strict-Transport-Security", "max-age=31536000; includeSubDomains"
        )
        response.headers.setdefault("Referrer-Policy", "no-referrer")

        if request.path.startswith(_NO_STORE_PREFIX):
            response.headers["Cache-Control"] = "no-store"

        response.headers.pop("Server", None)
        return response
