"""Coded JSON error bodies for the service-exception handlers.

NotFoundError, ValidationError and ConflictError all answer with
``{"error": message, "code": E.*, "details"?: {...}}``; app/__init__.py picks
the code. ApiError keeps its own ``{"error", "data", "stack"}`` shape.
"""

from flask import jsonify


class E:
    """Machine-readable error codes."""

    VALIDATION_INVALID = "ERR_VALIDATION_INVALID"
    NOT_FOUND = "ERR_NOT_FOUND"
    CONFLICT_DUPLICATE = "ERR_CONFLICT_DUPLICATE"


_STATUS = {
    E.VALIDATION_INVALID: 400,
    E.NOT_FOUND: 404,
    E.CONFLICT_DUPLICATE: 409,
}


def api_error(code: str, message: str, *, details: dict | None = None):
    """``(response, status)`` for one of the ``E`` codes."""
    body = {"error": message, "code": code}
    if details:
        body["details"] = details
    return jsonify(body), _STATUS[code]
