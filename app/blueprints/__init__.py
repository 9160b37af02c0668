"""
Echo
Blueprint registry and shared request helpers.
"""

from flask import jsonify, request

from app.core.exceptions import ValidationError

LIST_CONTROL_PARAMS = ("search", "sort", "page", "limit")


def list_params(allowed_filters=()):
    """Collect list query params for EntityHandler.list().

    Query params:
        <filter>  — exact match for each allowed filter (e.g. status=active)
        search    — case-insensitive substring match
        sort      — "field:asc" / "field:desc"
        page      — 1-based page number
        limit     — page size (capped by ECHO_MAX_PAGE_SIZE)
    """
    params = {name: request.args.get(name) for name in LIST_CONTROL_PARAMS}
    params["filters"] = {
        name: request.args.get(name) for name in allowed_filters if name in request.args
    }
    return params


def list_response(items, total):
    """Bare JSON array, with the unpaged total in X-Total-Count."""
    response = jsonify(items)
    response.headers["X-Total-Count"] = str(total)
    return response


def json_body():
    """Request body as a dict; a JSON array or scalar is a 400."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object", details={"body": "must be an object"})
    return data


def text_field(data, *names):
    """First of ``names`` present in ``data``. Non-string values are a 400."""
    for name in names:
        value = data.get(name)
        if value is None:
            continue
        if not isinstance(value, str):
            raise ValidationError(f"{name} must be a string", details={name: "must be a string"})
        return value
    return None
