"""
Platform-wide exception hierarchy.

Services raise these types; app/__init__.py registers a single error handler
per type so every blueprint gets consistent HTTP status codes and JSON bodies
without its own try/except ladder.

Usage:
    from app.core.exceptions import NotFoundError, ValidationError, bad_request

    raise NotFoundError(resource="Goal", resource_id=42)
    raise ValidationError("Title is required", details={"title": "required"})
    raise bad_request("Email and password are required")
"""


class ApiError(Exception):
    """HTTP-aware error carrying a status code, message and optional payload.

    Serialized by the global handler as ``{"error": message, "data": data}``;
    a ``stack`` field is added only when the app runs in debug mode.
    """

    def __init__(self, status_code: int, message: str, data=None) -> None:
        self.status_code = status_code
        self.message = message
        self.data = data
        super().__init__(message)


def bad_request(message: str = "Bad request", data=None) -> ApiError:
    return ApiError(400, message, data)


def unauthorized(message: str = "Authentication required", data=None) -> ApiError:
    return ApiError(401, message, data)


def forbidden(message: str = "Access denied", data=None) -> ApiError:
    return ApiError(403, message, data)


def not_found(message: str = "Resource not found", data=None) -> ApiError:
    return ApiError(404, message, data)


def server_error(message: str = "Internal server error", data=None) -> ApiError:
    return ApiError(500, message, data)


class NotFoundError(Exception):
    """Raised when a requested resource does not exist within the given scope.

    Security note: Used for BOTH genuinely missing records AND cross-tenant
    access attempts. A 403 would confirm the resource exists; a 404 does not.

    Args:
        resource: Human-readable model/entity name (e.g. "Goal", "Idea").
        resource_id: The PK that was looked up. Included in logs, not in HTTP response.
        tenant_id: Optional — the scope that was enforced. For debug logging only.
    """

    def __init__(
        self,
        resource: str,
        resource_id: int | str | None = None,
        tenant_id: int | None = None,
    ) -> None:
        self.resource = resource
        self.resource_id = resource_id
        self.tenant_id = tenant_id
        msg = f"{resource}"
        if resource_id is not None:
            msg += f" id={resource_id}"
        msg += " not found"
        if tenant_id is not None:
            msg += f" (tenant={tenant_id})"
        super().__init__(msg)


class ValidationError(Exception):
    """Raised when input fails validation in the service layer.

    Covers missing required fields, values outside an allowed set
    (status, sentiment, priority, effort) and references to rows the
    caller's tenant does not own. Maps to HTTP 400.

    Args:
        message: Human-readable explanation of what failed.
        details: Optional field-level breakdown for structured API responses.
                 Keys are field names; values are error descriptions.
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message)


class ConflictError(Exception):
    """Raised when an operation would violate a uniqueness rule.

    Maps to HTTP 409.

    Args:
        resource: Model name.
        field: The unique field that would be duplicated.
        value: The conflicting value.
    """

    def __init__(self, resource: str, field: str, value: str | None = None) -> None:
        self.resource = resource
        self.field = field
        self.value = value
        msg = f"{resource} with {field}={value!r} already exists"
        super().__init__(msg)
