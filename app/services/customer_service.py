"""Customer service — accounts that feedback and ideas are attributed to."""

from app.core.exceptions import ValidationError
from app.models.product import CUSTOMER_STATUSES, Customer
from app.services.entity_service import EntityHandler
from app.utils.helpers import parse_revenue


def _preprocess(data, tenant_id, obj):
    if "name" in data and isinstance(data["name"], str):
        data["name"] = data["name"].strip()
    if "revenue" in data:
        try:
            data["revenue"] = parse_revenue(data["revenue"])
        except ValueError as exc:
            raise ValidationError(
                "Invalid revenue. Must be a number",
                details={"revenue": str(exc)},
            ) from exc
    return data


handler = EntityHandler(
    Customer,
    fields=("name", "status", "revenue"),
    required=("name", "status"),
    choices={"status": CUSTOMER_STATUSES},
    defaults={"status": "active"},
    allowed_filters=("status",),
    search_fields=("name",),
    sort_fields=("name", "status", "revenue", "created_at", "updated_at"),
    default_sort="name",
    default_order="asc",
    preprocess=_preprocess,
)


def list_customers(tenant_id, **params):
    return handler.list(tenant_id, **params)


def get_customer(tenant_id, customer_id):
    return handler.get(tenant_id, customer_id)


def create_customer(tenant_id, data):
    return handler.create(tenant_id, data)


def update_customer(tenant_id, customer_id, data):
    return handler.update(tenant_id, customer_id, data)


def delete_customer(tenant_id, customer_id):
    """Feedback keeps the row with customer_id cleared; idea links are dropped."""
    handler.delete(tenant_id, customer_id)
