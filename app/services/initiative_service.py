"""Initiative service — prioritised bodies of work, optionally under a goal."""

from app.core.exceptions import ValidationError
from app.models.product import INITIATIVE_PRIORITY_RANGE, INITIATIVE_STATUSES, Goal, Initiative
from app.services import comment_service
from app.services.entity_service import EntityHandler, is_blank
from app.services.helpers.scoped_queries import get_scoped_or_none
from app.utils.helpers import parse_int


def _preprocess(data, tenant_id, obj):
    if "title" in data and isinstance(data["title"], str):
        data["title"] = data["title"].strip()

    if "priority" in data:
        low, high = INITIATIVE_PRIORITY_RANGE
        priority = parse_int(data["priority"])
        if priority is None or not low <= priority <= high:
            raise ValidationError(
                f"Invalid priority. Must be an integer from {low} to {high}",
                details={"priority": f"must be {low}-{high}"},
            )
        data["priority"] = priority

    if "goal_id" in data:
        raw = data["goal_id"]
        if is_blank(raw) or raw == "none":
            data["goal_id"] = None
        else:
            goal = get_scoped_or_none(Goal, parse_int(raw), tenant_id=tenant_id)
            if goal is None:
                raise ValidationError("Invalid goal_id", details={"goal_id": "goal not found"})
            data["goal_id"] = goal.id
    return data


def _on_delete(initiative, tenant_id):
    comment_service.delete_for_entity(tenant_id, "initiative", initiative.id)


handler = EntityHandler(
    Initiative,
    fields=("title", "description", "status", "priority", "goal_id"),
    required=("title", "status"),
    choices={"status": INITIATIVE_STATUSES},
    defaults={"status": "planned", "priority": 3, "description": ""},
    allowed_filters=("status", "goal_id"),
    sort_fields=("title", "status", "priority", "created_at", "updated_at"),
    preprocess=_preprocess,
    on_delete=_on_delete,
)


def list_initiatives(tenant_id, **params):
    return handler.list(tenant_id, **params)


def get_initiative(tenant_id, initiative_id):
    return handler.get(tenant_id, initiative_id)


def create_initiative(tenant_id, data):
    return handler.create(tenant_id, data)


def update_initiative(tenant_id, initiative_id, data):
    return handler.update(tenant_id, initiative_id, data)


def delete_initiative(tenant_id, initiative_id):
    handler.delete(tenant_id, initiative_id)
