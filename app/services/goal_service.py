"""Goal service — strategic goals and the initiatives grouped under them."""

from app.core.exceptions import ValidationError
from app.models.product import GOAL_STATUSES, Goal
from app.services import initiative_service
from app.services.entity_service import EntityHandler, is_blank
from app.utils.helpers import parse_date


def _preprocess(data, tenant_id, obj):
    if "title" in data and isinstance(data["title"], str):
        data["title"] = data["title"].strip()
    if "target_date" in data:
        raw = data["target_date"]
        if is_blank(raw):
            data["target_date"] = None
        else:
            parsed = parse_date(raw)
            if parsed is None:
                raise ValidationError(
                    "Invalid target_date. Use YYYY-MM-DD or DD.MM.YYYY",
                    details={"target_date": "invalid date"},
                )
            data["target_date"] = parsed
    return data


handler = EntityHandler(
    Goal,
    fields=("title", "description", "status", "target_date"),
    required=("title", "status"),
    choices={"status": GOAL_STATUSES},
    defaults={"status": "planned", "description": ""},
    allowed_filters=("status",),
    sort_fields=("title", "status", "target_date", "created_at", "updated_at"),
    preprocess=_preprocess,
    serialize_detail=lambda goal: goal.to_dict(include_initiatives=True),
)


def list_goals(tenant_id, **params):
    return handler.list(tenant_id, **params)


def get_goal(tenant_id, goal_id):
    return handler.get(tenant_id, goal_id)


def create_goal(tenant_id, data):
    return handler.create(tenant_id, data)


def update_goal(tenant_id, goal_id, data):
    return handler.update(tenant_id, goal_id, data)


def delete_goal(tenant_id, goal_id):
    """Initiatives of the goal survive with goal_id cleared."""
    handler.delete(tenant_id, goal_id)


def add_initiative(tenant_id, goal_id, data):
    """Create an initiative linked to ``goal_id``."""
    handler.get_object(tenant_id, goal_id)
    data = dict(data or {})
    data["goal_id"] = goal_id
    return initiative_service.create_initiative(tenant_id, data)
