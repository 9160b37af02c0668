"""Feedback service — customer feedback items and their comment threads."""

from app.core.exceptions import ValidationError
from app.models.product import SENTIMENTS, Customer, Feedback, Initiative
from app.services import comment_service
from app.services.entity_service import EntityHandler, is_blank
from app.services.helpers.scoped_queries import get_scoped_or_none
from app.utils.helpers import parse_int


def _resolve_fk(data, name, model, tenant_id):
    raw = data[name]
    if is_blank(raw) or raw == "none":
        data[name] = None
        return
    row = get_scoped_or_none(model, parse_int(raw), tenant_id=tenant_id)
    if row is None:
        raise ValidationError(f"Invalid {name}", details={name: "not found"})
    data[name] = row.id


def _preprocess(data, tenant_id, obj):
    # The UI posts the headline as "content"
    if "content" in data and is_blank(data.get("title")):
        data["title"] = data["content"]
    data.pop("content", None)
    if isinstance(data.get("title"), str):
        data["title"] = data["title"].strip()

    for name, model in (("customer_id", Customer), ("initiative_id", Initiative)):
        if name in data:
            _resolve_fk(data, name, model, tenant_id)
    return data


def _on_delete(feedback, tenant_id):
    comment_service.delete_for_entity(tenant_id, "feedback", feedback.id)


def _detail(feedback):
    d = feedback.to_dict()
    d["comments"] = comment_service.list_comments(feedback.tenant_id, "feedback", feedback.id)
    return d


handler = EntityHandler(
    Feedback,
    fields=("title", "description", "sentiment", "customer_id", "initiative_id"),
    required=("title", "sentiment"),
    choices={"sentiment": SENTIMENTS},
    defaults={"sentiment": "neutral", "description": ""},
    allowed_filters=("sentiment", "customer_id", "initiative_id"),
    sort_fields=("title", "sentiment", "created_at", "updated_at"),
    preprocess=_preprocess,
    on_delete=_on_delete,
    serialize_detail=_detail,
)


def list_feedback(tenant_id, **params):
    return handler.list(tenant_id, **params)


def get_feedback(tenant_id, feedback_id):
    return handler.get(tenant_id, feedback_id)


def create_feedback(tenant_id, data):
    return handler.create(tenant_id, data)


def update_feedback(tenant_id, feedback_id, data):
    return handler.update(tenant_id, feedback_id, data)


def delete_feedback(tenant_id, feedback_id):
    handler.delete(tenant_id, feedback_id)
