"""
Idea service — product ideas linked to customers and initiatives.

Create is forgiving so that quick capture never fails: a missing title is
derived from the description, and unknown customer / initiative ids are
skipped with a warning. Update is strict and rejects them with 400.
"""

import logging

from sqlalchemy import case

from app.core.exceptions import ValidationError
from app.models.base import utcnow
from app.models.product import (
    IDEA_EFFORTS,
    IDEA_PRIORITIES,
    IDEA_STATUSES,
    Customer,
    Idea,
    Initiative,
)
from app.services import comment_service
from app.services.entity_service import EntityHandler, is_blank
from app.services.helpers.scoped_queries import get_scoped_or_none
from app.utils.helpers import parse_int

logger = logging.getLogger(__name__)

TITLE_FROM_DESCRIPTION_CHARS = 100

# Higher rank = more urgent / more work; IDEA_PRIORITIES runs urgent → low
PRIORITY_RANK = {name: len(IDEA_PRIORITIES) - i for i, name in enumerate(IDEA_PRIORITIES)}
EFFORT_RANK = {name: i + 1 for i, name in enumerate(IDEA_EFFORTS)}


def _default_title(data):
    description = (data.get("description") or "").strip()
    if description:
        return description[:TITLE_FROM_DESCRIPTION_CHARS]
    return f"New idea {utcnow().isoformat()}"


def _requested_customer_ids(data):
    """Return the raw id list from ``customer_ids`` / ``customer_id``, or None if absent."""
    if "customer_ids" in data:
        raw = data.pop("customer_ids")
        data.pop("customer_id", None)
        if raw is None:
            return []
        return list(raw) if isinstance(raw, (list, tuple)) else [raw]
    if "customer_id" in data:
        raw = data.pop("customer_id")
        return [] if is_blank(raw) or raw == "none" else [raw]
    return None


def _resolve_customers(raw_ids, tenant_id, *, strict):
    customers, seen = [], set()
    for raw in raw_ids:
        customer = get_scoped_or_none(Customer, parse_int(raw), tenant_id=tenant_id)
        if customer is None:
            if strict:
                raise ValidationError(
                    f"Invalid customer id: {raw}", details={"customer_ids": "not found"},
                )
            logger.warning(
                "Skipping unknown customer id %r on idea create",
                raw,
                extra={"tenant_id": tenant_id, "event_type": "idea_customer_skipped"},
            )
            continue
        if customer.id not in seen:
            seen.add(customer.id)
            customers.append(customer)
    return customers


def _preprocess(data, tenant_id, obj):
    creating = obj is None
    if isinstance(data.get("title"), str):
        data["title"] = data["title"].strip()

    if "initiative_id" in data:
        raw = data["initiative_id"]
        if is_blank(raw) or raw == "none":
            data["initiative_id"] = None
        else:
            initiative = get_scoped_or_none(Initiative, parse_int(raw), tenant_id=tenant_id)
            if initiative is not None:
                data["initiative_id"] = initiative.id
            elif creating:
                logger.warning(
                    "Dropping unknown initiative id %r on idea create",
                    raw,
                    extra={"tenant_id": tenant_id, "event_type": "idea_initiative_skipped"},
                )
                data["initiative_id"] = None
            else:
                raise ValidationError(
                    "Invalid initiative_id", details={"initiative_id": "not found"},
                )

    raw_ids = _requested_customer_ids(data)
    if raw_ids is not None:
        data["_customers"] = _resolve_customers(raw_ids, tenant_id, strict=not creating)
    return data


def _postprocess(idea, data, tenant_id, created):
    if "_customers" in data:
        idea.customers = data["_customers"]


def _on_delete(idea, tenant_id):
    comment_service.delete_for_entity(tenant_id, "idea", idea.id)


def _serialize(idea):
    d = idea.to_dict()
    d["comment_count"] = comment_service.count_comments(idea.tenant_id, "idea", idea.id)
    return d


def _detail(idea):
    d = _serialize(idea)
    d["comments"] = comment_service.list_comments(idea.tenant_id, "idea", idea.id)
    return d


def _filter_by_customer(query, value):
    customer_id = parse_int(value)
    if customer_id is None:
        raise ValidationError("Invalid customer_id filter", details={"customer_id": "must be an integer"})
    return query.filter(Idea.customers.any(Customer.id == customer_id))


handler = EntityHandler(
    Idea,
    fields=("title", "description", "priority", "effort", "status", "source", "initiative_id"),
    required=("title", "priority", "effort", "status"),
    choices={
        "priority": IDEA_PRIORITIES,
        "effort": IDEA_EFFORTS,
        "status": IDEA_STATUSES,
    },
    defaults={
        "status": "new",
        "priority": "medium",
        "effort": "m",
        "source": "internal",
        "description": "",
        "title": _default_title,
    },
    allowed_filters=("status", "priority", "effort", "initiative_id", "customer_id"),
    filter_hooks={"customer_id": _filter_by_customer},
    sort_fields=("title", "priority", "effort", "status", "created_at", "updated_at"),
    sort_expressions={
        "priority": case(PRIORITY_RANK, value=Idea.priority, else_=0),
        "effort": case(EFFORT_RANK, value=Idea.effort, else_=0),
    },
    preprocess=_preprocess,
    postprocess=_postprocess,
    on_delete=_on_delete,
    serialize=_serialize,
    serialize_detail=_detail,
)


def list_ideas(tenant_id, **params):
    return handler.list(tenant_id, **params)


def get_idea(tenant_id, idea_id):
    return handler.get(tenant_id, idea_id)


def create_idea(tenant_id, data):
    return handler.create(tenant_id, data)


def update_idea(tenant_id, idea_id, data):
    return handler.update(tenant_id, idea_id, data)


def delete_idea(tenant_id, idea_id):
    handler.delete(tenant_id, idea_id)
