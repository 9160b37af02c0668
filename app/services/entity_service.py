"""
Generic tenant-scoped CRUD handlers.

Every Echo entity (goal, initiative, customer, feedback, idea) is managed by
an ``EntityHandler`` configured with its writable fields, required fields,
allowed values and optional hooks. The per-entity services build one handler
each and add whatever behaviour is specific to them.

Hook signatures:
    preprocess(data, tenant_id, obj)          → data    (obj is None on create)
    postprocess(obj, data, tenant_id, created) → None   (runs after flush, before commit)
    on_delete(obj, tenant_id)                 → None   (runs before the row is deleted)
    serialize(obj)                            → dict
    sort_expressions[name]                    → SQL expression ordered instead of the column
    filter_hooks[name](query, value)          → query

Rules enforced for every entity:
  - tenant_id always comes from the caller's auth context, never the body
  - lookups go through get_scoped(): cross-tenant ids behave as missing
  - PUT is partial: fields absent from the body are left untouched
  - list never returns another tenant's rows; no tenant → empty list
"""

import logging

from flask import current_app, has_app_context
from sqlalchemy import String, or_

from app.core.exceptions import ValidationError
from app.models import db
from app.services.helpers.scoped_queries import get_scoped
from app.utils.helpers import commit_or_raise, parse_int
from app.utils.validation import check_choice

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 200

_PROTECTED_FIELDS = ("id", "tenant_id", "created_at", "updated_at")


def is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _label(name: str) -> str:
    return name.replace("_", " ").capitalize()


def parse_sort(raw: str | None, default_sort: str, default_order: str, allowed) -> tuple[str, str]:
    """Parse ``field[:asc|desc]``; unknown fields fall back to the default sort."""
    if not raw:
        return default_sort, default_order
    field, _, order = raw.partition(":")
    field = field.strip()
    if field not in allowed:
        return default_sort, default_order
    if order:
        order = "asc" if order.strip().lower() == "asc" else "desc"
    else:
        order = default_order
    return field, order


def _page_limits():
    if has_app_context():
        return (
            current_app.config.get("ECHO_PAGE_SIZE", DEFAULT_PAGE_SIZE),
            current_app.config.get("ECHO_MAX_PAGE_SIZE", MAX_PAGE_SIZE),
        )
    return DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE


class EntityHandler:
    """Create / list / get / update / delete for one tenant-scoped model."""

    def __init__(
        self,
        model,
        *,
        label: str | None = None,
        fields=(),
        required=(),
        choices: dict | None = None,
        defaults: dict | None = None,
        allowed_filters=("status",),
        filter_hooks: dict | None = None,
        search_fields=("title", "description"),
        sort_fields=("created_at",),
        sort_expressions: dict | None = None,
        default_sort: str = "created_at",
        default_order: str = "desc",
        preprocess=None,
        postprocess=None,
        on_delete=None,
        serialize=None,
        serialize_detail=None,
    ):
        self.model = model
        self.label = label or model.__name__
        self.fields = tuple(fields)
        self.required = tuple(required)
        self.choices = choices or {}
        self.defaults = defaults or {}
        self.allowed_filters = tuple(allowed_filters)
        self.filter_hooks = filter_hooks or {}
        self.search_fields = tuple(search_fields)
        self.sort_fields = tuple(sort_fields)
        self.sort_expressions = sort_expressions or {}
        self.default_sort = default_sort
        self.default_order = default_order
        self.preprocess = preprocess
        self.postprocess = postprocess
        self.on_delete = on_delete
        self.serialize = serialize or (lambda obj: obj.to_dict())
        self.serialize_detail = serialize_detail or self.serialize

        # String / Text columns among the writable fields, with their length (None for Text)
        self.text_lengths = {}
        for name in self.fields:
            column = model.__table__.columns.get(name)
            if column is not None and isinstance(column.type, String):
                self.text_lengths[name] = column.type.length

    # ── Validation ───────────────────────────────────────────────────────

    def _text_problems(self, data: dict, *, check_length: bool) -> dict:
        errors = {}
        for name, length in self.text_lengths.items():
            value = data.get(name)
            if value is None:
                continue
            if not isinstance(value, str):
                errors[name] = f"{_label(name)} must be a string"
            elif check_length and length and name not in self.choices and len(value) > length:
                errors[name] = f"{_label(name)} must be at most {length} characters"
        return errors

    def _check_types(self, data: dict) -> None:
        """Reject non-string values for text columns before any hook touches them."""
        errors = self._text_problems(data, check_length=False)
        if errors:
            raise ValidationError(next(iter(errors.values())), details=errors)

    def _validate(self, data: dict, *, partial: bool) -> None:
        errors = self._text_problems(data, check_length=True)
        for name in self.required:
            if name in errors or (partial and name not in data):
                continue
            if is_blank(data.get(name)):
                errors[name] = f"{_label(name)} is required"
        for name, allowed in self.choices.items():
            if name in errors or name not in data:
                continue
            value = data[name]
            if value is None and name not in self.required:
                continue
            problem = check_choice(name, value, allowed)
            if problem:
                errors[name] = problem
        if errors:
            # First problem is the headline; all of them go in details
            raise ValidationError(next(iter(errors.values())), details=errors)

    def _clean(self, data: dict | None) -> dict:
        data = dict(data or {})
        for name in _PROTECTED_FIELDS:
            data.pop(name, None)
        return data

    def _apply_defaults(self, data: dict) -> None:
        for name, default in self.defaults.items():
            if is_blank(data.get(name)):
                data[name] = default(data) if callable(default) else default

    # ── Create ───────────────────────────────────────────────────────────

    def create(self, tenant_id: int, data: dict) -> dict:
        """Insert a row for ``tenant_id`` and return its serialized form."""
        data = self._clean(data)
        self._check_types(data)
        if self.preprocess:
            data = self.preprocess(data, tenant_id, None)
        self._apply_defaults(data)
        self._validate(data, partial=False)

        values = {name: data[name] for name in self.fields if name in data}
        obj = self.model(tenant_id=tenant_id, **values)
        db.session.add(obj)
        db.session.flush()
        if self.postprocess:
            self.postprocess(obj, data, tenant_id, True)
        commit_or_raise(self.label)

        logger.info(
            "%s created",
            self.label,
            extra={"tenant_id": tenant_id, "event_type": f"{self.label.lower()}_created"},
        )
        return self.serialize(obj)

    # ── Read ─────────────────────────────────────────────────────────────

    def get_object(self, tenant_id: int, pk: int):
        return get_scoped(self.model, pk, tenant_id=tenant_id)

    def get(self, tenant_id: int, pk: int) -> dict:
        return self.serialize_detail(self.get_object(tenant_id, pk))

    def _coerce_filter(self, name: str, value):
        column = getattr(self.model, name)
        try:
            python_type = column.type.python_type
        except (AttributeError, NotImplementedError):
            return value
        if python_type is int:
            parsed = parse_int(value)
            if parsed is None:
                raise ValidationError(f"Invalid {name} filter", details={name: "must be an integer"})
            return parsed
        return value

    def build_query(self, tenant_id: int, *, filters: dict | None = None, search: str | None = None):
        query = self.model.query_for_tenant(tenant_id)
        filters = filters or {}
        for name in self.allowed_filters:
            value = filters.get(name)
            if is_blank(value):
                continue
            hook = self.filter_hooks.get(name)
            if hook:
                query = hook(query, value)
            else:
                query = query.filter(getattr(self.model, name) == self._coerce_filter(name, value))

        if search and search.strip() and self.search_fields:
            pattern = f"%{search.strip()}%"
            query = query.filter(or_(*[
                getattr(self.model, name).ilike(pattern) for name in self.search_fields
            ]))
        return query

    def list(
        self,
        tenant_id: int | None,
        *,
        filters: dict | None = None,
        search: str | None = None,
        sort: str | None = None,
        page=None,
        limit=None,
    ) -> tuple[list[dict], int]:
        """Return ``(items, total)`` for one page of the tenant's rows."""
        if tenant_id is None:
            return [], 0

        query = self.build_query(tenant_id, filters=filters, search=search)
        total = query.order_by(None).count()

        field, order = parse_sort(sort, self.default_sort, self.default_order, self.sort_fields)
        column = self.sort_expressions.get(field)
        if column is None:
            column = getattr(self.model, field)
        query = query.order_by(column.asc() if order == "asc" else column.desc(), self.model.id.asc())

        default_size, max_size = _page_limits()
        page = max(parse_int(page) or 1, 1)
        limit = parse_int(limit) or default_size
        limit = min(max(limit, 1), max_size)

        items = query.limit(limit).offset((page - 1) * limit).all()
        return [self.serialize(obj) for obj in items], total

    # ── Update ───────────────────────────────────────────────────────────

    def update(self, tenant_id: int, pk: int, data: dict) -> dict:
        """Partial update: only whitelisted fields present in ``data`` change."""
        obj = self.get_object(tenant_id, pk)
        data = self._clean(data)
        self._check_types(data)
        if self.preprocess:
            data = self.preprocess(data, tenant_id, obj)
        self._validate(data, partial=True)

        for name in self.fields:
            if name in data:
                setattr(obj, name, data[name])
        if self.postprocess:
            self.postprocess(obj, data, tenant_id, False)
        commit_or_raise(self.label)
        return self.serialize(obj)

    # ── Delete ───────────────────────────────────────────────────────────

    def delete(self, tenant_id: int, pk: int) -> None:
        obj = self.get_object(tenant_id, pk)
        if self.on_delete:
            self.on_delete(obj, tenant_id)
        db.session.delete(obj)
        commit_or_raise(self.label)
        logger.info(
            "%s %s deleted",
            self.label,
            pk,
            extra={"tenant_id": tenant_id, "event_type": f"{self.label.lower()}_deleted"},
        )
