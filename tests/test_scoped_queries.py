"""
Tests for app/services/helpers/scoped_queries.py

These tests are security-critical: they verify the tenant isolation
helper behaves correctly when handed ids from another tenant.

Scenarios covered:
  1. ValueError when tenant_id is None
  2. ValueError when the model has no tenant_id column
  3. NotFoundError when PK is correct but tenant does not match
  4. Correct entity returned when PK + tenant both match
  5. get_scoped_or_none returns None instead of raising NotFoundError
  6. get_scoped_or_none still raises ValueError for a missing scope
"""

import pytest

from app.core.exceptions import NotFoundError
from app.models import db
from app.models.auth import Tenant
from app.models.product import Customer, Goal
from app.services.helpers.scoped_queries import get_scoped, get_scoped_or_none


def _make_goal(tenant_id, title="Test Goal"):
    goal = Goal(tenant_id=tenant_id, title=title, status="planned")
    db.session.add(goal)
    db.session.flush()
    return goal


# ── 1-2. ValueError — no usable scope ────────────────────────────────────────


class TestScopeRequired:
    def test_none_tenant_raises_value_error(self):
        with pytest.raises(ValueError, match="requires a tenant_id scope"):
            get_scoped(Goal, 1, tenant_id=None)

    def test_error_message_includes_model_name(self):
        with pytest.raises(ValueError, match="Goal"):
            get_scoped(Goal, 1, tenant_id=None)

    def test_model_without_tenant_column(self, tenant):
        with pytest.raises(ValueError, match="no tenant_id column"):
            get_scoped(Tenant, tenant.id, tenant_id=tenant.id)


# ── 3. NotFoundError — cross-tenant access ───────────────────────────────────


class TestWrongScope:
    def test_wrong_tenant_raises_not_found(self, tenant, other_tenant):
        goal = _make_goal(tenant.id)
        with pytest.raises(NotFoundError):
            get_scoped(Goal, goal.id, tenant_id=other_tenant.id)

    def test_nonexistent_pk_raises_not_found(self, tenant):
        with pytest.raises(NotFoundError):
            get_scoped(Goal, 999_999, tenant_id=tenant.id)

    def test_not_found_error_carries_resource_name(self, tenant):
        with pytest.raises(NotFoundError) as exc_info:
            get_scoped(Customer, 999_999, tenant_id=tenant.id)
        assert exc_info.value.resource == "Customer"
        assert exc_info.value.resource_id == 999_999


# ── 4. Happy path ────────────────────────────────────────────────────────────


class TestCorrectScope:
    def test_returns_entity(self, tenant):
        goal = _make_goal(tenant.id, title="Mine")
        result = get_scoped(Goal, goal.id, tenant_id=tenant.id)
        assert result.id == goal.id
        assert result.title == "Mine"

    def test_picks_correct_entity_among_many(self, tenant):
        _make_goal(tenant.id, title="One")
        second = _make_goal(tenant.id, title="Two")
        assert get_scoped(Goal, second.id, tenant_id=tenant.id).title == "Two"


# ── 5-6. get_scoped_or_none ──────────────────────────────────────────────────


class TestGetScopedOrNone:
    def test_none_pk(self, tenant):
        assert get_scoped_or_none(Goal, None, tenant_id=tenant.id) is None

    def test_nonexistent_pk(self, tenant):
        assert get_scoped_or_none(Goal, 999_999, tenant_id=tenant.id) is None

    def test_wrong_tenant(self, tenant, other_tenant):
        goal = _make_goal(tenant.id)
        assert get_scoped_or_none(Goal, goal.id, tenant_id=other_tenant.id) is None

    def test_correct_scope(self, tenant):
        goal = _make_goal(tenant.id)
        assert get_scoped_or_none(Goal, goal.id, tenant_id=tenant.id).id == goal.id

    def test_still_requires_scope(self):
        with pytest.raises(ValueError):
            get_scoped_or_none(Goal, 1, tenant_id=None)
