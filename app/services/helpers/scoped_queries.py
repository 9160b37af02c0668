"""
Tenant-scoped query helpers.

Every get-by-id in Echo MUST use these helpers instead of
Model.query.get(pk) or db.session.get(Model, pk). Direct .get() calls
bypass tenant isolation.

Usage:
    goal = get_scoped(Goal, goal_id, tenant_id=tenant_id)

    # When None is an acceptable outcome (optional FK lookups)
    customer = get_scoped_or_none(Customer, customer_id, tenant_id=tenant_id)

Cross-tenant access is indistinguishable from a missing record: both raise
NotFoundError → HTTP 404. This prevents information disclosure (HTTP 403
would confirm the resource exists).
"""

import logging

from sqlalchemy import select

from app.core.exceptions import NotFoundError
from app.models import db

logger = logging.getLogger(__name__)


def get_scoped(model, pk: int, *, tenant_id: int | None):
    """Fetch a single entity by PK, filtered by tenant_id.

    Args:
        model: SQLAlchemy model class with `id` and `tenant_id` columns.
        pk: Primary key value to look up.
        tenant_id: Tenant scope. Required — an unscoped lookup is a bug.

    Returns:
        The model instance if found within the tenant.

    Raises:
        ValueError: If tenant_id is None or the model has no tenant_id column.
        NotFoundError: If the entity does not exist OR belongs to another
                       tenant. The two cases are intentionally indistinguishable.
    """
    if tenant_id is None:
        raise ValueError(
            f"{model.__name__} id={pk} requires a tenant_id scope. "
            "Unscoped lookups are forbidden — they bypass tenant isolation."
        )
    if not hasattr(model, "tenant_id"):
        raise ValueError(
            f"{model.__name__} has no tenant_id column. "
            "Refusing to perform an unscoped lookup."
        )

    stmt = select(model).where(model.id == pk, model.tenant_id == tenant_id)
    result = db.session.execute(stmt).scalar_one_or_none()

    if result is None:
        logger.debug(
            "get_scoped: %s id=%s not found in tenant %s",
            model.__name__,
            pk,
            tenant_id,
        )
        raise NotFoundError(resource=model.__name__, resource_id=pk)

    return result


def get_scoped_or_none(model, pk: int | None, *, tenant_id: int | None):
    """Same as get_scoped but returns None instead of raising NotFoundError.

    A None ``pk`` also yields None, which keeps optional-FK call sites short.
    Still raises ValueError for a missing tenant scope.
    """
    if pk is None:
        return None
    try:
        return get_scoped(model, pk, tenant_id=tenant_id)
    except NotFoundError:
        return None
