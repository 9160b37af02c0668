"""
Dashboard service — tenant-wide counts for the home screen.

All aggregates are computed in SQL with GROUP BY; nothing is cached.
"""

from sqlalchemy import func

from app.models import db
from app.models.product import (
    GOAL_STATUSES,
    IDEA_PRIORITIES,
    IDEA_STATUSES,
    SENTIMENTS,
    Customer,
    Feedback,
    Goal,
    Idea,
    Initiative,
)

TOP_CUSTOMERS = 5
RECENT_FEEDBACK = 5


def _count(model, tenant_id, *criteria):
    return db.session.query(func.count(model.id)).filter(
        model.tenant_id == tenant_id, *criteria,
    ).scalar() or 0


def _grouped(column, model, tenant_id, keys):
    rows = (
        db.session.query(column, func.count(model.id))
        .filter(model.tenant_id == tenant_id)
        .group_by(column)
        .all()
    )
    counts = {key: 0 for key in keys}
    for key, n in rows:
        counts[key] = n
    return counts


def get_summary(tenant_id: int) -> dict:
    top_customers = (
        Customer.query_for_tenant(tenant_id)
        .filter(Customer.revenue.isnot(None))
        .order_by(Customer.revenue.desc(), Customer.name.asc())
        .limit(TOP_CUSTOMERS)
        .all()
    )
    recent_feedback = (
        Feedback.query_for_tenant(tenant_id)
        .order_by(Feedback.created_at.desc(), Feedback.id.desc())
        .limit(RECENT_FEEDBACK)
        .all()
    )

    return {
        "totals": {
            "goals": _count(Goal, tenant_id),
            "initiatives": _count(Initiative, tenant_id),
            "customers": _count(Customer, tenant_id),
            "feedback": _count(Feedback, tenant_id),
            "ideas": _count(Idea, tenant_id),
        },
        "active_customers": _count(Customer, tenant_id, Customer.status == "active"),
        "ideas_by_status": _grouped(Idea.status, Idea, tenant_id, IDEA_STATUSES),
        "ideas_by_priority": _grouped(Idea.priority, Idea, tenant_id, IDEA_PRIORITIES),
        "feedback_by_sentiment": _grouped(Feedback.sentiment, Feedback, tenant_id, SENTIMENTS),
        "goals_by_status": _grouped(Goal.status, Goal, tenant_id, GOAL_STATUSES),
        "top_customers": [
            {"id": c.id, "name": c.name, "revenue": float(c.revenue)} for c in top_customers
        ],
        "recent_feedback": [f.to_dict() for f in recent_feedback],
    }
