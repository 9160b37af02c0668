"""
Dashboard tests — summary aggregates per tenant.
"""

from app.models import db
from app.models.product import Customer, Feedback, Goal, Idea
from app.services.dashboard_service import get_summary


def _seed(tenant_id):
    db.session.add_all([
        Goal(tenant_id=tenant_id, title="G1", status="active"),
        Goal(tenant_id=tenant_id, title="G2", status="active"),
        Goal(tenant_id=tenant_id, title="G3", status="completed"),
    ])
    customers = [
        Customer(tenant_id=tenant_id, name=f"C{i}", revenue=revenue, status=status)
        for i, (revenue, status) in enumerate([
            (100, "active"), (700, "active"), (300, "inactive"), (None, "prospect"),
            (50, "active"), (900, "active"), (10, "active"),
        ])
    ]
    db.session.add_all(customers)
    db.session.flush()
    db.session.add_all([
        Idea(tenant_id=tenant_id, title="I1", status="new", priority="high"),
        Idea(tenant_id=tenant_id, title="I2", status="new", priority="low"),
        Idea(tenant_id=tenant_id, title="I3", status="completed", priority="high"),
    ])
    for i, sentiment in enumerate(["positive", "negative", "negative", "neutral", "positive", "positive"]):
        db.session.add(Feedback(
            tenant_id=tenant_id, title=f"F{i}", sentiment=sentiment, customer_id=customers[0].id,
        ))
        db.session.flush()
    db.session.commit()


class TestSummary:
    def test_empty_tenant_is_zero_filled(self, tenant):
        s = get_summary(tenant.id)
        assert s["totals"] == {"goals": 0, "initiatives": 0, "customers": 0, "feedback": 0, "ideas": 0}
        assert s["active_customers"] == 0
        assert s["goals_by_status"] == {"active": 0, "planned": 0, "completed": 0}
        assert s["feedback_by_sentiment"] == {"positive": 0, "neutral": 0, "negative": 0}
        assert set(s["ideas_by_status"]) == {"new", "planned", "in_progress", "completed", "rejected"}
        assert set(s["ideas_by_priority"]) == {"urgent", "high", "medium", "low"}
        assert s["top_customers"] == []
        assert s["recent_feedback"] == []

    def test_counts(self, tenant):
        _seed(tenant.id)
        s = get_summary(tenant.id)
        assert s["totals"] == {"goals": 3, "initiatives": 0, "customers": 7, "feedback": 6, "ideas": 3}
        assert s["active_customers"] == 5
        assert s["goals_by_status"] == {"active": 2, "planned": 0, "completed": 1}
        assert s["ideas_by_status"]["new"] == 2
        assert s["ideas_by_status"]["completed"] == 1
        assert s["ideas_by_priority"]["high"] == 2
        assert s["feedback_by_sentiment"] == {"positive": 3, "neutral": 1, "negative": 2}

    def test_top_customers_by_revenue(self, tenant):
        _seed(tenant.id)
        top = get_summary(tenant.id)["top_customers"]
        assert [c["name"] for c in top] == ["C5", "C1", "C2", "C0", "C4"]
        assert top[0]["revenue"] == 900.0

    def test_recent_feedback_latest_five(self, tenant):
        _seed(tenant.id)
        recent = get_summary(tenant.id)["recent_feedback"]
        assert len(recent) == 5
        assert "F0" not in [f["title"] for f in recent]

    def test_other_tenant_not_counted(self, tenant, other_tenant):
        _seed(other_tenant.id)
        assert get_summary(tenant.id)["totals"]["goals"] == 0


class TestSummaryEndpoint:
    def test_summary(self, client, auth_headers, tenant):
        _seed(tenant.id)
        res = client.get("/api/v1/dashboard/summary", headers=auth_headers)
        assert res.status_code == 200
        assert res.get_json()["totals"]["feedback"] == 6

    def test_requires_auth(self, client):
        assert client.get("/api/v1/dashboard/summary").status_code == 401
