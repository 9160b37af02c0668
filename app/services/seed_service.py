"""
Echo — Demo Seed.

Creates the ``demo.com`` tenant (enterprise plan) with an admin and a regular
user plus a small, connected product portfolio:

    goals → initiatives → ideas ← customers → feedback

Usage:
    flask seed-demo

Idempotent: if demo.com already has goals, only missing users are added.
"""

import logging
from datetime import date

from app.models import db
from app.models.auth import Tenant, User
from app.models.product import Customer, Feedback, Goal, Idea, Initiative
from app.utils.crypto import hash_password

logger = logging.getLogger(__name__)

DEMO_DOMAIN = "demo.com"
DEMO_PASSWORD = "Password123"
DEMO_USERS = (
    ("admin@demo.com", "Demo Admin", "admin"),
    ("user@demo.com", "Demo User", "user"),
)


# ═══════════════════════════════════════════════════════════════════════════
# 1. TENANT & USERS
# ═══════════════════════════════════════════════════════════════════════════

def _seed_tenant():
    tenant = Tenant.query.filter_by(domain_name=DEMO_DOMAIN).first()
    if tenant is None:
        tenant = Tenant(name="Demo Company", domain_name=DEMO_DOMAIN, plan_tier="enterprise")
        db.session.add(tenant)
        db.session.flush()
    return tenant


def _seed_users(tenant):
    created = 0
    for email, name, role in DEMO_USERS:
        if User.query.filter_by(tenant_id=tenant.id, email=email).first():
            continue
        db.session.add(User(
            tenant_id=tenant.id,
            email=email,
            name=name,
            role=role,
            password_hash=hash_password(DEMO_PASSWORD),
        ))
        created += 1
    return created


# ═══════════════════════════════════════════════════════════════════════════
# 2. PORTFOLIO
# ═══════════════════════════════════════════════════════════════════════════

def _seed_portfolio(tenant):
    tid = tenant.id

    growth = Goal(tenant_id=tid, title="Grow self-serve revenue",
                  description="Double self-serve signups by year end.",
                  status="active", target_date=date(2026, 12, 31))
    retention = Goal(tenant_id=tid, title="Reduce churn",
                     description="Bring monthly churn under 2%.",
                     status="planned", target_date=date(2027, 6, 30))
    db.session.add_all([growth, retention])
    db.session.flush()

    onboarding = Initiative(tenant_id=tid, title="Guided onboarding",
                            description="Checklist and sample data for new workspaces.",
                            status="active", priority=1, goal_id=growth.id)
    exports = Initiative(tenant_id=tid, title="Reporting exports",
                         description="CSV and PDF exports for every report.",
                         status="planned", priority=2, goal_id=retention.id)
    db.session.add_all([onboarding, exports])
    db.session.flush()

    acme = Customer(tenant_id=tid, name="Acme Corp", status="active", revenue=120000)
    globex = Customer(tenant_id=tid, name="Globex", status="active", revenue=85000)
    initech = Customer(tenant_id=tid, name="Initech", status="prospect", revenue=None)
    db.session.add_all([acme, globex, initech])
    db.session.flush()

    db.session.add_all([
        Feedback(tenant_id=tid, title="Setup took our team two days",
                 description="Too many steps before the first project is usable.",
                 sentiment="negative", customer_id=acme.id, initiative_id=onboarding.id),
        Feedback(tenant_id=tid, title="Love the new dashboard",
                 sentiment="positive", customer_id=globex.id),
        Feedback(tenant_id=tid, title="Need monthly PDF reports for the board",
                 sentiment="neutral", customer_id=initech.id, initiative_id=exports.id),
    ])

    checklist = Idea(tenant_id=tid, title="Onboarding checklist",
                     description="Step-by-step checklist on first login.",
                     priority="high", effort="m", status="planned",
                     source="customer", initiative_id=onboarding.id)
    checklist.customers = [acme, globex]
    pdf = Idea(tenant_id=tid, title="Scheduled PDF export",
               priority="medium", effort="l", status="new",
               source="sales", initiative_id=exports.id)
    pdf.customers = [initech]
    dark_mode = Idea(tenant_id=tid, title="Dark mode", priority="low", effort="s")
    db.session.add_all([checklist, pdf, dark_mode])


def seed_demo():
    """Seed the demo tenant. Returns a dict of what was created."""
    tenant = _seed_tenant()
    users = _seed_users(tenant)

    seeded_portfolio = False
    if Goal.query.filter_by(tenant_id=tenant.id).count() == 0:
        _seed_portfolio(tenant)
        seeded_portfolio = True

    db.session.commit()
    logger.info(
        "Demo seed complete: %s new users, portfolio %s",
        users,
        "created" if seeded_portfolio else "already present",
        extra={"tenant_id": tenant.id, "event_type": "demo_seeded"},
    )
    return {"tenant_id": tenant.id, "users_created": users, "portfolio_created": seeded_portfolio}
