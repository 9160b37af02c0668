"""
Shared pytest fixtures for the Echo test suite.

Provides:
    - app: Flask application (session-scoped)
    - _setup_db: Database table creation/teardown (session-scoped)
    - session: Per-test DB cleanup w/ rollback + recreate (autouse)
    - client: Flask test client (function-scoped)
    - tenant / other_tenant: acme.com and globex.com tenants
    - admin_user / member_user / other_user: users with password "Password123"
    - auth_headers / member_headers / other_headers: Bearer headers for them
"""

import pytest

from app import create_app
from app.models import db as _db
from app.models.auth import Tenant, User
from app.services.jwt_service import generate_access_token
from app.utils.crypto import hash_password

PASSWORD = "Password123"


# ── App & DB fixtures ────────────────────────────────────────────────────


@pytest.fixture(scope="session")
def app():
    """Create the Flask application once per test session."""
    return create_app("testing")


@pytest.fixture(scope="session")
def _setup_db(app):
    """Create all tables at session start, drop at end."""
    with app.app_context():
        _db.create_all()
    yield
    with app.app_context():
        _db.drop_all()


@pytest.fixture(autouse=True)
def session(app, _setup_db):
    """Per-test: open app context, rollback after test, recreate tables."""
    with app.app_context():
        yield
        _db.session.rollback()
        _db.drop_all()
        _db.create_all()


@pytest.fixture()
def client(app):
    """Flask test client."""
    return app.test_client()


# ── Tenants & users ──────────────────────────────────────────────────────


def make_tenant(domain, plan_tier="basic", **kw):
    t = Tenant(name=domain.split(".")[0].title(), domain_name=domain, plan_tier=plan_tier, **kw)
    _db.session.add(t)
    _db.session.commit()
    return t


def make_user(tenant, email, role="user", name=None, password=PASSWORD):
    u = User(
        tenant_id=tenant.id,
        email=email,
        name=name or email.split("@")[0].title(),
        role=role,
        password_hash=hash_password(password),
    )
    _db.session.add(u)
    _db.session.commit()
    return u


def bearer(user):
    token = generate_access_token(user.id, user.tenant_id, user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def tenant():
    return make_tenant("acme.com", plan_tier="pro")


@pytest.fixture()
def other_tenant():
    return make_tenant("globex.com")


@pytest.fixture()
def admin_user(tenant):
    return make_user(tenant, "admin@acme.com", role="admin", name="Ada Admin")


@pytest.fixture()
def member_user(tenant):
    return make_user(tenant, "member@acme.com", name="Max Member")


@pytest.fixture()
def other_user(other_tenant):
    return make_user(other_tenant, "eve@globex.com", role="admin", name="Eve Globex")


@pytest.fixture()
def auth_headers(admin_user):
    """Bearer header for the acme.com admin."""
    return bearer(admin_user)


@pytest.fixture()
def member_headers(member_user):
    return bearer(member_user)


@pytest.fixture()
def other_headers(other_user):
    """Bearer header for a user of a different tenant."""
    return bearer(other_user)


@pytest.fixture()
def headers_for():
    """Build a Bearer header for any user: ``headers_for(user)``."""
    return bearer
