"""
Tenant service tests — e-mail domain → tenant mapping.
"""

import pytest

from app.models.auth import Tenant
from app.services import tenant_service


class TestDomainHelpers:
    def test_extract_domain_lowercases(self):
        assert tenant_service.extract_domain("Jane.Doe@ACME.com") == "acme.com"

    def test_extract_domain_invalid(self):
        with pytest.raises(ValueError):
            tenant_service.extract_domain("no-at-sign")

    @pytest.mark.parametrize("domain", ["gmail.com", "GMAIL.COM", "outlook.com", "protonmail.com"])
    def test_restricted(self, domain):
        assert tenant_service.is_restricted_domain(domain) is True

    def test_business_domain_not_restricted(self):
        assert tenant_service.is_restricted_domain("acme.com") is False


class TestFindOrCreate:
    def test_creates_tenant_from_domain(self):
        tenant, created = tenant_service.find_or_create_tenant_for_email("ceo@acme-labs.io")
        assert created is True
        assert tenant.id is not None
        assert tenant.domain_name == "acme-labs.io"
        assert tenant.name == "Acme Labs"
        assert tenant.plan_tier == "basic"
        assert tenant.is_active is True

    def test_reuses_existing_tenant(self, tenant):
        found, created = tenant_service.find_or_create_tenant_for_email("new.hire@acme.com")
        assert created is False
        assert found.id == tenant.id
        assert Tenant.query.count() == 1

    def test_public_domain_refused(self):
        with pytest.raises(ValueError, match="public email domain"):
            tenant_service.find_or_create_tenant_for_email("me@yahoo.com")

    def test_unknown_plan_refused(self):
        with pytest.raises(ValueError, match="plan_tier"):
            tenant_service.find_or_create_tenant_for_email("me@initech.com", plan_tier="gold")

    def test_get_tenant_for_email(self, tenant, other_tenant):
        assert tenant_service.get_tenant_for_email("x@globex.com").id == other_tenant.id
        assert tenant_service.get_tenant_for_email("x@unknown.org") is None
