"""
Tenant Service — e-mail domain based tenant assignment.

A tenant is keyed by the domain of its users' e-mail addresses. Registering
``jane@acme.com`` joins (or creates) the ``acme.com`` tenant. Public mailbox
providers can never become tenants.
"""

import logging

from email_validator import EmailNotValidError, validate_email

from app.models import db
from app.models.auth import PLAN_TIERS, Tenant

logger = logging.getLogger(__name__)

RESTRICTED_DOMAINS = frozenset({
    "gmail.com",
    "yahoo.com",
    "hotmail.com",
    "outlook.com",
    "aol.com",
    "icloud.com",
    "mail.com",
    "protonmail.com",
    "zoho.com",
    "yandex.com",
    "live.com",
    "msn.com",
})


def normalize_email(email: str) -> str:
    """Validate syntax and return the normalized, lower-cased address.

    Raises:
        ValueError: "Invalid email format" for anything email_validator rejects.
    """
    try:
        valid = validate_email((email or "").strip(), check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValueError(f"Invalid email format: {exc}") from exc
    return valid.normalized.lower()


def extract_domain(email: str) -> str:
    """Return the lower-cased domain part of an e-mail address."""
    return normalize_email(email).rsplit("@", 1)[1]


def is_restricted_domain(domain: str) -> bool:
    return (domain or "").lower() in RESTRICTED_DOMAINS


def _display_name(domain: str) -> str:
    """``acme-labs.co.uk`` → ``Acme Labs``."""
    label = domain.split(".", 1)[0]
    return label.replace("-", " ").replace("_", " ").title() or domain


def get_tenant_by_domain(domain: str) -> Tenant | None:
    return Tenant.query.filter_by(domain_name=domain.lower()).first()


def get_tenant_for_email(email: str) -> Tenant | None:
    """Find the tenant owning the e-mail's domain, or None."""
    return get_tenant_by_domain(extract_domain(email))


def find_or_create_tenant_for_email(email: str, plan_tier: str = "basic") -> tuple[Tenant, bool]:
    """Return ``(tenant, created)`` for the e-mail's domain.

    The new tenant is flushed, not committed; the caller owns the transaction.

    Raises:
        ValueError: invalid e-mail, public mail domain, or unknown plan tier.
    """
    domain = extract_domain(email)
    if is_restricted_domain(domain):
        raise ValueError(
            f"Cannot create tenant using public email domain '{domain}'. "
            "Please use a business or organization email."
        )

    tenant = get_tenant_by_domain(domain)
    if tenant:
        return tenant, False

    if plan_tier not in PLAN_TIERS:
        raise ValueError(f"plan_tier must be one of: {', '.join(PLAN_TIERS)}")

    tenant = Tenant(name=_display_name(domain), domain_name=domain, plan_tier=plan_tier)
    db.session.add(tenant)
    db.session.flush()
    logger.info(
        "Tenant created for domain %s",
        domain,
        extra={"tenant_id": tenant.id, "event_type": "tenant_created"},
    )
    return tenant, True
