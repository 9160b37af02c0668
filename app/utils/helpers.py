"""Shared parsing and persistence helpers.

parse_date:      lenient date parsing (returns None on bad input)
parse_int:       lenient int parsing for ids / query params
parse_revenue:   "$50,000.00" → Decimal("50000.00")
commit_or_raise: commit the session, mapping DB failures to platform exceptions
"""
import logging
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from sqlalchemy.exc import DataError, IntegrityError, OperationalError

from app.core.exceptions import ApiError, ConflictError, ValidationError
from app.models import db

logger = logging.getLogger(__name__)

_REVENUE_STRIP = re.compile(r"[^-\d.]")

# Customer.revenue is Numeric(14, 2)
MAX_REVENUE = Decimal("1e12")


def parse_date(value):
    """Parse a date string (ISO or DD.MM.YYYY) to a date object.

    Returns None for empty/invalid input. Supports:
    - YYYY-MM-DD (ISO format)
    - YYYY-MM-DDTHH:MM:SS (datetime ISO → .date())
    - DD.MM.YYYY
    """
    if not value:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except (ValueError, TypeError):
        pass
    try:
        return datetime.fromisoformat(str(value)).date()
    except (ValueError, TypeError):
        pass
    try:
        return datetime.strptime(str(value), "%d.%m.%Y").date()
    except (ValueError, TypeError):
        return None


def parse_int(value):
    """Return ``int(value)`` or None for empty / non-numeric input."""
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (ValueError, TypeError):
        return None


def parse_revenue(value):
    """Normalise a revenue value entered as a display string.

    Currency symbols, thousands separators and other non-numeric characters
    are stripped. Returns None for empty input.

    Raises:
        ValueError: if nothing numeric remains, or the value is NaN, infinite
                    or too large for the column.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError("revenue must be a number")
    if isinstance(value, (int, float, Decimal)):
        result = Decimal(str(value))
    else:
        raw = str(value).strip()
        if not raw:
            return None
        try:
            result = Decimal(_REVENUE_STRIP.sub("", raw))
        except InvalidOperation as exc:
            raise ValueError(f"revenue must be a number, got {value!r}") from exc
    if not result.is_finite():
        raise ValueError("revenue must be a finite number")
    if abs(result) >= MAX_REVENUE:
        raise ValueError(f"revenue must be below {MAX_REVENUE:,.0f}")
    return result


# ── Database commit helper ───────────────────────────────────────────────────

def commit_or_raise(resource: str = "record"):
    """Commit the current SQLAlchemy session or raise a platform exception.

    IntegrityError   → ConflictError (HTTP 409)
    DataError        → ValidationError (HTTP 400): value too long / out of range
    OperationalError → ApiError 500
    """
    try:
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        logger.warning("Integrity error on commit: %s", exc.orig)
        raise ConflictError(resource, "constraint", str(exc.orig)[:200]) from exc
    except DataError as exc:
        db.session.rollback()
        logger.warning("Data error on commit: %s", exc.orig)
        raise ValidationError(
            f"{resource} has a value that does not fit its column",
            details={"database": str(exc.orig)[:200]},
        ) from exc
    except OperationalError as exc:
        db.session.rollback()
        logger.exception("Database operational error on commit")
        raise ApiError(500, "Database error") from exc
