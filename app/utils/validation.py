"""Input validation helpers shared by auth and entity services."""

import re

MIN_PASSWORD_LENGTH = 8

_UPPER = re.compile(r"[A-Z]")
_LOWER = re.compile(r"[a-z]")
_DIGIT = re.compile(r"\d")


def password_problem(password: str | None) -> str | None:
    """Return a human-readable reason the password is too weak, or None if OK.

    Rules: at least 8 characters, one uppercase letter, one lowercase letter
    and one digit.
    """
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
    if not _UPPER.search(password):
        return "Password must contain at least one uppercase letter"
    if not _LOWER.search(password):
        return "Password must contain at least one lowercase letter"
    if not _DIGIT.search(password):
        return "Password must contain at least one number"
    return None


def check_choice(field: str, value, allowed) -> str | None:
    """Return an error message when ``value`` is not one of ``allowed``."""
    if value not in allowed:
        return f"Invalid {field}. Must be one of: {', '.join(allowed)}"
    return None
