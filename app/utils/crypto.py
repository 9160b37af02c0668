"""
Crypto utilities — bcrypt password hashing and one-time token generation.

Password hashes are bcrypt ($2b$, 12 rounds). Hashes produced by other
bcrypt implementations ($2a$, $2y$) verify as well, so seed data exported
from other stacks keeps working.
"""

import hashlib
import secrets

import bcrypt

_BCRYPT_PREFIXES = ("$2b$", "$2a$", "$2y$")


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password with bcrypt (12 rounds)."""
    salt = bcrypt.gensalt(rounds=12)
    return bcrypt.hashpw(plain_password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    """Verify a plain-text password against its bcrypt hash."""
    if not password_hash or not plain_password:
        return False
    if not password_hash.startswith(_BCRYPT_PREFIXES):
        return False
    return bcrypt.checkpw(
        plain_password.encode("utf-8"),
        password_hash.encode("utf-8"),
    )


def generate_reset_token() -> str:
    """Generate a URL-safe random token for password reset links."""
    return secrets.token_urlsafe(32)


def hash_token(token: str) -> str:
    """SHA-256 hash of a token (for DB storage — never store raw tokens)."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()
