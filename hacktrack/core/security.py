"""Password hashing and opaque session token generation."""

import secrets

import bcrypt

from hacktrack.core.config import settings

# Min/max lengths for username and password validation.
USERNAME_MIN_LEN = 1
USERNAME_MAX_LEN = 255
PASSWORD_MIN_LEN = 1
PASSWORD_MAX_LEN = 128

# 32 random bytes = 256 bits of entropy, url-safe base64 encoded.
TOKEN_BYTES = 32

BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


def hash_password(plain_password: str, rounds: int | None = None) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def is_password_hash(value: str) -> bool:
    """True if value looks like a bcrypt hash (used by the offline plaintext migration)."""
    return len(value) == 60 and value.startswith(BCRYPT_PREFIXES)


def generate_token() -> str:
    """Return a new unguessable opaque bearer token."""
    return secrets.token_urlsafe(TOKEN_BYTES)
