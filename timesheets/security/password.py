"""
Password hashing and verification utilities using bcrypt.

This module provides password hashing and verification for user
accounts. Hashes are opaque to the rest of the application.
"""

import logging
from passlib.context import CryptContext

logger = logging.getLogger(__name__)

# bcrypt first; PBKDF2 hashes are still recognised so either backend verifies
pwd_context = CryptContext(schemes=["bcrypt", "pbkdf2_sha256"], deprecated="auto")
fallback_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

# bcrypt only looks at the first 72 bytes of a secret
BCRYPT_MAX_BYTES = 72


def _truncate(password: str) -> str:
    encoded = password.encode("utf-8")
    if len(encoded) <= BCRYPT_MAX_BYTES:
        return password
    return encoded[:BCRYPT_MAX_BYTES].decode("utf-8", errors="ignore")


def hash_password(password: str) -> str:
    """
    Hash a plaintext password using bcrypt, or PBKDF2 when bcrypt is unusable.

    Args:
        password: The plaintext password to hash

    Returns:
        The hashed password as a string

    Example:
        >>> hashed = hash_password("mysecretpassword")
        >>> len(hashed) > 20
        True
    """
    password = _truncate(password)
    try:
        return pwd_context.hash(password)
    except (ValueError, AttributeError) as e:
        # Some bcrypt releases are incompatible with passlib's backend detection
        logger.warning("bcrypt hashing unavailable, using PBKDF2: %s", e)
        return fallback_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plaintext password against a hashed password.

    Args:
        plain_password: The plaintext password to verify
        hashed_password: The stored hash to verify against

    Returns:
        True if the password matches, False otherwise
    """
    plain_password = _truncate(plain_password)
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, AttributeError):
        try:
            return fallback_context.verify(plain_password, hashed_password)
        except ValueError:
            # Not a hash either scheme recognises
            return False
