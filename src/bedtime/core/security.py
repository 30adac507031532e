"""Security utilities for PIN hashing and bearer token verification."""
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
from jose import JWTError, jwt

from .config import get_settings

PIN_LENGTH = 4


def is_valid_pin(pin: Any) -> bool:
    """Check that a PIN is exactly four ASCII digits."""
    return (
        isinstance(pin, str)
        and len(pin) == PIN_LENGTH
        and pin.isascii()
        and pin.isdigit()
    )


def hash_pin(pin: str) -> str:
    """Hash a parent PIN using bcrypt.

    Args:
        pin: Four-digit PIN

    Returns:
        Hashed PIN string

    Raises:
        ValueError: If the PIN is not four digits
    """
    if not is_valid_pin(pin):
        raise ValueError("PIN must be exactly 4 digits")
    hashed = bcrypt.hashpw(pin.encode("utf-8"), bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_pin(pin: Any, pin_hash: Any) -> bool:
    """Verify a PIN against its stored hash.

    Never raises: malformed PINs or hashes simply fail verification.

    Args:
        pin: PIN supplied by the caller
        pin_hash: Previously stored bcrypt hash

    Returns:
        True if the PIN matches, False otherwise
    """
    if not is_valid_pin(pin) or not isinstance(pin_hash, str) or not pin_hash:
        return False
    try:
        return bcrypt.checkpw(pin.encode("utf-8"), pin_hash.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def create_access_token(
    subject: str,
    expires_delta: timedelta | None = None,
    extra_claims: dict[str, Any] | None = None,
) -> str:
    """Create a signed bearer token.

    The identity provider normally mints these; this helper exists for
    local development and tests.

    Args:
        subject: The caller id placed in the ``sub`` claim
        expires_delta: Optional custom expiration time
        extra_claims: Additional claims to include in the token

    Returns:
        Encoded JWT token string
    """
    settings = get_settings()
    now = datetime.now(UTC)
    expire = now + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )

    to_encode: dict[str, Any] = {
        "sub": str(subject),
        "exp": expire,
        "iat": now,
    }
    if settings.jwt_audience:
        to_encode["aud"] = settings.jwt_audience
    if settings.jwt_issuer:
        to_encode["iss"] = settings.jwt_issuer
    if extra_claims:
        to_encode.update(extra_claims)

    return jwt.encode(
        to_encode,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )


def decode_access_token(token: str) -> dict[str, Any] | None:
    """Decode and validate a bearer token.

    Args:
        token: The JWT token string

    Returns:
        Decoded token payload or None if invalid
    """
    settings = get_settings()
    options = {"verify_aud": bool(settings.jwt_audience)}
    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience or None,
            issuer=settings.jwt_issuer or None,
            options=options,
        )
    except JWTError:
        return None
    return payload
