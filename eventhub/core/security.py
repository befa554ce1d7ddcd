"""Password hashing and JWT helpers."""

import hashlib
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from jose import JWTError, jwt

from eventhub.core.config import get_settings

settings = get_settings()

# Hashes with this prefix are plain sha256 digests (fixtures only)
PLAIN_HASH_PREFIX = "$plain$"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its stored hash."""
    if hashed_password.startswith(PLAIN_HASH_PREFIX):
        expected = hashed_password[len(PLAIN_HASH_PREFIX):]
        return expected == hashlib.sha256(plain_password.encode()).hexdigest()

    # bcrypt only looks at the first 72 bytes
    truncated = plain_password[:72].encode("utf-8")
    return bcrypt.checkpw(truncated, hashed_password.encode("utf-8"))


def get_password_hash(password: str) -> str:
    """Hash a password with bcrypt."""
    truncated = password[:72].encode("utf-8")
    return bcrypt.hashpw(truncated, bcrypt.gensalt(rounds=12)).decode("utf-8")


def create_access_token(
    user_id: int,
    extra_claims: dict[str, Any] | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed access token for a user."""
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.jwt_access_token_expire_minutes)
    )
    claims: dict[str, Any] = dict(extra_claims or {})
    claims.update({
        "sub": str(user_id),
        "exp": expire,
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
    })
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict[str, Any] | None:
    """Decode and validate an access token, None when invalid or expired."""
    try:
        return jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
        )
    except JWTError:
        return None
