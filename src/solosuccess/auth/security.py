"""
Password hashing and JWT handling.

Passwords are hashed with bcrypt. Access tokens are HS256 JWTs signed with
``SECRET_KEY`` and carry ``sub`` (user id), ``email``, ``iat`` and ``exp``.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional
from uuid import UUID

import bcrypt
import jwt

from solosuccess.config.settings import Settings, get_settings
from solosuccess.domain.exceptions import TokenExpired, TokenInvalid

DEV_SECRET_KEY = "solosuccess-dev-secret-key-change-me"


def _signing_key(settings: Settings) -> str:
    if settings.secret_key is not None:
        return settings.secret_key.get_secret_value()
    if settings.is_production:
        raise RuntimeError("SECRET_KEY must be set in production")
    return DEV_SECRET_KEY


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """Hash a password with a fresh bcrypt salt."""
    rounds = rounds or get_settings().bcrypt_rounds
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # Malformed hash
        return False


def create_access_token(
    user_id: UUID,
    email: str,
    expires_delta: Optional[timedelta] = None,
) -> tuple[str, int]:
    """
    Create a signed access token.

    Returns:
        Tuple of (token, expires_in_seconds)
    """
    settings = get_settings()
    expires_delta = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    now = datetime.now(timezone.utc)

    claims = {
        "sub": str(user_id),
        "email": email,
        "iat": now,
        "exp": now + expires_delta,
    }
    token = jwt.encode(claims, _signing_key(settings), algorithm=settings.jwt_algorithm)
    return token, int(expires_delta.total_seconds())


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Verify a token's signature and expiry and return its claims.

    Raises:
        TokenExpired: Token is past its ``exp``
        TokenInvalid: Token is malformed, tampered with or missing ``sub``
    """
    settings = get_settings()
    try:
        claims = jwt.decode(
            token,
            _signing_key(settings),
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise TokenExpired() from e
    except jwt.InvalidTokenError as e:
        raise TokenInvalid(details={"reason": str(e)}) from e

    try:
        UUID(claims["sub"])
    except (TypeError, ValueError) as e:
        raise TokenInvalid(details={"reason": "Invalid subject"}) from e

    return claims
