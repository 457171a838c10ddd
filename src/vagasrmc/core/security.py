"""
Password hashing (bcrypt via passlib) and signed session tokens (JWT).

The session token is stateless: it carries the user id and role, and every
protected request re-derives the principal from it.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import Any

import jwt
from jwt.exceptions import InvalidTokenError
from passlib.context import CryptContext

from vagasrmc.config import Settings

DELETED_PASSWORD_SENTINEL = "DELETED"


@lru_cache(maxsize=8)
def _password_context(rounds: int) -> CryptContext:
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def get_password_hash(password: str, *, rounds: int = 12) -> str:
    """Hash a password with a per-call random salt."""
    return _password_context(rounds).hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a stored hash.

    Sentinel or malformed hashes (e.g. anonymized accounts) never verify.
    """
    if not hashed_password or hashed_password == DELETED_PASSWORD_SENTINEL:
        return False
    try:
        return _password_context(12).verify(plain_password, hashed_password)
    except ValueError:
        return False


def create_access_token(
    *,
    user_id: int,
    role: str,
    settings: Settings,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a signed session token for ``user_id``.

    Args:
        user_id: The authenticated user's id, stored in the ``sub`` claim
        role: Role tag stored in the ``role`` claim
        settings: Supplies the signing key, algorithm and default TTL
        expires_delta: Optional custom lifetime

    Returns:
        The encoded JWT string
    """
    expire = datetime.now(UTC) + (expires_delta or timedelta(minutes=settings.session_ttl_min))
    payload = {"sub": str(user_id), "role": role, "exp": expire}
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings) -> dict[str, Any] | None:
    """Decode and validate a session token, returning None when it is invalid or expired."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except InvalidTokenError:
        return None

    sub = payload.get("sub")
    if not isinstance(sub, str) or not sub.isdigit() or "role" not in payload:
        return None
    return payload
