"""
HS256 JWT identity tokens for the dashboard.

Tokens are stateless: nothing is stored server-side, so rotating
``NOTIFYHUB_JWT_SECRET`` is the only way to invalidate outstanding tokens.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from notifyhub.config import get_settings
from notifyhub.errors import AuthenticationError

TOKEN_TYPE = "access"


def _signing_key() -> str:
    settings = get_settings()
    if not settings.jwt_secret:
        msg = "NOTIFYHUB_JWT_SECRET is not configured"
        raise RuntimeError(msg)
    return settings.jwt_secret


def create_access_token(user_id: int | str, username: str) -> str:
    """
    Create a signed access token for a logged-in user.

    Args:
        user_id: The user's database ID.
        username: The user's login name, echoed back on verification.

    Returns:
        Encoded JWT string valid for ``jwt_access_token_expire_hours``.
    """
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload: dict[str, Any] = {
        "sub": str(user_id),
        "username": username,
        "iat": now,
        "exp": now + timedelta(hours=settings.jwt_access_token_expire_hours),
        "iss": settings.jwt_issuer,
        "type": TOKEN_TYPE,
    }
    return jwt.encode(payload, _signing_key(), algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> dict[str, str]:
    """
    Verify a token and return the identity it asserts.

    Returns:
        ``{"user_id": ..., "username": ...}``

    Raises:
        AuthenticationError: If the token is badly signed, malformed, expired,
            from another issuer or not an access token.
    """
    settings = get_settings()
    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            _signing_key(),
            algorithms=[settings.jwt_algorithm],
            issuer=settings.jwt_issuer,
            options={"require": ["sub", "exp", "iat"]},
        )
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token has expired") from None
    except jwt.InvalidTokenError as e:
        raise AuthenticationError(f"Invalid token: {e}") from e

    if payload.get("type") != TOKEN_TYPE:
        msg = f"Expected token type '{TOKEN_TYPE}', got '{payload.get('type')}'"
        raise AuthenticationError(msg)

    username = payload.get("username")
    if not isinstance(username, str) or not username:
        raise AuthenticationError("Invalid token: missing username")

    return {"user_id": payload["sub"], "username": username}
