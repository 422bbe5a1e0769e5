"""FastAPI authentication dependencies for the two trust domains.

Internal (dashboard) routes need a bearer token AND the shared secret header.
External routes need only the static API key.
"""

from __future__ import annotations

from fastapi import Depends, Header, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from notifyhub.auth.jwt import verify_token
from notifyhub.auth.shared_secret import secrets_match
from notifyhub.config import get_settings
from notifyhub.errors import AuthenticationError, AuthorizationError

_bearer = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Security(_bearer),
) -> dict[str, str]:
    """Decode the bearer token into ``{"user_id", "username"}`` or answer 401."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Authentication required")
    return verify_token(credentials.credentials)


def check_shared_secret(value: str | None) -> None:
    """Raise 403 unless ``value`` matches the dashboard shared secret."""
    if not secrets_match(value, get_settings().notification_secret):
        raise AuthorizationError("Invalid secret key", status_code=403)


async def require_shared_secret(
    x_secret_key: str | None = Header(None, alias="x-secret-key"),
) -> None:
    """Dependency form of :func:`check_shared_secret`."""
    check_shared_secret(x_secret_key)


async def require_internal_access(
    user: dict[str, str] = Depends(get_current_user),
    _secret: None = Depends(require_shared_secret),
) -> dict[str, str]:
    """Both gates, token first. Returns the token identity."""
    return user


async def require_api_key(
    x_api_key: str | None = Header(None, alias="x-api-key"),
) -> None:
    """Reject with 401 unless x-api-key matches the external API key."""
    if not secrets_match(x_api_key, get_settings().external_api_key):
        raise AuthorizationError("Invalid API key", status_code=401)
