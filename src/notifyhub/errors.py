"""Error taxonomy shared by the services and the HTTP layer.

Each error carries the HTTP status it maps to; the global handlers in
``notifyhub.middleware.error_handler`` turn them into JSON responses.
"""

from __future__ import annotations


class NotifyHubError(Exception):
    """Base class for application errors."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(NotifyHubError):
    """Required input missing or malformed."""

    status_code = 400


class AuthenticationError(NotifyHubError):
    """Bearer token missing, malformed, badly signed or expired."""

    status_code = 401


class AuthorizationError(NotifyHubError):
    """Shared secret or API key missing or wrong."""

    status_code = 403


class InvalidCredentialsError(AuthenticationError):
    """Unknown username or wrong password, reported identically."""

    def __init__(self) -> None:
        super().__init__("Invalid credentials")


class UpstreamDeliveryError(NotifyHubError):
    """The push provider rejected a single token."""

    status_code = 502


class ProviderUnavailableError(NotifyHubError):
    """No push provider client could be built or none was initialized."""

    status_code = 500


class PersistenceError(NotifyHubError):
    """The record store could not be read or written."""

    status_code = 500
