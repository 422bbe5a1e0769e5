"""
Push provider abstraction.

Supports Firebase Cloud Messaging (default) and a console provider that only
logs, for local development without credentials. The provider is built once at
startup and shared by every request.
"""

from __future__ import annotations

import asyncio
import functools
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

import structlog

from notifyhub.config import Settings
from notifyhub.errors import ProviderUnavailableError, UpstreamDeliveryError

logger = structlog.get_logger()

FIREBASE_APP_NAME = "notifyhub"


@dataclass(frozen=True)
class PushMessage:
    """A single-device push: one title/body/data triple for one token."""

    token: str
    title: str
    body: str
    data: dict[str, str] = field(default_factory=dict)


class BasePushProvider(ABC):
    """Abstract base class for push delivery providers."""

    name = "base"

    @abstractmethod
    async def send(self, message: PushMessage) -> str:
        """Deliver one message. Returns the provider message id, raises on rejection."""
        ...

    async def close(self) -> None:  # noqa: B027
        """Release provider resources."""


class FirebasePushProvider(BasePushProvider):
    """Send through Firebase Cloud Messaging with the firebase-admin SDK."""

    name = "firebase"

    def __init__(self, credentials: dict[str, Any] | str) -> None:
        import firebase_admin
        from firebase_admin import credentials as fb_credentials

        try:
            self._app = firebase_admin.get_app(FIREBASE_APP_NAME)
        except ValueError:
            cert = fb_credentials.Certificate(credentials)
            self._app = firebase_admin.initialize_app(cert, name=FIREBASE_APP_NAME)
        logger.info("push_provider_initialized", provider=self.name, project_id=self._app.project_id)

    async def send(self, message: PushMessage) -> str:
        """Send via FCM. The SDK call blocks, so it runs in the default executor."""
        from firebase_admin import messaging

        fcm_message = messaging.Message(
            notification=messaging.Notification(title=message.title, body=message.body),
            data=message.data,
            token=message.token,
        )
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(
                None, functools.partial(messaging.send, fcm_message, app=self._app)
            )
        except Exception as e:
            raise UpstreamDeliveryError(str(e) or type(e).__name__) from e

    async def close(self) -> None:
        import firebase_admin

        firebase_admin.delete_app(self._app)


class ConsolePushProvider(BasePushProvider):
    """Log pushes instead of sending them."""

    name = "console"

    async def send(self, message: PushMessage) -> str:
        message_id = f"console/{uuid.uuid4()}"
        logger.info(
            "push_logged",
            token=message.token,
            title=message.title,
            message_id=message_id,
        )
        return message_id


def _firebase_credentials(settings: Settings) -> dict[str, Any] | str:
    """Service-account file path if set, else an inline service-account dict."""
    if settings.firebase_credentials_path:
        return settings.firebase_credentials_path
    if not (settings.firebase_project_id and settings.firebase_client_email and settings.firebase_private_key):
        msg = (
            "Firebase credentials missing: set NOTIFYHUB_FIREBASE_CREDENTIALS_PATH or "
            "NOTIFYHUB_FIREBASE_PROJECT_ID, NOTIFYHUB_FIREBASE_CLIENT_EMAIL and NOTIFYHUB_FIREBASE_PRIVATE_KEY"
        )
        raise ProviderUnavailableError(msg)
    return {
        "type": "service_account",
        "project_id": settings.firebase_project_id,
        "client_email": settings.firebase_client_email,
        # Keys pasted into env files usually carry literal "\n" sequences.
        "private_key": settings.firebase_private_key.replace("\\n", "\n"),
        "token_uri": "https://oauth2.googleapis.com/token",
    }


def _create_provider(settings: Settings) -> BasePushProvider:
    """Create push provider based on configuration."""
    provider_name = settings.push_provider.lower()

    if provider_name == "firebase":
        return FirebasePushProvider(_firebase_credentials(settings))
    if provider_name == "console":
        return ConsolePushProvider()
    msg = f"Unsupported push provider: {provider_name}"
    raise ProviderUnavailableError(msg)


_provider: BasePushProvider | None = None


def init_push_provider(settings: Settings, provider: BasePushProvider | None = None) -> BasePushProvider:
    """Build the process-wide provider. Errors propagate so startup fails loudly."""
    global _provider  # noqa: PLW0603
    _provider = provider or _create_provider(settings)
    return _provider


async def close_push_provider() -> None:
    global _provider  # noqa: PLW0603
    if _provider is not None:
        await _provider.close()
        _provider = None


def get_push_provider() -> BasePushProvider:
    """Return the provider built at startup (FastAPI dependency)."""
    if _provider is None:
        raise ProviderUnavailableError("Push provider not initialized. Call init_push_provider() first.")
    return _provider
