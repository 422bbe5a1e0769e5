"""Structured logging configuration with structlog.

Device tokens and credentials never reach the log sink in full: the
``redact_sensitive`` processor masks them on every event.
"""

import logging
from collections.abc import MutableMapping
from typing import Any

import structlog

from notifyhub.config import Settings

_SECRET_KEYS = frozenset({"password", "secret", "secret_key", "api_key", "authorization", "private_key"})
_TOKEN_KEYS = frozenset({"token", "tokens"})
_TOKEN_TAIL = 8

# Chatty transport loggers pulled in by firebase-admin.
_QUIET_LOGGERS = ("urllib3", "google.auth", "google.auth.transport", "httpx")


def mask_token(token: str) -> str:
    """Keep only the tail of a device token, enough to correlate with results."""
    if len(token) <= _TOKEN_TAIL:
        return "***"
    return f"...{token[-_TOKEN_TAIL:]}"


def redact_sensitive(
    _logger: Any, _method: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Mask credentials and device tokens in the event."""
    for key, value in event_dict.items():
        if key in _SECRET_KEYS:
            event_dict[key] = "***"
        elif key in _TOKEN_KEYS:
            if isinstance(value, str):
                event_dict[key] = mask_token(value)
            elif isinstance(value, (list, tuple)):
                event_dict[key] = [mask_token(t) if isinstance(t, str) else t for t in value]
    return event_dict


def _service_info(settings: Settings) -> structlog.types.Processor:
    """Stamp every event with the deployment it came from."""

    def add_service_info(
        _logger: Any, _method: str, event_dict: MutableMapping[str, Any]
    ) -> MutableMapping[str, Any]:
        event_dict.setdefault("environment", settings.environment)
        event_dict.setdefault("version", settings.app_version)
        return event_dict

    return add_service_info


def setup_logging(settings: Settings) -> None:
    """Configure structlog (JSON in deployments, console locally) and the root level."""
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer() if settings.log_format == "json" else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            _service_info(settings),
            redact_sensitive,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level)
    if not settings.debug:
        for name in _QUIET_LOGGERS:
            logging.getLogger(name).setLevel(max(level, logging.WARNING))
