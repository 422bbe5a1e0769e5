"""Notification dispatch: one provider call per device token.

Tokens are tried one after another. A rejected or timed-out token is recorded
as a failure and the loop moves on; a batch is never all-or-nothing.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

import structlog

from notifyhub.errors import ValidationError
from notifyhub.notifications.providers import BasePushProvider, PushMessage

logger = structlog.get_logger()

DEFAULT_TIMEOUT_SECONDS = 10.0


@dataclass
class DeliveryResult:
    """Outcome for a single token."""

    token: str
    success: bool
    message_id: str | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Wire/storage form: ``messageId`` on success, ``error`` on failure."""
        if self.success:
            return {"token": self.token, "success": True, "messageId": self.message_id}
        return {"token": self.token, "success": False, "error": self.error}


@dataclass
class DispatchOutcome:
    """Ordered per-token results of one dispatch."""

    results: list[DeliveryResult] = field(default_factory=list)

    @property
    def tokens(self) -> list[str]:
        return [r.token for r in self.results]

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failure_count(self) -> int:
        return sum(1 for r in self.results if not r.success)

    def result_dicts(self) -> list[dict[str, Any]]:
        return [r.to_dict() for r in self.results]


def resolve_tokens(requested: Sequence[str] | None, defaults: Sequence[str]) -> list[str]:
    """Caller-supplied tokens win when non-empty, else the configured defaults."""
    if requested:
        return list(requested)
    return list(defaults)


def stringify_data(data: dict[str, Any] | None) -> dict[str, str]:
    """FCM data payloads only carry strings; anything else is JSON encoded."""
    if not data:
        return {}
    return {str(k): v if isinstance(v, str) else json.dumps(v) for k, v in data.items()}


async def dispatch(
    provider: BasePushProvider,
    title: str,
    body: str,
    data: dict[str, Any] | None,
    tokens: Sequence[str],
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> DispatchOutcome:
    """
    Send one notification to every token, sequentially.

    Args:
        provider: Push provider built at startup.
        title: Notification title, must be non-empty.
        body: Notification body, must be non-empty.
        data: Optional key/value payload forwarded to the device.
        tokens: Device tokens, tried in order.
        timeout: Per-token ceiling in seconds; a timeout counts as a failure.

    Returns:
        DispatchOutcome with one result per token, in token order.

    Raises:
        ValidationError: If title/body are empty or no tokens were given.
    """
    if not title or not body:
        raise ValidationError("Title and body are required")
    if not tokens:
        raise ValidationError("No FCM tokens to send to")

    payload = stringify_data(data)
    outcome = DispatchOutcome()

    for token in tokens:
        message = PushMessage(token=token, title=title, body=body, data=payload)
        try:
            message_id = await asyncio.wait_for(provider.send(message), timeout=timeout)
        except asyncio.TimeoutError:
            outcome.results.append(
                DeliveryResult(token=token, success=False, error=f"Timed out after {timeout:g}s")
            )
            logger.warning("push_send_timeout", token=token, provider=provider.name)
        except Exception as e:
            outcome.results.append(DeliveryResult(token=token, success=False, error=str(e) or type(e).__name__))
            logger.warning("push_send_failed", token=token, provider=provider.name, error=str(e))
        else:
            outcome.results.append(DeliveryResult(token=token, success=True, message_id=message_id))
            logger.info("push_sent", token=token, provider=provider.name, message_id=message_id)

    logger.info(
        "dispatch_complete",
        attempted=len(outcome.results),
        success_count=outcome.success_count,
        failure_count=outcome.failure_count,
    )
    return outcome
