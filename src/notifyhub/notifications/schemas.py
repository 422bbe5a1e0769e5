"""Request/response schemas for notification endpoints.

The dashboard and third-party clients speak camelCase JSON; fields are
snake_case here and aliased on the wire.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from notifyhub.db.models import NotificationRecord


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Requests ---


class SendNotificationRequest(CamelModel):
    """Dashboard send. Device tokens always come from configuration."""

    title: str | None = None
    body: str | None = None
    data: dict[str, Any] | None = None


class ExternalSendNotificationRequest(CamelModel):
    """Third-party send. ``tokens`` overrides the configured tokens when non-empty."""

    title: str | None = None
    body: str | None = None
    data: dict[str, Any] | None = None
    tokens: list[str] | None = None
    sender: str | None = None


# --- Responses ---


class SendNotificationResponse(CamelModel):
    success: bool = True
    success_count: int
    failure_count: int
    results: list[dict[str, Any]]
    notification_id: int
    message: str


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    pages: int


class NotificationResponse(CamelModel):
    """Full record, including tokens and per-token results."""

    id: int
    title: str
    body: str
    data: dict[str, Any]
    sent_by: str
    sent_by_username: str
    fcm_tokens: list[str]
    results: list[dict[str, Any]]
    success_count: int
    failure_count: int
    source: str
    sender: str | None = None
    status: str
    created_at: datetime

    @classmethod
    def from_record(cls, record: NotificationRecord) -> NotificationResponse:
        return cls(
            id=record.id,
            title=record.title,
            body=record.body,
            data=record.data or {},
            sent_by=record.sent_by,
            sent_by_username=record.sent_by_username,
            fcm_tokens=record.delivery_addresses or [],
            results=record.per_address_results or [],
            success_count=record.success_count,
            failure_count=record.failure_count,
            source=record.source,
            sender=record.sender,
            status=record.status,
            created_at=record.created_at,
        )


class ExternalNotificationResponse(CamelModel):
    """Redacted record: no device tokens, no per-token results."""

    id: int
    title: str
    body: str
    data: dict[str, Any]
    sender: str
    source: str
    success_count: int
    failure_count: int
    status: str
    created_at: datetime

    @classmethod
    def from_record(cls, record: NotificationRecord) -> ExternalNotificationResponse:
        return cls(
            id=record.id,
            title=record.title,
            body=record.body,
            data=record.data or {},
            sender=record.sender or record.sent_by_username,
            source=record.source,
            success_count=record.success_count,
            failure_count=record.failure_count,
            status=record.status,
            created_at=record.created_at,
        )


class NotificationListResponse(CamelModel):
    success: bool = True
    notifications: list[NotificationResponse]
    pagination: Pagination


class AppliedFilters(CamelModel):
    source: str | None = None
    sender: str | None = None
    status: str | None = None


class ExternalNotificationListResponse(CamelModel):
    success: bool = True
    notifications: list[ExternalNotificationResponse]
    pagination: Pagination
    filters: AppliedFilters


def send_response(record: NotificationRecord) -> SendNotificationResponse:
    """Response for both send endpoints, built from the stored record."""
    return SendNotificationResponse(
        success_count=record.success_count,
        failure_count=record.failure_count,
        results=record.per_address_results,
        notification_id=record.id,
        message=f"Successfully sent {record.success_count} notifications, {record.failure_count} failed",
    )
