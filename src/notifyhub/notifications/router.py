"""Dashboard notification endpoints (bearer token + x-secret-key)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from notifyhub.auth.dependencies import require_internal_access
from notifyhub.config import get_settings
from notifyhub.database import get_session
from notifyhub.db.models import SOURCE_INTERNAL
from notifyhub.errors import ValidationError
from notifyhub.notifications.dispatcher import dispatch
from notifyhub.notifications.providers import BasePushProvider, get_push_provider
from notifyhub.notifications.schemas import (
    NotificationListResponse,
    NotificationResponse,
    Pagination,
    SendNotificationRequest,
    SendNotificationResponse,
    send_response,
)
from notifyhub.notifications.service import (
    insert_notification,
    list_notifications,
    normalize_pagination,
    parse_page_param,
    total_pages,
)

DEFAULT_TITLE = "Notification"
DEFAULT_BODY = "You have a new notification"

router = APIRouter(tags=["Notifications"])


@router.get("/notifications", response_model=NotificationListResponse)
async def list_sent_notifications(
    _user: dict[str, str] = Depends(require_internal_access),
    page: str | None = Query(None),
    limit: str | None = Query(None),
    db: AsyncSession = Depends(get_session),
) -> NotificationListResponse:
    """Full history, most recent first, no filters."""
    settings = get_settings()
    page_num, page_size = normalize_pagination(
        parse_page_param(page), parse_page_param(limit), settings.default_page_size, settings.max_page_size
    )
    records, total = await list_notifications(db, None, page_num, page_size)
    return NotificationListResponse(
        notifications=[NotificationResponse.from_record(r) for r in records],
        pagination=Pagination(page=page_num, limit=page_size, total=total, pages=total_pages(total, page_size)),
    )


@router.post("/send-notification", response_model=SendNotificationResponse)
async def send_notification(
    body: SendNotificationRequest,
    user: dict[str, str] = Depends(require_internal_access),
    provider: BasePushProvider = Depends(get_push_provider),
    db: AsyncSession = Depends(get_session),
) -> SendNotificationResponse:
    """Send to the configured device tokens and record the outcome."""
    settings = get_settings()
    tokens = settings.default_push_tokens
    if not tokens:
        raise ValidationError("No FCM tokens found in configuration")

    title = body.title or DEFAULT_TITLE
    text = body.body or DEFAULT_BODY
    outcome = await dispatch(
        provider, title, text, body.data, tokens, timeout=settings.push_send_timeout_seconds
    )
    record = await insert_notification(
        db,
        title=title,
        body=text,
        data=body.data,
        outcome=outcome,
        sent_by=user["user_id"],
        sent_by_username=user["username"],
        source=SOURCE_INTERNAL,
    )
    return send_response(record)
