"""Third-party notification endpoints (x-api-key only).

Provenance here is the caller's free-text ``sender`` label, not an
authenticated identity.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from notifyhub.auth.dependencies import require_api_key
from notifyhub.config import get_settings
from notifyhub.database import get_session
from notifyhub.db.models import SOURCE_EXTERNAL
from notifyhub.errors import ValidationError
from notifyhub.notifications.dispatcher import dispatch, resolve_tokens
from notifyhub.notifications.providers import BasePushProvider, get_push_provider
from notifyhub.notifications.schemas import (
    AppliedFilters,
    ExternalNotificationListResponse,
    ExternalNotificationResponse,
    ExternalSendNotificationRequest,
    Pagination,
    SendNotificationResponse,
    send_response,
)
from notifyhub.notifications.service import (
    NotificationFilter,
    insert_notification,
    list_notifications,
    normalize_pagination,
    parse_page_param,
    total_pages,
)

EXTERNAL_SENT_BY = "external-api"
DEFAULT_SENT_BY_USERNAME = "external-application"
DEFAULT_SENDER = "Unknown App"

router = APIRouter(prefix="/external", tags=["External API"], dependencies=[Depends(require_api_key)])


@router.get("/notifications", response_model=ExternalNotificationListResponse)
async def list_external_notifications(
    page: str | None = Query(None),
    limit: str | None = Query(None),
    source: str | None = Query(None),
    sender: str | None = Query(None),
    status: str | None = Query(None),
    db: AsyncSession = Depends(get_session),
) -> ExternalNotificationListResponse:
    """Filtered history with tokens and per-token results stripped."""
    settings = get_settings()
    page_num, page_size = normalize_pagination(
        parse_page_param(page), parse_page_param(limit), settings.default_page_size, settings.max_page_size
    )
    filters = NotificationFilter(source=source or None, sender=sender or None, status=status or None)
    records, total = await list_notifications(db, filters, page_num, page_size)
    return ExternalNotificationListResponse(
        notifications=[ExternalNotificationResponse.from_record(r) for r in records],
        pagination=Pagination(page=page_num, limit=page_size, total=total, pages=total_pages(total, page_size)),
        filters=AppliedFilters(source=filters.source, sender=filters.sender, status=filters.status),
    )


@router.post("/send-notification", response_model=SendNotificationResponse)
async def send_external_notification(
    body: ExternalSendNotificationRequest,
    provider: BasePushProvider = Depends(get_push_provider),
    db: AsyncSession = Depends(get_session),
) -> SendNotificationResponse:
    """Send to the request's tokens, or the configured ones, and record it."""
    if not body.title or not body.body:
        raise ValidationError("Title and body are required")

    settings = get_settings()
    tokens = resolve_tokens(body.tokens, settings.default_push_tokens)
    if not tokens:
        raise ValidationError(
            "No FCM tokens found. Set NOTIFYHUB_FCM_TOKENS or provide tokens in request body."
        )

    outcome = await dispatch(
        provider, body.title, body.body, body.data, tokens, timeout=settings.push_send_timeout_seconds
    )
    record = await insert_notification(
        db,
        title=body.title,
        body=body.body,
        data=body.data,
        outcome=outcome,
        sent_by=EXTERNAL_SENT_BY,
        sent_by_username=body.sender or DEFAULT_SENT_BY_USERNAME,
        source=SOURCE_EXTERNAL,
        sender=body.sender or DEFAULT_SENDER,
    )
    return send_response(record)
