"""Notification history store.

Records are append-only: there is an insert, a filtered count and a filtered
page query, and nothing else. Store failures surface as PersistenceError.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import structlog
from sqlalchemy import Select, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from notifyhub.db.models import STATUS_SENT, NotificationRecord
from notifyhub.errors import PersistenceError
from notifyhub.notifications.dispatcher import DispatchOutcome

logger = structlog.get_logger()

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


@dataclass(frozen=True)
class NotificationFilter:
    """Exact-match conjunction. ``None`` fields do not constrain."""

    source: str | None = None
    sender: str | None = None
    status: str | None = None

    def apply(self, query: Select) -> Select:  # type: ignore[type-arg]
        if self.source is not None:
            query = query.where(NotificationRecord.source == self.source)
        if self.sender is not None:
            query = query.where(NotificationRecord.sender == self.sender)
        if self.status is not None:
            query = query.where(NotificationRecord.status == self.status)
        return query


def parse_page_param(raw: str | None) -> int | None:
    """Read the leading integer of a query value ("3", "3abc"); anything else is absent."""
    match = _LEADING_INT.match(raw) if raw is not None else None
    if match is None:
        return None
    try:
        return int(match.group(1))
    except ValueError:
        # Past the interpreter's int-from-string digit limit.
        return None


def normalize_pagination(
    page: int | None,
    limit: int | None,
    default_limit: int = DEFAULT_PAGE_SIZE,
    max_limit: int = MAX_PAGE_SIZE,
) -> tuple[int, int]:
    """Absent or non-positive values fall back to defaults; limit is capped."""
    page = page if page and page > 0 else DEFAULT_PAGE
    limit = limit if limit and limit > 0 else default_limit
    return page, min(limit, max_limit)


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit > 0 else 0


async def insert_notification(
    db: AsyncSession,
    *,
    title: str,
    body: str,
    data: dict[str, Any] | None,
    outcome: DispatchOutcome,
    sent_by: str,
    sent_by_username: str,
    source: str,
    sender: str | None = None,
) -> NotificationRecord:
    """Persist one dispatch outcome and commit. Returns the stored record."""
    record = NotificationRecord(
        title=title,
        body=body,
        data=data or {},
        delivery_addresses=outcome.tokens,
        per_address_results=outcome.result_dicts(),
        success_count=outcome.success_count,
        failure_count=outcome.failure_count,
        sent_by=sent_by,
        sent_by_username=sent_by_username,
        source=source,
        sender=sender,
        status=STATUS_SENT,
        created_at=datetime.now(timezone.utc),
    )
    try:
        db.add(record)
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("notification_insert_failed", error=str(e))
        raise PersistenceError(str(e)) from e

    logger.info(
        "notification_recorded",
        notification_id=record.id,
        source=source,
        success_count=record.success_count,
        failure_count=record.failure_count,
    )
    return record


async def count_notifications(db: AsyncSession, filters: NotificationFilter | None = None) -> int:
    """Count records matching the filter."""
    query = select(func.count()).select_from(NotificationRecord)
    if filters is not None:
        query = filters.apply(query)
    try:
        result = await db.execute(query)
    except SQLAlchemyError as e:
        raise PersistenceError(str(e)) from e
    return result.scalar_one()


async def list_notifications(
    db: AsyncSession,
    filters: NotificationFilter | None = None,
    page: int = DEFAULT_PAGE,
    limit: int = DEFAULT_PAGE_SIZE,
) -> tuple[list[NotificationRecord], int]:
    """Get one page of records, most recent first, plus the filtered total."""
    total = await count_notifications(db, filters)
    offset = (page - 1) * limit
    if offset >= total:
        return [], total

    query = select(NotificationRecord)
    if filters is not None:
        query = filters.apply(query)
    query = (
        query.order_by(NotificationRecord.created_at.desc(), NotificationRecord.id.desc())
        .offset(offset)
        .limit(limit)
    )
    try:
        result = await db.execute(query)
    except SQLAlchemyError as e:
        raise PersistenceError(str(e)) from e
    return list(result.scalars().all()), total
