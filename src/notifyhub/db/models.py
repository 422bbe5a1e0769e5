"""ORM models: admin users and the append-only notification history."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, BigInteger, DateTime, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from notifyhub.db.base import Base

# SQLite only autoincrements INTEGER PRIMARY KEY columns.
_Id = BigInteger().with_variant(Integer, "sqlite")
_Json = JSON().with_variant(JSONB, "postgresql")

SOURCE_INTERNAL = "internal"
SOURCE_EXTERNAL = "external-api"
STATUS_SENT = "sent"


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class User(Base):
    """Dashboard account. Provisioned by the seed command, never modified here."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(_Id, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(256), nullable=False)
    role: Mapped[str] = mapped_column(String(32), nullable=False, default="admin")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------


class NotificationRecord(Base):
    """One dispatch attempt and its per-token outcome."""

    __tablename__ = "notifications"
    __table_args__ = (
        Index("ix_notifications_created_at", "created_at"),
        Index("ix_notifications_source", "source"),
    )

    id: Mapped[int] = mapped_column(_Id, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    data: Mapped[dict[str, Any]] = mapped_column(_Json, nullable=False, default=dict)
    delivery_addresses: Mapped[list[str]] = mapped_column(_Json, nullable=False, default=list)
    per_address_results: Mapped[list[dict[str, Any]]] = mapped_column(_Json, nullable=False, default=list)
    success_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    failure_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    sent_by: Mapped[str] = mapped_column(String(64), nullable=False)
    sent_by_username: Mapped[str] = mapped_column(Text, nullable=False)
    source: Mapped[str] = mapped_column(String(32), nullable=False, default=SOURCE_INTERNAL)
    sender: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=STATUS_SENT)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
