"""
Credential store access.

Accounts are provisioned out-of-band by the seed command; the service only
reads them.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from notifyhub.auth.password import hash_password, verify_password
from notifyhub.db.models import User
from notifyhub.errors import InvalidCredentialsError, PersistenceError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


async def find_user(db: AsyncSession, username: str) -> User | None:
    """Fetch a user by exact username."""
    try:
        result = await db.execute(select(User).where(User.username == username))
    except SQLAlchemyError as e:
        logger.error("user_lookup_failed", error=str(e))
        raise PersistenceError(str(e)) from e
    return result.scalar_one_or_none()


async def authenticate_user(db: AsyncSession, username: str, password: str) -> User:
    """
    Check a username/password pair.

    Unknown usernames and wrong passwords raise the same error so callers
    cannot tell which accounts exist.
    """
    user = await find_user(db, username)
    if user is None:
        logger.info("login_failed", reason="unknown_user")
        raise InvalidCredentialsError
    if not verify_password(password, user.password_hash):
        logger.info("login_failed", reason="bad_password", user_id=user.id)
        raise InvalidCredentialsError
    return user


async def create_user(db: AsyncSession, username: str, password: str, role: str = "admin") -> User:
    """Insert a new account. Caller commits."""
    user = User(
        username=username,
        password_hash=hash_password(password),
        role=role,
        created_at=datetime.now(timezone.utc),
    )
    db.add(user)
    await db.flush()
    return user
