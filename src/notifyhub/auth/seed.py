"""Admin account seeding (``notifyhub-seed-admin``).

Idempotent: an existing account with the same username is left untouched.
"""

from __future__ import annotations

import argparse
import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from notifyhub.auth.service import create_user, find_user
from notifyhub.config import get_settings
from notifyhub.database import close_db, create_schema, get_session, init_db
from notifyhub.db.models import User

logger = logging.getLogger(__name__)

DEFAULT_USERNAME = "admin"
DEFAULT_PASSWORD = "admin123"


async def seed_admin_user(
    db: AsyncSession,
    username: str = DEFAULT_USERNAME,
    password: str = DEFAULT_PASSWORD,
    role: str = "admin",
) -> tuple[User, bool]:
    """Create the account if missing. Returns (user, created)."""
    existing = await find_user(db, username)
    if existing is not None:
        logger.info("User %s already exists", username)
        return existing, False

    user = await create_user(db, username, password, role=role)
    await db.commit()
    logger.info("User %s created with role %s", username, role)
    return user, True


async def _run(username: str, password: str, role: str) -> bool:
    settings = get_settings()
    await init_db(settings.database_url)
    try:
        await create_schema()
        created = False
        async for db in get_session():
            _, created = await seed_admin_user(db, username, password, role)
            break
        return created
    finally:
        await close_db()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create the dashboard admin account")
    parser.add_argument("--username", default=DEFAULT_USERNAME)
    parser.add_argument("--password", default=DEFAULT_PASSWORD)
    parser.add_argument("--role", default="admin")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    if args.password == DEFAULT_PASSWORD:
        logger.warning("Using the default password; change it before exposing the dashboard")

    created = asyncio.run(_run(args.username, args.password, args.role))
    if created:
        logger.info("Log in with username %s", args.username)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
