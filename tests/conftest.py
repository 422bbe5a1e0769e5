"""Shared test fixtures."""

from __future__ import annotations

import asyncio
import os
import tempfile
from collections.abc import AsyncGenerator, Iterable

_TEST_DIR = tempfile.mkdtemp(prefix="notifyhub_test_")

# Settings are read from the environment, so these must be set before any
# notifyhub import builds them.
os.environ["NOTIFYHUB_DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_TEST_DIR, 'notifyhub.db')}"
os.environ["NOTIFYHUB_NOTIFICATION_SECRET"] = "test-shared-secret"
os.environ["NOTIFYHUB_EXTERNAL_API_KEY"] = "test-external-api-key"
os.environ["NOTIFYHUB_JWT_SECRET"] = "test-jwt-secret-0123456789abcdef0123456789"
os.environ["NOTIFYHUB_FCM_TOKENS"] = "device-token-a, device-token-b"
os.environ["NOTIFYHUB_PUSH_PROVIDER"] = "console"
os.environ["NOTIFYHUB_LOG_FORMAT"] = "console"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from notifyhub.auth.jwt import create_access_token  # noqa: E402
from notifyhub.auth.seed import seed_admin_user  # noqa: E402
from notifyhub.config import get_settings  # noqa: E402
from notifyhub.database import close_db, create_schema, get_engine, get_session, init_db  # noqa: E402
from notifyhub.db.base import Base  # noqa: E402
from notifyhub.db.models import User  # noqa: E402
from notifyhub.errors import UpstreamDeliveryError  # noqa: E402
from notifyhub.main import create_app  # noqa: E402
from notifyhub.notifications.providers import (  # noqa: E402
    BasePushProvider,
    PushMessage,
    close_push_provider,
    init_push_provider,
)

SHARED_SECRET = "test-shared-secret"
EXTERNAL_API_KEY = "test-external-api-key"
BAD_TOKENS = ("bad-token-1", "bad-token-2")


class FakePushProvider(BasePushProvider):
    """Records every message; rejects the tokens it was told to reject."""

    name = "fake"

    def __init__(self, rejected: Iterable[str] = BAD_TOKENS, delay: float = 0.0) -> None:
        self.rejected = set(rejected)
        self.delay = delay
        self.sent: list[PushMessage] = []

    async def send(self, message: PushMessage) -> str:
        if self.delay:
            await asyncio.sleep(self.delay)
        self.sent.append(message)
        if message.token in self.rejected:
            raise UpstreamDeliveryError("Requested entity was not found.")
        return f"projects/test-project/messages/{len(self.sent)}"


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Drop cached settings around each test so env tweaks never leak."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def fake_provider() -> FakePushProvider:
    return FakePushProvider()


@pytest_asyncio.fixture
async def client(fake_provider: FakePushProvider) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client over a fresh schema and the fake push provider."""
    settings = get_settings()
    app = create_app()
    await init_db(settings.database_url)

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await create_schema()

    init_push_provider(settings, provider=fake_provider)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    await close_push_provider()
    await close_db()


@pytest_asyncio.fixture
async def db_session(client: AsyncClient) -> AsyncGenerator[AsyncSession, None]:
    """Direct database session on the same schema the client uses."""
    sessions = get_session()
    session = await anext(sessions)
    yield session
    await sessions.aclose()


@pytest_asyncio.fixture
async def admin_user(db_session: AsyncSession) -> User:
    user, _ = await seed_admin_user(db_session, "admin", "admin123")
    return user


@pytest.fixture
def internal_headers(admin_user: User) -> dict[str, str]:
    """Bearer token + shared secret, as the dashboard sends them."""
    token = create_access_token(admin_user.id, admin_user.username)
    return {"Authorization": f"Bearer {token}", "x-secret-key": SHARED_SECRET}


@pytest.fixture
def external_headers() -> dict[str, str]:
    return {"x-api-key": EXTERNAL_API_KEY}
