"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from notifyhub.auth.router import router as auth_router
from notifyhub.config import get_settings
from notifyhub.database import close_db, create_schema, init_db
from notifyhub.health.router import router as health_router
from notifyhub.middleware import setup_middleware
from notifyhub.notifications.external_router import router as external_router
from notifyhub.notifications.providers import close_push_provider, init_push_provider
from notifyhub.notifications.router import router as notifications_router

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle.

    A push provider that cannot be built (e.g. missing Firebase credentials)
    aborts startup instead of failing each request.
    """
    settings = get_settings()
    await init_db(settings.database_url)
    if settings.auto_create_schema:
        await create_schema()
    provider = init_push_provider(settings)
    logger.info("startup_complete", push_provider=provider.name, default_tokens=len(settings.default_push_tokens))

    yield

    await close_push_provider()
    await close_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="NotifyHub API",
        description="Push notification dashboard backend: login, FCM dispatch and history",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(auth_router)
    app.include_router(notifications_router)
    app.include_router(external_router)

    return app


app = create_app()
