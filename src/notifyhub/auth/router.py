"""Login endpoint."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from notifyhub.auth.dependencies import check_shared_secret
from notifyhub.auth.jwt import create_access_token
from notifyhub.auth.schemas import LoginRequest, LoginResponse, UserResponse
from notifyhub.auth.service import authenticate_user
from notifyhub.database import get_session
from notifyhub.errors import ValidationError

logger = structlog.get_logger()

router = APIRouter(tags=["Authentication"])


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    x_secret_key: str | None = Header(None, alias="x-secret-key"),
    db: AsyncSession = Depends(get_session),
) -> LoginResponse:
    """Check credentials and the shared secret, then issue a token."""
    # Missing fields answer 400 before the secret is looked at.
    if not body.username or not body.password:
        raise ValidationError("Username and password are required")
    check_shared_secret(x_secret_key)

    user = await authenticate_user(db, body.username, body.password)
    token = create_access_token(user.id, user.username)
    logger.info("login_succeeded", user_id=user.id, username=user.username)

    return LoginResponse(
        token=token,
        user=UserResponse(id=str(user.id), username=user.username, role=user.role),
    )
