"""Request/response schemas for the login endpoint."""

from __future__ import annotations

from pydantic import BaseModel


class LoginRequest(BaseModel):
    """Username + password. Presence is checked by the route to answer 400."""

    username: str | None = None
    password: str | None = None


class UserResponse(BaseModel):
    id: str
    username: str
    role: str


class LoginResponse(BaseModel):
    success: bool = True
    token: str
    user: UserResponse
