"""Authentication schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from notevault.models.user import UserRole
from notevault.schemas.base import EMAIL_PATTERN, CamelModel


class LoginRequest(CamelModel):
    """Schema for login credentials."""

    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1)


class RegisterRequest(CamelModel):
    """Schema for self-service registration (always a USER account)."""

    email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=6, max_length=128)
    name: str = Field(..., min_length=1, max_length=255)
    username: str | None = Field(None, min_length=3, max_length=50)


class TokenResponse(CamelModel):
    """Schema for JWT token response."""

    access_token: str
    token_type: str = "bearer"


class UserSummary(CamelModel):
    """Public projection of a user embedded in other resources."""

    id: str
    username: str | None = None
    name: str | None = None
    image: str | None = None
    role: UserRole | None = None
    is_online: bool = False


class UserRead(CamelModel):
    """Schema for reading user info (response)."""

    id: str
    email: str
    username: str | None = None
    name: str | None = None
    image: str | None = None
    role: UserRole
    is_active: bool
    is_online: bool
    last_seen: datetime | None = None
    last_login_at: datetime | None = None
    balance: float
    level: int
    experience: int
    created_at: datetime


class UserEnvelope(CamelModel):
    user: UserRead
