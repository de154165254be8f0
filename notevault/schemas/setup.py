"""Initial administrator setup schemas."""

from __future__ import annotations

from pydantic import Field

from notevault.models.user import UserRole
from notevault.schemas.base import EMAIL_PATTERN, CamelModel

MIN_PASSWORD_LENGTH = 6


class SetupStatus(CamelModel):
    setup_required: bool


class SetupRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH, max_length=128)


class SetupUser(CamelModel):
    id: str
    name: str | None = None
    email: str
    role: UserRole


class SetupResponse(CamelModel):
    message: str
    user: SetupUser
