"""Pydantic schemas for request/response validation."""

from notevault.schemas.auth import LoginRequest, RegisterRequest, TokenResponse, UserRead
from notevault.schemas.base import CamelModel, Pagination
from notevault.schemas.setup import SetupRequest, SetupResponse, SetupStatus

__all__ = [
    "CamelModel",
    "LoginRequest",
    "Pagination",
    "RegisterRequest",
    "SetupRequest",
    "SetupResponse",
    "SetupStatus",
    "TokenResponse",
    "UserRead",
]
