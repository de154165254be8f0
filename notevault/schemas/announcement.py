"""Announcement schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from notevault.schemas.auth import UserSummary
from notevault.schemas.base import CamelModel


class AnnouncementCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1, max_length=2000)
    is_pinned: bool | None = None
    expires_at: datetime | None = None


class AnnouncementRead(CamelModel):
    id: str
    title: str
    content: str
    is_pinned: bool
    expires_at: datetime
    author_id: str
    author: UserSummary
    created_at: datetime


class AnnouncementEnvelope(CamelModel):
    announcement: AnnouncementRead


class AnnouncementList(CamelModel):
    announcements: list[AnnouncementRead]
