"""Note schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from notevault.models.note import NoteType
from notevault.schemas.auth import UserSummary
from notevault.schemas.base import HEX_COLOR_PATTERN, CamelModel, Pagination


class NoteCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1)
    type: NoteType = NoteType.TEXT
    tags: list[str] = Field(default_factory=list)
    is_public: bool = True
    color: str | None = Field(None, pattern=HEX_COLOR_PATTERN)
    workspace_id: str | None = None
    x: float = 0.0
    y: float = 0.0
    width: float = Field(250.0, gt=0)
    height: float = Field(200.0, gt=0)


class NoteUpdate(CamelModel):
    title: str | None = Field(None, min_length=1, max_length=200)
    content: str | None = Field(None, min_length=1)
    type: NoteType | None = None
    tags: list[str] | None = None
    is_public: bool | None = None
    color: str | None = Field(None, pattern=HEX_COLOR_PATTERN)
    x: float | None = None
    y: float | None = None
    width: float | None = Field(None, gt=0)
    height: float | None = Field(None, gt=0)


class NoteRead(CamelModel):
    id: str
    title: str
    content: str
    type: NoteType
    color: str | None = None
    tags: list[str]
    is_public: bool
    x: float
    y: float
    width: float
    height: float
    author_id: str
    author: UserSummary
    workspace_id: str | None = None
    is_deleted: bool
    deleted_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class NoteEnvelope(CamelModel):
    note: NoteRead


class NoteList(CamelModel):
    notes: list[NoteRead]
    pagination: Pagination
