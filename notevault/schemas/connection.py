"""Note connection schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from notevault.models.note_connection import DEFAULT_CONNECTION_COLOR, ConnectionStyle
from notevault.schemas.base import HEX_COLOR_PATTERN, CamelModel


class ConnectionCreate(CamelModel):
    from_id: str = Field(..., min_length=1)
    to_id: str = Field(..., min_length=1)
    label: str | None = Field(None, max_length=255)
    color: str = Field(DEFAULT_CONNECTION_COLOR, pattern=HEX_COLOR_PATTERN)
    style: ConnectionStyle = ConnectionStyle.SOLID


class ConnectionUpdate(CamelModel):
    label: str | None = Field(None, max_length=255)
    color: str | None = Field(None, pattern=HEX_COLOR_PATTERN)
    style: ConnectionStyle | None = None


class ConnectionNote(CamelModel):
    id: str
    title: str
    workspace_id: str | None = None


class ConnectionRead(CamelModel):
    id: str
    from_id: str
    to_id: str
    label: str | None = None
    color: str
    style: ConnectionStyle
    created_at: datetime
    from_note: ConnectionNote
    to_note: ConnectionNote


class ConnectionEnvelope(CamelModel):
    connection: ConnectionRead


class ConnectionList(CamelModel):
    connections: list[ConnectionRead]
