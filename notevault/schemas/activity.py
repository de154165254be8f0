"""Activity feed schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field

from notevault.schemas.base import CamelModel


class ActivityRead(CamelModel):
    id: str
    type: str
    title: str
    description: str | None = None
    user_id: str
    workspace_id: str | None = None
    metadata: dict[str, Any] | None = Field(None, validation_alias="metadata_")
    created_at: datetime


class ActivityList(CamelModel):
    activities: list[ActivityRead]
