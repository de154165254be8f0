"""AI insight schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field

from notevault.models.ai_insight import InsightType
from notevault.schemas.base import CamelModel


class InsightRef(CamelModel):
    id: str
    title: str


class InsightWorkspaceRef(CamelModel):
    id: str
    name: str


class InsightRead(CamelModel):
    id: str
    type: InsightType
    title: str
    content: str
    confidence: float
    metadata: dict[str, Any] | None = Field(None, validation_alias="metadata_")
    is_read: bool
    user_id: str
    workspace_id: str | None = None
    note_id: str | None = None
    created_at: datetime


class InsightDetail(InsightRead):
    note: InsightRef | None = None
    workspace: InsightWorkspaceRef | None = None


class InsightEnvelope(CamelModel):
    insight: InsightRead


class InsightList(CamelModel):
    insights: list[InsightDetail]


class GenerateInsightsRequest(CamelModel):
    workspace_id: str | None = None
    note_id: str | None = None


class SuggestionRead(CamelModel):
    type: str
    title: str
    description: str
    confidence: float


class GenerateInsightsResponse(CamelModel):
    insights: list[InsightRead]
    suggestions: list[SuggestionRead]
