"""AIInsight model: generated summaries, suggestions and patterns."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, Boolean, DateTime, Float, ForeignKey, String, Text
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from notevault.db.session import Base

if TYPE_CHECKING:
    from notevault.models.note import Note
    from notevault.models.workspace import Workspace


class InsightType(str, Enum):
    SUMMARY = "SUMMARY"
    SUGGESTION = "SUGGESTION"
    PATTERN = "PATTERN"
    DUPLICATE = "DUPLICATE"
    IMPROVEMENT = "IMPROVEMENT"
    RELATIONSHIP = "RELATIONSHIP"


class AIInsight(Base):
    """Owned by the requesting user; only is_read changes after creation."""

    __tablename__ = "ai_insights"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    type: Mapped[InsightType] = mapped_column(
        SAEnum(InsightType, native_enum=False, length=20), nullable=False
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    confidence: Mapped[float] = mapped_column(Float, default=0.5, nullable=False)
    metadata_: Mapped[dict[str, Any] | None] = mapped_column("metadata", JSON, nullable=True)
    is_read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    workspace_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=True, index=True
    )
    note_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("notes.id", ondelete="CASCADE"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )

    note: Mapped[Note | None] = relationship("Note", lazy="select")
    workspace: Mapped[Workspace | None] = relationship("Workspace", lazy="select")
