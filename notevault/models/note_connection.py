"""NoteConnection model: directed edge between two notes of one workspace."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from notevault.db.session import Base

if TYPE_CHECKING:
    from notevault.models.note import Note

DEFAULT_CONNECTION_COLOR = "#6b7280"


class ConnectionStyle(str, Enum):
    SOLID = "SOLID"
    DASHED = "DASHED"
    DOTTED = "DOTTED"


class NoteConnection(Base):
    """Edge from_id -> to_id. The (from_id, to_id) pair is unique."""

    __tablename__ = "note_connections"
    __table_args__ = (
        UniqueConstraint("from_id", "to_id", name="uq_note_connections_from_to"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    from_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("notes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    to_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("notes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    label: Mapped[str | None] = mapped_column(String(255), nullable=True)
    color: Mapped[str] = mapped_column(String(7), default=DEFAULT_CONNECTION_COLOR, nullable=False)
    style: Mapped[ConnectionStyle] = mapped_column(
        SAEnum(ConnectionStyle, native_enum=False, length=10),
        default=ConnectionStyle.SOLID,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )

    from_note: Mapped[Note] = relationship("Note", foreign_keys=[from_id], lazy="joined")
    to_note: Mapped[Note] = relationship("Note", foreign_keys=[to_id], lazy="joined")
