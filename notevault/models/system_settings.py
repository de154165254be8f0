"""SystemSettings model: singleton row of operator-controlled settings."""

from datetime import UTC, datetime

from sqlalchemy import JSON, Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from notevault.db.session import Base

DEFAULT_ALLOWED_FILE_TYPES = [
    "image/png",
    "image/jpeg",
    "image/gif",
    "application/pdf",
    "text/plain",
    "text/markdown",
]


class SystemSettings(Base):
    """At most one row. Created with defaults on first read."""

    __tablename__ = "system_settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    maintenance_mode: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    maintenance_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    backup_schedule: Mapped[str] = mapped_column(String(100), default="0 2 * * *", nullable=False)
    max_file_size: Mapped[int] = mapped_column(Integer, default=10 * 1024 * 1024, nullable=False)
    allowed_file_types: Mapped[list[str]] = mapped_column(
        JSON, default=lambda: list(DEFAULT_ALLOWED_FILE_TYPES), nullable=False
    )
    max_workspaces_per_user: Mapped[int] = mapped_column(Integer, default=10, nullable=False)
    max_notes_per_workspace: Mapped[int] = mapped_column(Integer, default=1000, nullable=False)
    chat_retention_days: Mapped[int] = mapped_column(Integer, default=30, nullable=False)
    trash_retention_hours: Mapped[int] = mapped_column(Integer, default=72, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )
