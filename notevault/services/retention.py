"""Retention cleanup for chat history and the note trash."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from sqlalchemy import or_
from sqlalchemy.orm import Session

from notevault.models.ai_insight import AIInsight
from notevault.models.chat_message import ChatMessage
from notevault.models.note import Note
from notevault.models.note_connection import NoteConnection
from notevault.services.settings_service import get_system_settings

logger = logging.getLogger(__name__)


@dataclass
class RetentionResult:
    chat_messages_deleted: int
    notes_purged: int


def purge_expired(db: Session, now: datetime | None = None) -> RetentionResult:
    """Delete chat older than chat_retention_days and trashed notes older
    than trash_retention_hours. Limits come from the settings row.
    """
    now = now or datetime.now(UTC)
    settings = get_system_settings(db)
    chat_cutoff = now - timedelta(days=settings.chat_retention_days)
    trash_cutoff = now - timedelta(hours=settings.trash_retention_hours)

    chat_deleted = (
        db.query(ChatMessage)
        .filter(ChatMessage.created_at < chat_cutoff)
        .delete(synchronize_session=False)
    )

    expired_ids = [
        note_id
        for (note_id,) in db.query(Note.id).filter(
            Note.is_deleted == True,  # noqa: E712
            Note.deleted_at.is_not(None),
            Note.deleted_at < trash_cutoff,
        )
    ]
    if expired_ids:
        db.query(NoteConnection).filter(
            or_(NoteConnection.from_id.in_(expired_ids), NoteConnection.to_id.in_(expired_ids))
        ).delete(synchronize_session=False)
        db.query(AIInsight).filter(AIInsight.note_id.in_(expired_ids)).delete(
            synchronize_session=False
        )
        db.query(Note).filter(Note.id.in_(expired_ids)).delete(synchronize_session=False)

    db.commit()
    logger.info(
        "Retention cleanup: %d chat messages deleted, %d notes purged",
        chat_deleted,
        len(expired_ids),
    )
    return RetentionResult(chat_messages_deleted=chat_deleted, notes_purged=len(expired_ids))
