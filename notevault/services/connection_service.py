"""Directed edges between notes of one workspace."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, aliased

from notevault.models.note import Note
from notevault.models.note_connection import ConnectionStyle, NoteConnection
from notevault.schemas.audit import ConnectionActivity
from notevault.services import activity as activity_log
from notevault.services.access_control import Principal, WorkspaceAction, authorize_workspace

logger = logging.getLogger(__name__)


class ConnectionNotFoundError(LookupError):
    """Connection is absent or does not belong to the workspace."""


class ConnectionNotesNotFoundError(LookupError):
    """An endpoint is missing, soft-deleted, or in another workspace."""


class ConnectionConflictError(ValueError):
    """An edge with the same (from_id, to_id) already exists."""


def _workspace_connections(db: Session, workspace_id: str):
    from_note = aliased(Note)
    to_note = aliased(Note)
    return (
        db.query(NoteConnection)
        .join(from_note, NoteConnection.from_id == from_note.id)
        .join(to_note, NoteConnection.to_id == to_note.id)
        .filter(
            from_note.workspace_id == workspace_id,
            from_note.is_deleted == False,  # noqa: E712
            to_note.is_deleted == False,  # noqa: E712
        )
    )


def list_connections(
    db: Session, principal: Principal, workspace_id: str
) -> list[NoteConnection]:
    """Edges whose endpoints are both live notes of the workspace."""
    authorize_workspace(db, principal, workspace_id, WorkspaceAction.READ)
    return (
        _workspace_connections(db, workspace_id)
        .order_by(NoteConnection.created_at)
        .all()
    )


def _live_note(db: Session, note_id: str, workspace_id: str) -> Note | None:
    return (
        db.query(Note)
        .filter(
            Note.id == note_id,
            Note.workspace_id == workspace_id,
            Note.is_deleted == False,  # noqa: E712
        )
        .first()
    )


def create_connection(
    db: Session,
    principal: Principal,
    workspace_id: str,
    from_id: str,
    to_id: str,
    label: str | None,
    color: str,
    style: ConnectionStyle,
) -> NoteConnection:
    """Create an edge. Requires EDIT.

    The pre-insert duplicate check covers the common case; the unique
    constraint catches concurrent inserts, which map to the same conflict.
    """
    authorize_workspace(db, principal, workspace_id, WorkspaceAction.EDIT)
    from_note = _live_note(db, from_id, workspace_id)
    to_note = _live_note(db, to_id, workspace_id)
    if from_note is None or to_note is None:
        raise ConnectionNotesNotFoundError("One or both notes not found")

    existing = (
        db.query(NoteConnection)
        .filter(NoteConnection.from_id == from_id, NoteConnection.to_id == to_id)
        .first()
    )
    if existing is not None:
        raise ConnectionConflictError("Connection already exists")

    connection = NoteConnection(
        from_id=from_id, to_id=to_id, label=label, color=color, style=style
    )
    db.add(connection)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        logger.info("Concurrent duplicate connection %s -> %s", from_id, to_id)
        raise ConnectionConflictError("Connection already exists") from None

    activity_log.add_activity(
        db,
        type=activity_log.NOTE_UPDATED,
        title="Note connection created",
        description=f'Connected "{from_note.title}" to "{to_note.title}"',
        user_id=principal.user_id,
        workspace_id=workspace_id,
        metadata=ConnectionActivity(
            connection_id=connection.id, from_note_id=from_id, to_note_id=to_id
        ),
    )
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConnectionConflictError("Connection already exists") from None
    db.refresh(connection)
    return connection


def _load_connection(
    db: Session, workspace_id: str, connection_id: str
) -> NoteConnection:
    connection = (
        _workspace_connections(db, workspace_id)
        .filter(NoteConnection.id == connection_id)
        .first()
    )
    if connection is None:
        raise ConnectionNotFoundError("Connection not found")
    return connection


def update_connection(
    db: Session,
    principal: Principal,
    workspace_id: str,
    connection_id: str,
    changes: dict[str, Any],
) -> NoteConnection:
    authorize_workspace(db, principal, workspace_id, WorkspaceAction.EDIT)
    connection = _load_connection(db, workspace_id, connection_id)
    for field, value in changes.items():
        setattr(connection, field, value)
    activity_log.add_activity(
        db,
        type=activity_log.NOTE_UPDATED,
        title="Note connection updated",
        description=f'Updated connection "{connection.label or "unlabeled"}"',
        user_id=principal.user_id,
        workspace_id=workspace_id,
        metadata=ConnectionActivity(connection_id=connection.id, updates=changes),
    )
    db.commit()
    db.refresh(connection)
    return connection


def delete_connection(
    db: Session, principal: Principal, workspace_id: str, connection_id: str
) -> None:
    authorize_workspace(db, principal, workspace_id, WorkspaceAction.EDIT)
    connection = _load_connection(db, workspace_id, connection_id)
    metadata = ConnectionActivity(
        connection_id=connection.id,
        from_note_id=connection.from_id,
        to_note_id=connection.to_id,
    )
    description = (
        f'Removed connection between "{connection.from_note.title}" '
        f'and "{connection.to_note.title}"'
    )
    db.delete(connection)
    activity_log.add_activity(
        db,
        type=activity_log.NOTE_UPDATED,
        title="Note connection deleted",
        description=description,
        user_id=principal.user_id,
        workspace_id=workspace_id,
        metadata=metadata,
    )
    db.commit()
