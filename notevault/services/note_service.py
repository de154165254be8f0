"""Notes: listing, creation, edits, soft delete and restore."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session

from notevault.models.note import Note, NoteType
from notevault.models.workspace import Workspace
from notevault.models.workspace_member import WorkspaceMember
from notevault.schemas.audit import NoteActivity
from notevault.services import activity as activity_log
from notevault.services.access_control import (
    ForbiddenError,
    Principal,
    WorkspaceAction,
    authorize_workspace,
)
from notevault.services.settings_service import get_system_settings

logger = logging.getLogger(__name__)


class NoteNotFoundError(LookupError):
    """Note is absent or not visible to the caller."""


class NoteQuotaError(ValueError):
    """Workspace already holds max_notes_per_workspace live notes."""


def list_notes(
    db: Session,
    principal: Principal,
    page: int = 1,
    limit: int = 10,
    search: str | None = None,
    note_type: NoteType | None = None,
    author_id: str | None = None,
    workspace_id: str | None = None,
) -> tuple[list[Note], int]:
    """Page of live notes, newest first, and the total match count.

    Without a workspace the caller sees their own notes, public standalone
    notes and notes in live workspaces they can read. With a workspace the
    caller needs READ on it and sees all its live notes. Search narrows the
    visible set; it never widens it.
    """
    query = db.query(Note).filter(Note.is_deleted == False)  # noqa: E712
    if workspace_id is not None:
        authorize_workspace(db, principal, workspace_id, WorkspaceAction.READ)
        query = query.filter(Note.workspace_id == workspace_id)
    else:
        member_of = db.query(WorkspaceMember.workspace_id).filter(
            WorkspaceMember.user_id == principal.user_id
        )
        readable = db.query(Workspace.id).filter(
            Workspace.is_deleted == False,  # noqa: E712
            or_(
                Workspace.owner_id == principal.user_id,
                Workspace.id.in_(member_of),
                Workspace.is_public == True,  # noqa: E712
            ),
        )
        query = query.filter(
            or_(
                Note.author_id == principal.user_id,
                and_(Note.workspace_id.is_(None), Note.is_public == True),  # noqa: E712
                Note.workspace_id.in_(readable),
            )
        )

    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(Note.title.ilike(pattern), Note.content.ilike(pattern)))
    if note_type is not None:
        query = query.filter(Note.type == note_type)
    if author_id:
        query = query.filter(Note.author_id == author_id)

    total = query.count()
    notes = (
        query.order_by(Note.created_at.desc(), Note.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return notes, total


def _check_note_quota(db: Session, workspace_id: str) -> None:
    limit = get_system_settings(db).max_notes_per_workspace
    live = (
        db.query(func.count(Note.id))
        .filter(Note.workspace_id == workspace_id, Note.is_deleted == False)  # noqa: E712
        .scalar()
    )
    if (live or 0) >= limit:
        raise NoteQuotaError(f"Note limit reached for this workspace ({limit})")


def create_note(db: Session, principal: Principal, data: dict[str, Any]) -> Note:
    """Create a note, in a workspace (EDIT required, quota enforced) or standalone."""
    workspace_id = data.get("workspace_id")
    if workspace_id is not None:
        authorize_workspace(db, principal, workspace_id, WorkspaceAction.EDIT)
        _check_note_quota(db, workspace_id)

    note = Note(author_id=principal.user_id, **data)
    db.add(note)
    db.flush()
    activity_log.add_activity(
        db,
        type=activity_log.NOTE_CREATED,
        title="Note Created",
        description=f'Created note "{note.title}"',
        user_id=principal.user_id,
        workspace_id=workspace_id,
        metadata=NoteActivity(note_id=note.id),
    )
    db.commit()
    db.refresh(note)
    return note


def _load_for_edit(
    db: Session, principal: Principal, note_id: str, deleted: bool = False
) -> Note:
    """Load a note the caller may modify.

    Workspace notes need EDIT on the workspace; standalone notes belong to
    their author alone. Notes the caller cannot even see raise
    NoteNotFoundError.
    """
    note = db.get(Note, note_id)
    if note is None or note.is_deleted != deleted:
        raise NoteNotFoundError("Note not found")

    if note.workspace_id is not None:
        authorize_workspace(db, principal, note.workspace_id, WorkspaceAction.EDIT)
        return note

    if note.author_id != principal.user_id:
        if not note.is_public:
            raise NoteNotFoundError("Note not found")
        raise ForbiddenError("Only the author can modify this note")
    return note


def update_note(
    db: Session, principal: Principal, note_id: str, changes: dict[str, Any]
) -> Note:
    note = _load_for_edit(db, principal, note_id)
    for field, value in changes.items():
        setattr(note, field, value)
    note.updated_at = datetime.now(UTC)
    activity_log.add_activity(
        db,
        type=activity_log.NOTE_UPDATED,
        title="Note Updated",
        description=f'Updated note "{note.title}"',
        user_id=principal.user_id,
        workspace_id=note.workspace_id,
        metadata=NoteActivity(note_id=note.id),
    )
    db.commit()
    db.refresh(note)
    return note


def delete_note(db: Session, principal: Principal, note_id: str) -> Note:
    """Soft delete: the note leaves listings but stays restorable."""
    note = _load_for_edit(db, principal, note_id)
    now = datetime.now(UTC)
    note.is_deleted = True
    note.deleted_at = now
    note.updated_at = now
    activity_log.add_activity(
        db,
        type=activity_log.NOTE_DELETED,
        title="Note Deleted",
        description=f'Moved note "{note.title}" to trash',
        user_id=principal.user_id,
        workspace_id=note.workspace_id,
        metadata=NoteActivity(note_id=note.id),
    )
    db.commit()
    return note


def restore_note(db: Session, principal: Principal, note_id: str) -> Note:
    note = _load_for_edit(db, principal, note_id, deleted=True)
    if note.workspace_id is not None:
        _check_note_quota(db, note.workspace_id)
    note.is_deleted = False
    note.deleted_at = None
    note.updated_at = datetime.now(UTC)
    activity_log.add_activity(
        db,
        type=activity_log.NOTE_RESTORED,
        title="Note Restored",
        description=f'Restored note "{note.title}"',
        user_id=principal.user_id,
        workspace_id=note.workspace_id,
        metadata=NoteActivity(note_id=note.id),
    )
    db.commit()
    db.refresh(note)
    return note
