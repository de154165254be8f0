"""Note API routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from notevault.api.deps import get_db, get_principal
from notevault.models.note import NoteType
from notevault.schemas.base import Pagination
from notevault.schemas.note import NoteCreate, NoteEnvelope, NoteList, NoteRead, NoteUpdate
from notevault.services import note_service
from notevault.services.access_control import Principal

router = APIRouter()


@router.get("", response_model=NoteList)
def list_notes(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: str | None = Query(None, max_length=200),
    type: NoteType | None = None,
    user_id: str | None = Query(None, alias="userId"),
    workspace_id: str | None = Query(None, alias="workspaceId"),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
) -> NoteList:
    """Visible notes, newest first. Search narrows the visible set."""
    notes, total = note_service.list_notes(
        db,
        principal,
        page=page,
        limit=limit,
        search=search,
        note_type=type,
        author_id=user_id,
        workspace_id=workspace_id,
    )
    return NoteList(
        notes=[NoteRead.model_validate(n) for n in notes],
        pagination=Pagination.build(page, limit, total),
    )


@router.post("", status_code=201, response_model=NoteEnvelope)
def create_note(
    body: NoteCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
) -> NoteEnvelope:
    data = body.model_dump()
    if data.get("color") is None:
        data.pop("color", None)
    try:
        note = note_service.create_note(db, principal, data)
    except note_service.NoteQuotaError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return NoteEnvelope(note=NoteRead.model_validate(note))


@router.put("/{note_id}", response_model=NoteEnvelope)
def update_note(
    note_id: str,
    body: NoteUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
) -> NoteEnvelope:
    changes = {k: v for k, v in body.model_dump(exclude_unset=True).items() if v is not None}
    try:
        note = note_service.update_note(db, principal, note_id, changes)
    except note_service.NoteNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return NoteEnvelope(note=NoteRead.model_validate(note))


@router.delete("/{note_id}")
def delete_note(
    note_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
) -> dict:
    """Move a note to the trash."""
    try:
        note_service.delete_note(db, principal, note_id)
    except note_service.NoteNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"message": "Note deleted"}


@router.post("/{note_id}/restore", response_model=NoteEnvelope)
def restore_note(
    note_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
) -> NoteEnvelope:
    try:
        note = note_service.restore_note(db, principal, note_id)
    except note_service.NoteNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except note_service.NoteQuotaError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return NoteEnvelope(note=NoteRead.model_validate(note))
