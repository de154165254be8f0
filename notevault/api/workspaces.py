"""Workspace API routes: lifecycle, invites, members, note connections."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from notevault.api.deps import get_db, get_principal, require_auth
from notevault.models.user import User
from notevault.models.workspace import Workspace
from notevault.schemas.connection import (
    ConnectionCreate,
    ConnectionEnvelope,
    ConnectionList,
    ConnectionRead,
    ConnectionUpdate,
)
from notevault.schemas.workspace import (
    InviteRequest,
    MemberEnvelope,
    MemberRead,
    WorkspaceCounts,
    WorkspaceCreate,
    WorkspaceEnvelope,
    WorkspaceList,
    WorkspaceRead,
    WorkspaceUpdate,
)
from notevault.services import connection_service, workspace_service
from notevault.services.access_control import Principal

router = APIRouter()


def to_workspace_read(db: Session, workspace: Workspace) -> WorkspaceRead:
    counts = workspace_service.count_workspace(db, workspace.id)
    item = WorkspaceRead.model_validate(workspace)
    item.counts = WorkspaceCounts(notes=counts.notes, members=counts.members)
    return item


# ── Workspaces ───────────────────────────────────────────────────────


@router.get("", response_model=WorkspaceList)
def list_workspaces(
    include_deleted: bool = Query(False, alias="includeDeleted"),
    db: Session = Depends(get_db),
    user: User = Depends(require_auth),
) -> WorkspaceList:
    """Workspaces the caller owns or belongs to."""
    workspaces = workspace_service.list_workspaces(db, user.id, include_deleted=include_deleted)
    return WorkspaceList(workspaces=[to_workspace_read(db, w) for w in workspaces])


@router.post("", status_code=201, response_model=WorkspaceEnvelope)
def create_workspace(
    body: WorkspaceCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_auth),
) -> WorkspaceEnvelope:
    try:
        workspace = workspace_service.create_workspace(
            db,
            user,
            name=body.name,
            description=body.description,
            color=body.color,
            is_public=body.is_public,
        )
    except workspace_service.WorkspaceQuotaError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return WorkspaceEnvelope(workspace=to_workspace_read(db, workspace))


@router.get("/{workspace_id}", response_model=WorkspaceEnvelope)
def get_workspace(
    workspace_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
) -> WorkspaceEnvelope:
    workspace = workspace_service.get_workspace(db, principal, workspace_id)
    return WorkspaceEnvelope(workspace=to_workspace_read(db, workspace))


@router.put("/{workspace_id}", response_model=WorkspaceEnvelope)
def update_workspace(
    workspace_id: str,
    body: WorkspaceUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
) -> WorkspaceEnvelope:
    changes = {k: v for k, v in body.model_dump(exclude_unset=True).items() if v is not None}
    workspace = workspace_service.update_workspace(db, principal, workspace_id, changes)
    return WorkspaceEnvelope(workspace=to_workspace_read(db, workspace))


@router.delete("/{workspace_id}")
def delete_workspace(
    workspace_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
) -> dict:
    """Soft delete. Owner only."""
    workspace_service.delete_workspace(db, principal, workspace_id)
    return {"message": "Workspace deleted"}


# ── Membership ───────────────────────────────────────────────────────


@router.post("/{workspace_id}/invite", status_code=201, response_model=MemberEnvelope)
def invite_member(
    workspace_id: str,
    body: InviteRequest,
    db: Session = Depends(get_db),
    user: User = Depends(require_auth),
) -> MemberEnvelope:
    try:
        member = workspace_service.invite_member(
            db,
            Principal.from_user(user),
            workspace_id,
            email=body.email,
            role=body.role,
            inviter_name=user.name or user.username,
        )
    except workspace_service.InviteeNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except workspace_service.AlreadyMemberError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return MemberEnvelope(member=MemberRead.model_validate(member))


@router.delete("/{workspace_id}/members/{user_id}", status_code=204)
def remove_member(
    workspace_id: str,
    user_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
) -> Response:
    """Remove a member, or leave the workspace when user_id is the caller."""
    try:
        workspace_service.remove_member(db, principal, workspace_id, user_id)
    except workspace_service.MemberNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=204)


# ── Connections ──────────────────────────────────────────────────────


@router.get("/{workspace_id}/connections", response_model=ConnectionList)
def list_connections(
    workspace_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
) -> ConnectionList:
    connections = connection_service.list_connections(db, principal, workspace_id)
    return ConnectionList(connections=[ConnectionRead.model_validate(c) for c in connections])


@router.post("/{workspace_id}/connections", status_code=201, response_model=ConnectionEnvelope)
def create_connection(
    workspace_id: str,
    body: ConnectionCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
) -> ConnectionEnvelope:
    try:
        connection = connection_service.create_connection(
            db,
            principal,
            workspace_id,
            from_id=body.from_id,
            to_id=body.to_id,
            label=body.label,
            color=body.color,
            style=body.style,
        )
    except connection_service.ConnectionNotesNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except connection_service.ConnectionConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return ConnectionEnvelope(connection=ConnectionRead.model_validate(connection))


@router.put("/{workspace_id}/connections/{connection_id}", response_model=ConnectionEnvelope)
def update_connection(
    workspace_id: str,
    connection_id: str,
    body: ConnectionUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
) -> ConnectionEnvelope:
    changes = {k: v for k, v in body.model_dump(exclude_unset=True).items() if v is not None}
    try:
        connection = connection_service.update_connection(
            db, principal, workspace_id, connection_id, changes
        )
    except connection_service.ConnectionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return ConnectionEnvelope(connection=ConnectionRead.model_validate(connection))


@router.delete("/{workspace_id}/connections/{connection_id}")
def delete_connection(
    workspace_id: str,
    connection_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
) -> dict:
    try:
        connection_service.delete_connection(db, principal, workspace_id, connection_id)
    except connection_service.ConnectionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"message": "Connection deleted"}
