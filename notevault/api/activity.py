"""Activity feed API route."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from notevault.api.deps import get_db, get_principal
from notevault.schemas.activity import ActivityList, ActivityRead
from notevault.services.access_control import Principal, WorkspaceAction, authorize_workspace
from notevault.services.activity import list_recent_activity

router = APIRouter()


@router.get("", response_model=ActivityList)
def recent_activity(
    workspace_id: str | None = Query(None, alias="workspaceId"),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
) -> ActivityList:
    """Own activity and activity in the caller's workspaces, newest first."""
    if workspace_id is not None:
        authorize_workspace(db, principal, workspace_id, WorkspaceAction.READ)
    rows = list_recent_activity(db, principal.user_id, workspace_id=workspace_id, limit=limit)
    return ActivityList(activities=[ActivityRead.model_validate(r) for r in rows])
