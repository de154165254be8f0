"""Activity feed: user-visible history written alongside mutations."""

from __future__ import annotations

from pydantic import BaseModel
from sqlalchemy import or_
from sqlalchemy.orm import Session

from notevault.models.activity import Activity
from notevault.models.workspace import Workspace
from notevault.models.workspace_member import WorkspaceMember

WORKSPACE_CREATED = "WORKSPACE_CREATED"
WORKSPACE_UPDATED = "WORKSPACE_UPDATED"
WORKSPACE_DELETED = "WORKSPACE_DELETED"
USER_INVITED = "USER_INVITED"
MEMBER_REMOVED = "MEMBER_REMOVED"
NOTE_CREATED = "NOTE_CREATED"
NOTE_UPDATED = "NOTE_UPDATED"
NOTE_DELETED = "NOTE_DELETED"
NOTE_RESTORED = "NOTE_RESTORED"
CHAT_MESSAGE = "CHAT_MESSAGE"
ANNOUNCEMENT_CREATED = "ANNOUNCEMENT_CREATED"
SYSTEM_SETTINGS_UPDATED = "SYSTEM_SETTINGS_UPDATED"
MAINTENANCE_MODE_TOGGLED = "MAINTENANCE_MODE_TOGGLED"
USER_ROLE_CHANGED = "USER_ROLE_CHANGED"
USER_STATUS_CHANGED = "USER_STATUS_CHANGED"


def add_activity(
    db: Session,
    *,
    type: str,
    title: str,
    user_id: str,
    description: str | None = None,
    workspace_id: str | None = None,
    metadata: BaseModel | None = None,
) -> Activity:
    """Stage an activity row in the caller's transaction (no commit)."""
    activity = Activity(
        type=type,
        title=title,
        description=description,
        user_id=user_id,
        workspace_id=workspace_id,
        metadata_=metadata.model_dump(mode="json") if metadata is not None else None,
    )
    db.add(activity)
    return activity


def list_recent_activity(
    db: Session,
    user_id: str,
    workspace_id: str | None = None,
    limit: int = 20,
) -> list[Activity]:
    """Own activity plus activity in workspaces the user owns or belongs to."""
    query = db.query(Activity)
    if workspace_id is not None:
        query = query.filter(Activity.workspace_id == workspace_id)
    else:
        member_of = db.query(WorkspaceMember.workspace_id).filter(
            WorkspaceMember.user_id == user_id
        )
        owned = db.query(Workspace.id).filter(Workspace.owner_id == user_id)
        query = query.filter(
            or_(
                Activity.user_id == user_id,
                Activity.workspace_id.in_(member_of),
                Activity.workspace_id.in_(owned),
            )
        )
    return query.order_by(Activity.created_at.desc()).limit(limit).all()
