"""Workspace lifecycle and membership."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from notevault.models.note import Note
from notevault.models.user import User
from notevault.models.workspace import DEFAULT_WORKSPACE_COLOR, Workspace
from notevault.models.workspace_member import MemberRole, WorkspaceMember
from notevault.schemas.audit import MemberActivity
from notevault.services import activity as activity_log
from notevault.services.access_control import (
    ForbiddenError,
    Principal,
    WorkspaceAction,
    authorize_workspace,
)
from notevault.services.notification import send_invite_notification
from notevault.services.settings_service import get_system_settings

logger = logging.getLogger(__name__)


class WorkspaceQuotaError(ValueError):
    """Owner already has the maximum number of live workspaces."""


class InviteeNotFoundError(LookupError):
    """No account exists for the invited email."""


class AlreadyMemberError(ValueError):
    """The invitee already belongs to the workspace."""


class MemberNotFoundError(LookupError):
    """The user is not a member of the workspace."""


@dataclass
class WorkspaceCounts:
    notes: int
    members: int


def count_workspace(db: Session, workspace_id: str) -> WorkspaceCounts:
    notes = (
        db.query(func.count(Note.id))
        .filter(Note.workspace_id == workspace_id, Note.is_deleted == False)  # noqa: E712
        .scalar()
    )
    members = (
        db.query(func.count(WorkspaceMember.id))
        .filter(WorkspaceMember.workspace_id == workspace_id)
        .scalar()
    )
    return WorkspaceCounts(notes=notes or 0, members=members or 0)


def list_workspaces(
    db: Session, user_id: str, include_deleted: bool = False
) -> list[Workspace]:
    """Workspaces the user owns or belongs to, most recently updated first."""
    member_of = db.query(WorkspaceMember.workspace_id).filter(
        WorkspaceMember.user_id == user_id
    )
    query = db.query(Workspace).filter(
        or_(Workspace.owner_id == user_id, Workspace.id.in_(member_of))
    )
    if not include_deleted:
        query = query.filter(Workspace.is_deleted == False)  # noqa: E712
    return query.order_by(Workspace.updated_at.desc()).all()


def create_workspace(
    db: Session,
    owner: User,
    name: str,
    description: str | None = None,
    color: str | None = None,
    is_public: bool = False,
) -> Workspace:
    """Create a workspace with the caller as OWNER member.

    Raises WorkspaceQuotaError when the owner is at max_workspaces_per_user.
    """
    limit = get_system_settings(db).max_workspaces_per_user
    owned = (
        db.query(func.count(Workspace.id))
        .filter(Workspace.owner_id == owner.id, Workspace.is_deleted == False)  # noqa: E712
        .scalar()
    )
    if (owned or 0) >= limit:
        raise WorkspaceQuotaError(f"Workspace limit reached ({limit})")

    workspace = Workspace(
        name=name,
        description=description,
        color=color or DEFAULT_WORKSPACE_COLOR,
        is_public=is_public,
        owner_id=owner.id,
    )
    db.add(workspace)
    db.flush()
    db.add(WorkspaceMember(workspace_id=workspace.id, user_id=owner.id, role=MemberRole.OWNER))
    activity_log.add_activity(
        db,
        type=activity_log.WORKSPACE_CREATED,
        title="Workspace Created",
        description=f'Created workspace "{workspace.name}"',
        user_id=owner.id,
        workspace_id=workspace.id,
    )
    db.commit()
    db.refresh(workspace)
    logger.info("Workspace %s created by %s", workspace.id, owner.id)
    return workspace


def get_workspace(db: Session, principal: Principal, workspace_id: str) -> Workspace:
    return authorize_workspace(db, principal, workspace_id, WorkspaceAction.READ)


def update_workspace(
    db: Session, principal: Principal, workspace_id: str, changes: dict[str, Any]
) -> Workspace:
    """Apply a partial update. Requires MANAGE."""
    workspace = authorize_workspace(db, principal, workspace_id, WorkspaceAction.MANAGE)
    for field, value in changes.items():
        setattr(workspace, field, value)
    workspace.updated_at = datetime.now(UTC)
    activity_log.add_activity(
        db,
        type=activity_log.WORKSPACE_UPDATED,
        title="Workspace Updated",
        description=f'Updated workspace "{workspace.name}"',
        user_id=principal.user_id,
        workspace_id=workspace.id,
    )
    db.commit()
    db.refresh(workspace)
    return workspace


def delete_workspace(db: Session, principal: Principal, workspace_id: str) -> Workspace:
    """Soft-delete a workspace. Owner only."""
    workspace = authorize_workspace(db, principal, workspace_id, WorkspaceAction.DELETE)
    now = datetime.now(UTC)
    workspace.is_deleted = True
    workspace.deleted_at = now
    workspace.updated_at = now
    activity_log.add_activity(
        db,
        type=activity_log.WORKSPACE_DELETED,
        title="Workspace Deleted",
        description=f'Deleted workspace "{workspace.name}"',
        user_id=principal.user_id,
        workspace_id=workspace.id,
    )
    db.commit()
    logger.info("Workspace %s soft-deleted by %s", workspace.id, principal.user_id)
    return workspace


def invite_member(
    db: Session,
    principal: Principal,
    workspace_id: str,
    email: str,
    role: MemberRole,
    inviter_name: str | None = None,
) -> WorkspaceMember:
    """Add an existing user to the workspace. Requires INVITE.

    Raises InviteeNotFoundError or AlreadyMemberError; the notification is
    sent only after the membership commits.
    """
    workspace = authorize_workspace(db, principal, workspace_id, WorkspaceAction.INVITE)
    target = db.query(User).filter(User.email == email.strip().lower()).first()
    if target is None:
        raise InviteeNotFoundError("User not found with this email")

    existing = (
        db.query(WorkspaceMember)
        .filter(
            WorkspaceMember.workspace_id == workspace.id,
            WorkspaceMember.user_id == target.id,
        )
        .first()
    )
    if existing is not None or target.id == workspace.owner_id:
        raise AlreadyMemberError("User is already a member of this workspace")

    member = WorkspaceMember(workspace_id=workspace.id, user_id=target.id, role=role)
    db.add(member)
    activity_log.add_activity(
        db,
        type=activity_log.USER_INVITED,
        title="User Invited",
        description=f"{target.username or target.email} was invited to {workspace.name}",
        user_id=principal.user_id,
        workspace_id=workspace.id,
        metadata=MemberActivity(member_user_id=target.id, role=role.value),
    )
    db.commit()
    db.refresh(member)

    send_invite_notification(target.email, workspace.name, inviter_name, role.value)
    return member


def remove_member(
    db: Session, principal: Principal, workspace_id: str, user_id: str
) -> None:
    """Remove a member, or let a member leave.

    Removing someone else requires MANAGE. The owner cannot be removed.
    """
    if user_id == principal.user_id:
        workspace = authorize_workspace(db, principal, workspace_id, WorkspaceAction.READ)
    else:
        workspace = authorize_workspace(db, principal, workspace_id, WorkspaceAction.MANAGE)
    if user_id == workspace.owner_id:
        raise ForbiddenError("The workspace owner cannot be removed")

    member = (
        db.query(WorkspaceMember)
        .filter(
            WorkspaceMember.workspace_id == workspace.id,
            WorkspaceMember.user_id == user_id,
        )
        .first()
    )
    if member is None:
        raise MemberNotFoundError("Member not found")

    db.delete(member)
    activity_log.add_activity(
        db,
        type=activity_log.MEMBER_REMOVED,
        title="Member Removed" if user_id != principal.user_id else "Member Left",
        user_id=principal.user_id,
        workspace_id=workspace.id,
        metadata=MemberActivity(member_user_id=user_id, role=MemberRole(member.role).value),
    )
    db.commit()
