"""Admin dashboards: aggregate stats and user management."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime

from pydantic import BaseModel
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from notevault.models.chat_message import ChatMessage
from notevault.models.file import File
from notevault.models.note import Note
from notevault.models.user import User, UserRole
from notevault.models.workspace import Workspace
from notevault.models.workspace_member import WorkspaceMember
from notevault.schemas.admin import (
    AdminStats,
    ChatStats,
    FileStats,
    NoteStats,
    UserCounts,
    UserStats,
    WorkspaceStats,
)
from notevault.schemas.audit import RoleChangedDetails, StatusChangedDetails, TargetUser
from notevault.services import activity as activity_log
from notevault.services.access_control import Principal, can_change_account

logger = logging.getLogger(__name__)


class SelfModificationError(ValueError):
    """Admins cannot change the role or status of their own account."""


class UserNotFoundError(LookupError):
    pass


@dataclass
class UserUpdateResult:
    user: User
    audit_details: list[BaseModel] = field(default_factory=list)


def start_of_today() -> datetime:
    """Midnight UTC of the current day."""
    now = datetime.now(UTC)
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def _count(db: Session, column, *criteria) -> int:
    return db.query(func.count(column)).filter(*criteria).scalar() or 0


def get_stats(db: Session) -> AdminStats:
    today = start_of_today()
    total_size = db.query(func.coalesce(func.sum(File.size), 0)).scalar() or 0
    return AdminStats(
        users=UserStats(
            total=_count(db, User.id),
            active=_count(db, User.id, User.is_active == True),  # noqa: E712
            online=_count(db, User.id, User.is_online == True),  # noqa: E712
            new_today=_count(db, User.id, User.created_at >= today),
        ),
        workspaces=WorkspaceStats(
            total=_count(db, Workspace.id),
            active=_count(db, Workspace.id, Workspace.is_active == True),  # noqa: E712
        ),
        notes=NoteStats(
            total=_count(db, Note.id, Note.deleted_at.is_(None)),
            created_today=_count(db, Note.id, Note.deleted_at.is_(None), Note.created_at >= today),
        ),
        files=FileStats(total=_count(db, File.id), total_size=int(total_size)),
        chat=ChatStats(
            messages_total=_count(db, ChatMessage.id),
            messages_today=_count(db, ChatMessage.id, ChatMessage.created_at >= today),
        ),
    )


def user_counts(db: Session, user_id: str) -> UserCounts:
    return UserCounts(
        owned_workspaces=_count(db, Workspace.id, Workspace.owner_id == user_id),
        workspace_members=_count(db, WorkspaceMember.id, WorkspaceMember.user_id == user_id),
        notes=_count(db, Note.id, Note.author_id == user_id),
        files=_count(db, File.id, File.uploader_id == user_id),
    )


def list_users(
    db: Session,
    page: int = 1,
    limit: int = 20,
    search: str | None = None,
    role: UserRole | None = None,
) -> tuple[list[User], int]:
    """Newest users first, optionally filtered by a substring and a role."""
    query = db.query(User)
    if search:
        pattern = f"%{search}%"
        query = query.filter(
            or_(User.username.ilike(pattern), User.email.ilike(pattern), User.name.ilike(pattern))
        )
    if role is not None:
        query = query.filter(User.role == role)
    total = query.count()
    users = (
        query.order_by(User.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return users, total


def update_user(
    db: Session,
    principal: Principal,
    user_id: str,
    role: UserRole | None = None,
    is_active: bool | None = None,
) -> UserUpdateResult:
    """Change another user's role and/or active flag.

    Returns the updated user and the audit payloads to record once the
    change has committed.
    """
    if not can_change_account(principal, user_id):
        raise SelfModificationError("Cannot modify your own account")

    target = db.get(User, user_id)
    if target is None:
        raise UserNotFoundError("User not found")

    result = UserUpdateResult(user=target)
    who = TargetUser(username=target.username, email=target.email)
    label = target.username or target.email

    if role is not None and role != target.role:
        previous = UserRole(target.role)
        target.role = role
        result.audit_details.append(
            RoleChangedDetails(previous_role=previous.value, new_role=role.value, target_user=who)
        )
        activity_log.add_activity(
            db,
            type=activity_log.USER_ROLE_CHANGED,
            title="User Role Changed",
            description=f"Changed {label}'s role from {previous.value} to {role.value}",
            user_id=principal.user_id,
        )

    if is_active is not None and is_active != target.is_active:
        previous_active = target.is_active
        target.is_active = is_active
        if not is_active:
            target.is_online = False
        result.audit_details.append(
            StatusChangedDetails(
                previous_active=previous_active, new_active=is_active, target_user=who
            )
        )
        activity_log.add_activity(
            db,
            type=activity_log.USER_STATUS_CHANGED,
            title="User Activated" if is_active else "User Deactivated",
            description=f"{'Activated' if is_active else 'Deactivated'} {label}",
            user_id=principal.user_id,
        )

    db.commit()
    db.refresh(target)
    if result.audit_details:
        logger.info(
            "User %s updated by %s: %s",
            target.id,
            principal.user_id,
            ", ".join(d.kind for d in result.audit_details),  # type: ignore[attr-defined]
        )
    return result
