"""Role and workspace-membership access control.

Two ordered role ladders drive every decision:

- global user roles: USER < MODERATOR < ADMIN
- workspace membership roles: MEMBER < ADMIN < OWNER

Global (system-wide) actions are looked up in ``GLOBAL_PERMISSIONS``; workspace
actions in ``WORKSPACE_PERMISSIONS``. Both tables map an action to the minimum
role that may perform it, so the whole matrix can be unit-tested without HTTP.

Workspace lookups are membership-scoped: a caller who cannot read a workspace
is told it does not exist. A caller who can read it but lacks the role for the
requested action is refused outright.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from sqlalchemy.orm import Session

from notevault.models.user import User, UserRole
from notevault.models.workspace import Workspace
from notevault.models.workspace_member import MemberRole, WorkspaceMember

_USER_ROLE_RANK: dict[UserRole, int] = {
    UserRole.USER: 0,
    UserRole.MODERATOR: 1,
    UserRole.ADMIN: 2,
}

_MEMBER_ROLE_RANK: dict[MemberRole, int] = {
    MemberRole.MEMBER: 0,
    MemberRole.ADMIN: 1,
    MemberRole.OWNER: 2,
}


class ResourceKind(str, Enum):
    """System-wide resources guarded by the global role."""

    SYSTEM_SETTINGS = "system_settings"
    SYSTEM_STATS = "system_stats"
    USERS = "users"
    ANNOUNCEMENTS = "announcements"
    AUDIT_LOGS = "audit_logs"


class Action(str, Enum):
    READ = "read"
    LIST = "list"
    CREATE = "create"
    UPDATE = "update"


class WorkspaceAction(str, Enum):
    READ = "read"  # view workspace, notes and connections
    EDIT = "edit"  # create/update/delete notes and connections
    INVITE = "invite"
    MANAGE = "manage"  # workspace settings, member removal
    DELETE = "delete"


GLOBAL_PERMISSIONS: dict[tuple[ResourceKind, Action], UserRole] = {
    (ResourceKind.SYSTEM_SETTINGS, Action.READ): UserRole.ADMIN,
    (ResourceKind.SYSTEM_SETTINGS, Action.UPDATE): UserRole.ADMIN,
    (ResourceKind.SYSTEM_STATS, Action.READ): UserRole.ADMIN,
    (ResourceKind.USERS, Action.LIST): UserRole.MODERATOR,
    (ResourceKind.USERS, Action.UPDATE): UserRole.ADMIN,
    (ResourceKind.ANNOUNCEMENTS, Action.CREATE): UserRole.ADMIN,
    (ResourceKind.AUDIT_LOGS, Action.LIST): UserRole.ADMIN,
}

# None = any membership, or a public workspace
WORKSPACE_PERMISSIONS: dict[WorkspaceAction, MemberRole | None] = {
    WorkspaceAction.READ: None,
    WorkspaceAction.EDIT: MemberRole.MEMBER,
    WorkspaceAction.INVITE: MemberRole.ADMIN,
    WorkspaceAction.MANAGE: MemberRole.ADMIN,
    WorkspaceAction.DELETE: MemberRole.OWNER,
}


class AccessDeniedError(Exception):
    """Base for authorization failures."""


class ForbiddenError(AccessDeniedError):
    """Authenticated, but the role or membership is insufficient."""


class WorkspaceNotFoundError(AccessDeniedError):
    """Workspace is absent, soft-deleted, or not visible to the caller."""


@dataclass(frozen=True)
class Principal:
    """Authenticated caller as seen by the access-control layer."""

    user_id: str
    role: UserRole

    @classmethod
    def from_user(cls, user: User) -> Principal:
        return cls(user_id=user.id, role=UserRole(user.role))


def user_role_at_least(role: UserRole, minimum: UserRole) -> bool:
    return _USER_ROLE_RANK[role] >= _USER_ROLE_RANK[minimum]


def member_role_at_least(role: MemberRole, minimum: MemberRole) -> bool:
    return _MEMBER_ROLE_RANK[role] >= _MEMBER_ROLE_RANK[minimum]


def is_globally_permitted(principal: Principal, resource: ResourceKind, action: Action) -> bool:
    """Return True if the principal's global role meets the table minimum.

    Unlisted (resource, action) pairs are denied.
    """
    minimum = GLOBAL_PERMISSIONS.get((resource, action))
    if minimum is None:
        return False
    return user_role_at_least(principal.role, minimum)


def authorize_global(principal: Principal, resource: ResourceKind, action: Action) -> None:
    """Raise ForbiddenError unless the principal may perform the global action."""
    if not is_globally_permitted(principal, resource, action):
        raise ForbiddenError(f"{action.value} on {resource.value} requires a higher role")


def can_change_account(principal: Principal, target_user_id: str) -> bool:
    """Role and status changes never apply to the requester's own account."""
    return principal.user_id != target_user_id


def effective_member_role(
    db: Session, principal: Principal, workspace: Workspace
) -> MemberRole | None:
    """Return the caller's role in the workspace, or None if not a member.

    The owner counts as OWNER whether or not a membership row exists.
    """
    if workspace.owner_id == principal.user_id:
        return MemberRole.OWNER
    membership = (
        db.query(WorkspaceMember)
        .filter(
            WorkspaceMember.workspace_id == workspace.id,
            WorkspaceMember.user_id == principal.user_id,
        )
        .first()
    )
    return MemberRole(membership.role) if membership is not None else None


def workspace_action_allowed(
    workspace: Workspace, member_role: MemberRole | None, action: WorkspaceAction
) -> bool:
    minimum = WORKSPACE_PERMISSIONS[action]
    if minimum is None:
        return member_role is not None or workspace.is_public
    return member_role is not None and member_role_at_least(member_role, minimum)


def authorize_workspace(
    db: Session,
    principal: Principal,
    workspace_id: str,
    action: WorkspaceAction,
) -> Workspace:
    """Load a workspace and check the caller may perform *action* on it.

    Raises WorkspaceNotFoundError when the workspace is missing, soft-deleted
    or unreadable by the caller; ForbiddenError when readable but the
    membership role is below the action's minimum.
    """
    workspace = db.get(Workspace, workspace_id)
    if workspace is None or workspace.is_deleted:
        raise WorkspaceNotFoundError("Workspace not found")

    member_role = effective_member_role(db, principal, workspace)
    if not workspace_action_allowed(workspace, member_role, WorkspaceAction.READ):
        raise WorkspaceNotFoundError("Workspace not found")
    if not workspace_action_allowed(workspace, member_role, action):
        raise ForbiddenError(f"Your workspace role does not allow {action.value}")
    return workspace


def user_has_access_to_workspace(
    db: Session,
    user: User,
    workspace_id: str | None,
    action: WorkspaceAction = WorkspaceAction.READ,
) -> bool:
    """Boolean form of authorize_workspace. None workspace_id returns False."""
    if workspace_id is None:
        return False
    try:
        authorize_workspace(db, Principal.from_user(user), workspace_id, action)
    except AccessDeniedError:
        return False
    return True
