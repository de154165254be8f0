"""Workspace and membership schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field, field_validator

from notevault.models.workspace_member import MemberRole
from notevault.schemas.auth import UserSummary
from notevault.schemas.base import EMAIL_PATTERN, HEX_COLOR_PATTERN, CamelModel


class WorkspaceCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(None, max_length=2000)
    color: str | None = Field(None, pattern=HEX_COLOR_PATTERN)
    is_public: bool = False


class WorkspaceUpdate(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, max_length=2000)
    color: str | None = Field(None, pattern=HEX_COLOR_PATTERN)
    is_public: bool | None = None


class MemberRead(CamelModel):
    id: str
    workspace_id: str
    user_id: str
    role: MemberRole
    joined_at: datetime
    user: UserSummary


class WorkspaceCounts(CamelModel):
    notes: int
    members: int


class WorkspaceRead(CamelModel):
    id: str
    name: str
    description: str | None = None
    color: str
    is_public: bool
    is_deleted: bool
    owner_id: str
    owner: UserSummary
    members: list[MemberRead] = []
    counts: WorkspaceCounts | None = None
    created_at: datetime
    updated_at: datetime


class WorkspaceEnvelope(CamelModel):
    workspace: WorkspaceRead


class WorkspaceList(CamelModel):
    workspaces: list[WorkspaceRead]


class InviteRequest(CamelModel):
    email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN)
    role: MemberRole = MemberRole.MEMBER

    @field_validator("role")
    @classmethod
    def _not_owner(cls, value: MemberRole) -> MemberRole:
        if value == MemberRole.OWNER:
            raise ValueError("role must be MEMBER or ADMIN")
        return value


class MemberEnvelope(CamelModel):
    member: MemberRead
