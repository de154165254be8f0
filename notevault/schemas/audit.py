"""Structured payloads for audit-log and activity records.

Each audit action carries its own payload shape; the ``kind`` field is the
discriminator and matches the stored ``action`` column.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field

UNAUTHORIZED_ACCESS_ATTEMPT = "UNAUTHORIZED_ACCESS_ATTEMPT"
SYSTEM_SETTINGS_UPDATED = "SYSTEM_SETTINGS_UPDATED"
USER_ROLE_CHANGED = "USER_ROLE_CHANGED"
USER_STATUS_CHANGED = "USER_STATUS_CHANGED"
INITIAL_ADMIN_CREATED = "INITIAL_ADMIN_CREATED"


class TargetUser(BaseModel):
    username: str | None = None
    email: str


class UnauthorizedAccessDetails(BaseModel):
    kind: Literal["UNAUTHORIZED_ACCESS_ATTEMPT"] = UNAUTHORIZED_ACCESS_ATTEMPT
    endpoint: str
    method: str


class SettingsUpdatedDetails(BaseModel):
    kind: Literal["SYSTEM_SETTINGS_UPDATED"] = SYSTEM_SETTINGS_UPDATED
    changes: dict[str, Any]


class RoleChangedDetails(BaseModel):
    kind: Literal["USER_ROLE_CHANGED"] = USER_ROLE_CHANGED
    previous_role: str
    new_role: str
    target_user: TargetUser


class StatusChangedDetails(BaseModel):
    kind: Literal["USER_STATUS_CHANGED"] = USER_STATUS_CHANGED
    previous_active: bool
    new_active: bool
    target_user: TargetUser


class InitialAdminDetails(BaseModel):
    kind: Literal["INITIAL_ADMIN_CREATED"] = INITIAL_ADMIN_CREATED
    email: str


AuditDetails = Annotated[
    Union[
        UnauthorizedAccessDetails,
        SettingsUpdatedDetails,
        RoleChangedDetails,
        StatusChangedDetails,
        InitialAdminDetails,
    ],
    Field(discriminator="kind"),
]


# ── Activity metadata ────────────────────────────────────────────────


class ConnectionActivity(BaseModel):
    kind: Literal["connection"] = "connection"
    connection_id: str
    from_note_id: str | None = None
    to_note_id: str | None = None
    updates: dict[str, Any] | None = None


class InsightsGeneratedActivity(BaseModel):
    kind: Literal["insights_generated"] = "insights_generated"
    insights_count: int
    suggestions_count: int


class NoteActivity(BaseModel):
    kind: Literal["note"] = "note"
    note_id: str


class MemberActivity(BaseModel):
    kind: Literal["member"] = "member"
    member_user_id: str
    role: str


ActivityMetadata = Annotated[
    Union[ConnectionActivity, InsightsGeneratedActivity, NoteActivity, MemberActivity],
    Field(discriminator="kind"),
]
