"""Admin schemas: system settings, user management, stats and audit log."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field, model_validator

from notevault.models.user import UserRole
from notevault.schemas.base import CamelModel, Pagination

# Cron expression characters only
BACKUP_SCHEDULE_PATTERN = r"^[0-9\s\*/\-,]+$"


class SystemSettingsRead(CamelModel):
    id: int
    maintenance_mode: bool
    maintenance_message: str | None = None
    backup_schedule: str
    max_file_size: int
    allowed_file_types: list[str]
    max_workspaces_per_user: int
    max_notes_per_workspace: int
    chat_retention_days: int
    trash_retention_hours: int
    updated_at: datetime


class SystemSettingsUpdate(CamelModel):
    """Partial update; omitted fields are left unchanged."""

    maintenance_mode: bool | None = None
    maintenance_message: str | None = Field(None, max_length=1000)
    backup_schedule: str | None = Field(None, pattern=BACKUP_SCHEDULE_PATTERN)
    max_file_size: int | None = Field(None, ge=1024, le=104_857_600)  # 1KB to 100MB
    allowed_file_types: list[str] | None = None
    max_workspaces_per_user: int | None = Field(None, ge=1, le=100)
    max_notes_per_workspace: int | None = Field(None, ge=10, le=10_000)
    chat_retention_days: int | None = Field(None, ge=1, le=365)
    trash_retention_hours: int | None = Field(None, ge=1, le=168)  # max one week


class SettingsEnvelope(CamelModel):
    settings: SystemSettingsRead


class UserCounts(CamelModel):
    owned_workspaces: int
    workspace_members: int
    notes: int
    files: int


class AdminUserRead(CamelModel):
    id: str
    username: str | None = None
    email: str
    name: str | None = None
    image: str | None = None
    role: UserRole
    is_active: bool
    is_online: bool
    last_seen: datetime | None = None
    created_at: datetime
    last_login_at: datetime | None = None
    counts: UserCounts | None = None


class AdminUserList(CamelModel):
    users: list[AdminUserRead]
    pagination: Pagination


class AdminUserUpdate(CamelModel):
    """Role and/or active-flag change for another user's account."""

    user_id: str = Field(..., min_length=1, max_length=36)
    role: UserRole | None = None
    is_active: bool | None = None

    @model_validator(mode="after")
    def _require_change(self) -> "AdminUserUpdate":
        if self.role is None and self.is_active is None:
            raise ValueError("role or isActive is required")
        return self


class AdminUserEnvelope(CamelModel):
    user: AdminUserRead


class UserStats(CamelModel):
    total: int
    active: int
    online: int
    new_today: int


class WorkspaceStats(CamelModel):
    total: int
    active: int


class NoteStats(CamelModel):
    total: int
    created_today: int


class FileStats(CamelModel):
    total: int
    total_size: int


class ChatStats(CamelModel):
    messages_total: int
    messages_today: int


class AdminStats(CamelModel):
    users: UserStats
    workspaces: WorkspaceStats
    notes: NoteStats
    files: FileStats
    chat: ChatStats


class AuditLogRead(CamelModel):
    id: str
    user_id: str | None = None
    action: str
    resource: str
    resource_id: str | None = None
    details: dict[str, Any] | None = None
    ip_address: str
    user_agent: str
    created_at: datetime


class AuditLogList(CamelModel):
    logs: list[AuditLogRead]
    pagination: Pagination
