"""Admin API: system settings, stats, user management, audit log."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from notevault.api.deps import get_db, require_permission
from notevault.models.user import User, UserRole
from notevault.schemas.admin import (
    AdminStats,
    AdminUserEnvelope,
    AdminUserList,
    AdminUserRead,
    AdminUserUpdate,
    AuditLogList,
    AuditLogRead,
    SettingsEnvelope,
    SystemSettingsRead,
    SystemSettingsUpdate,
)
from notevault.schemas.audit import SettingsUpdatedDetails
from notevault.schemas.base import Pagination
from notevault.services import admin_service
from notevault.services.access_control import Action, Principal, ResourceKind
from notevault.services.audit import list_audit_logs, record_audit
from notevault.services.settings_service import get_system_settings, update_system_settings

router = APIRouter()

# Columns that accept an explicit null
_NULLABLE_SETTINGS = {"maintenance_message"}


@router.get("/settings", response_model=SettingsEnvelope)
def read_settings(
    db: Session = Depends(get_db),
    _admin: User = Depends(require_permission(ResourceKind.SYSTEM_SETTINGS, Action.READ)),
) -> SettingsEnvelope:
    return SettingsEnvelope(settings=SystemSettingsRead.model_validate(get_system_settings(db)))


@router.put("/settings", response_model=SettingsEnvelope)
def write_settings(
    body: SystemSettingsUpdate,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_permission(ResourceKind.SYSTEM_SETTINGS, Action.UPDATE)),
) -> SettingsEnvelope:
    """Partial update of the settings singleton; audited after commit."""
    changes = {
        field: value
        for field, value in body.model_dump(exclude_unset=True).items()
        if value is not None or field in _NULLABLE_SETTINGS
    }
    row = update_system_settings(db, admin.id, changes)
    settings = SystemSettingsRead.model_validate(row)
    record_audit(
        db,
        actor_id=admin.id,
        resource=ResourceKind.SYSTEM_SETTINGS.value,
        resource_id=str(settings.id),
        details=SettingsUpdatedDetails(changes=changes),
        request=request,
    )
    return SettingsEnvelope(settings=settings)


@router.get("/stats", response_model=AdminStats)
def read_stats(
    db: Session = Depends(get_db),
    _admin: User = Depends(require_permission(ResourceKind.SYSTEM_STATS, Action.READ)),
) -> AdminStats:
    return admin_service.get_stats(db)


@router.get("/users", response_model=AdminUserList)
def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: str | None = Query(None, max_length=255),
    role: UserRole | None = None,
    db: Session = Depends(get_db),
    _moderator: User = Depends(require_permission(ResourceKind.USERS, Action.LIST)),
) -> AdminUserList:
    """Paginated user listing with per-user workspace/note/file counts."""
    users, total = admin_service.list_users(db, page=page, limit=limit, search=search, role=role)
    items = []
    for user in users:
        item = AdminUserRead.model_validate(user)
        item.counts = admin_service.user_counts(db, user.id)
        items.append(item)
    return AdminUserList(users=items, pagination=Pagination.build(page, limit, total))


@router.put("/users", response_model=AdminUserEnvelope)
def update_user(
    body: AdminUserUpdate,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_permission(ResourceKind.USERS, Action.UPDATE)),
) -> AdminUserEnvelope:
    """Change another user's role and/or active flag."""
    try:
        result = admin_service.update_user(
            db,
            Principal.from_user(admin),
            body.user_id,
            role=body.role,
            is_active=body.is_active,
        )
    except admin_service.SelfModificationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except admin_service.UserNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    user = AdminUserRead.model_validate(result.user)
    for details in result.audit_details:
        record_audit(
            db,
            actor_id=admin.id,
            resource=ResourceKind.USERS.value,
            resource_id=user.id,
            details=details,
            request=request,
        )
    return AdminUserEnvelope(user=user)


@router.get("/audit-logs", response_model=AuditLogList)
def read_audit_logs(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    action: str | None = Query(None, max_length=64),
    user_id: str | None = Query(None, alias="userId", max_length=36),
    db: Session = Depends(get_db),
    _admin: User = Depends(require_permission(ResourceKind.AUDIT_LOGS, Action.LIST)),
) -> AuditLogList:
    rows, total = list_audit_logs(db, page, limit, action=action, user_id=user_id)
    return AuditLogList(
        logs=[AuditLogRead.model_validate(r) for r in rows],
        pagination=Pagination.build(page, limit, total),
    )
