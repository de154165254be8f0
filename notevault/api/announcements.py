"""Announcement API routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from notevault.api.deps import get_db, require_auth, require_permission
from notevault.models.user import User
from notevault.schemas.announcement import (
    AnnouncementCreate,
    AnnouncementEnvelope,
    AnnouncementList,
    AnnouncementRead,
)
from notevault.services import announcement_service
from notevault.services.access_control import Action, ResourceKind

router = APIRouter()


@router.get("", response_model=AnnouncementList)
def list_announcements(
    only_active: bool = Query(False, alias="onlyActive"),
    db: Session = Depends(get_db),
    _user: User = Depends(require_auth),
) -> AnnouncementList:
    announcements = announcement_service.list_announcements(db, only_active=only_active)
    return AnnouncementList(
        announcements=[AnnouncementRead.model_validate(a) for a in announcements]
    )


@router.post("", status_code=201, response_model=AnnouncementEnvelope)
def create_announcement(
    body: AnnouncementCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_permission(ResourceKind.ANNOUNCEMENTS, Action.CREATE)),
) -> AnnouncementEnvelope:
    """Post an announcement. Pinned and expiring in 24h unless specified."""
    announcement = announcement_service.create_announcement(
        db,
        admin.id,
        title=body.title,
        content=body.content,
        is_pinned=body.is_pinned,
        expires_at=body.expires_at,
    )
    return AnnouncementEnvelope(announcement=AnnouncementRead.model_validate(announcement))
