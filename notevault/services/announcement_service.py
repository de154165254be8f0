"""Announcements: admin broadcasts, pinned first, expiring after a day by default."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from sqlalchemy.orm import Session

from notevault.models.announcement import Announcement
from notevault.services import activity as activity_log

DEFAULT_LIFETIME = timedelta(hours=24)


def list_announcements(db: Session, only_active: bool = False) -> list[Announcement]:
    query = db.query(Announcement)
    if only_active:
        query = query.filter(Announcement.expires_at > datetime.now(UTC))
    return query.order_by(Announcement.is_pinned.desc(), Announcement.created_at.desc()).all()


def create_announcement(
    db: Session,
    author_id: str,
    title: str,
    content: str,
    is_pinned: bool | None = None,
    expires_at: datetime | None = None,
) -> Announcement:
    """Create an announcement; pinned unless told otherwise, expiring in 24h by default."""
    if expires_at is None:
        expires_at = datetime.now(UTC) + DEFAULT_LIFETIME
    elif expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=UTC)

    announcement = Announcement(
        title=title,
        content=content,
        is_pinned=True if is_pinned is None else is_pinned,
        expires_at=expires_at,
        author_id=author_id,
    )
    db.add(announcement)
    activity_log.add_activity(
        db,
        type=activity_log.ANNOUNCEMENT_CREATED,
        title="Announcement Created",
        description=f'Posted announcement "{title}"',
        user_id=author_id,
    )
    db.commit()
    db.refresh(announcement)
    return announcement
