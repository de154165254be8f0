"""System settings singleton: read fresh per request, created lazily."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from notevault.models.system_settings import SystemSettings
from notevault.services import activity as activity_log

logger = logging.getLogger(__name__)

SETTINGS_ROW_ID = 1


def get_system_settings(db: Session) -> SystemSettings:
    """Return the settings row, inserting one with defaults if none exists.

    Two first readers may race on the insert; the loser re-reads the row the
    winner committed.
    """
    row = db.query(SystemSettings).order_by(SystemSettings.id).first()
    if row is not None:
        return row

    row = SystemSettings(id=SETTINGS_ROW_ID)
    db.add(row)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        row = db.query(SystemSettings).order_by(SystemSettings.id).first()
        if row is None:
            raise
        return row
    db.refresh(row)
    logger.info("Created default system settings")
    return row


def is_maintenance_mode(db: Session) -> tuple[bool, str | None]:
    """Return (maintenance_mode, maintenance_message) without creating a row."""
    row = db.query(SystemSettings).order_by(SystemSettings.id).first()
    if row is None:
        return False, None
    return row.maintenance_mode, row.maintenance_message


def update_system_settings(
    db: Session, actor_id: str, changes: dict[str, Any]
) -> SystemSettings:
    """Apply a partial update and record the matching activity rows.

    *changes* holds only the fields the caller supplied. Toggling maintenance
    mode records its own activity in addition to the general update.
    """
    row = get_system_settings(db)
    was_maintenance = row.maintenance_mode

    for field, value in changes.items():
        setattr(row, field, value)

    activity_log.add_activity(
        db,
        type=activity_log.SYSTEM_SETTINGS_UPDATED,
        title="System settings updated",
        description=f"Updated: {', '.join(sorted(changes)) or 'nothing'}",
        user_id=actor_id,
    )
    if "maintenance_mode" in changes and changes["maintenance_mode"] != was_maintenance:
        state = "enabled" if changes["maintenance_mode"] else "disabled"
        activity_log.add_activity(
            db,
            type=activity_log.MAINTENANCE_MODE_TOGGLED,
            title=f"Maintenance mode {state}",
            description=row.maintenance_message,
            user_id=actor_id,
        )
        logger.warning("Maintenance mode %s by user %s", state, actor_id)

    db.commit()
    db.refresh(row)
    return row
