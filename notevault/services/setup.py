"""First-run bootstrap: detect and create the initial administrator."""

from __future__ import annotations

import logging

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from notevault.models.user import User, UserRole
from notevault.services.auth import EmailAlreadyRegisteredError, create_user

logger = logging.getLogger(__name__)

# Dashboard starting values for the bootstrap administrator
ADMIN_BALANCE = 100_000.0
ADMIN_LEVEL = 10
ADMIN_EXPERIENCE = 10_000


class SetupAlreadyCompletedError(Exception):
    """An administrator already exists."""


def count_admins(db: Session) -> int:
    return db.query(func.count(User.id)).filter(User.role == UserRole.ADMIN).scalar() or 0


def is_setup_required(db: Session) -> bool:
    """True while no ADMIN user exists.

    A failing count query is treated as "setup required" so a broken database
    never locks operators out of the setup page.
    """
    try:
        return count_admins(db) == 0
    except SQLAlchemyError:
        logger.exception("Admin count query failed; treating setup as required")
        db.rollback()
        return True


def create_initial_admin(db: Session, name: str, email: str, password: str) -> User:
    """Create the first ADMIN user.

    Raises SetupAlreadyCompletedError if an admin exists before the insert, or
    if a concurrent request committed one first (detected by re-counting).
    Raises EmailAlreadyRegisteredError if the email belongs to a non-admin.
    """
    if count_admins(db) > 0:
        raise SetupAlreadyCompletedError("Setup has already been completed")

    user = create_user(
        db,
        email=email,
        password=password,
        name=name,
        role=UserRole.ADMIN,
        balance=ADMIN_BALANCE,
        level=ADMIN_LEVEL,
        experience=ADMIN_EXPERIENCE,
    )
    if count_admins(db) > 1:
        db.rollback()
        logger.warning("Concurrent setup detected; discarded admin %s", email)
        raise SetupAlreadyCompletedError("Setup has already been completed")

    db.commit()
    db.refresh(user)
    logger.info("Initial administrator created: %s", user.email)
    return user


__all__ = [
    "EmailAlreadyRegisteredError",
    "SetupAlreadyCompletedError",
    "count_admins",
    "create_initial_admin",
    "is_setup_required",
]
