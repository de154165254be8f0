"""Apply chat and trash retention limits.

Usage:
    python -m notevault.scripts.purge_expired

Intended for cron; limits come from the system settings row.
"""

from __future__ import annotations

import logging
import sys

from sqlalchemy.exc import SQLAlchemyError

from notevault.db.session import SessionLocal
from notevault.services.retention import purge_expired

logger = logging.getLogger(__name__)


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    db = SessionLocal()
    try:
        result = purge_expired(db)
    except SQLAlchemyError:
        logger.exception("Retention cleanup failed")
        db.rollback()
        return 1
    finally:
        db.close()
    print(
        f"Deleted {result.chat_messages_deleted} chat messages, "
        f"purged {result.notes_purged} notes."
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
