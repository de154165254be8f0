"""Seed a development database with an admin, a workspace and sample notes.

Usage:
    python -m notevault.scripts.seed --email admin@example.com --password <password>

Idempotent: exits without changes when an administrator already exists.
"""

from __future__ import annotations

import argparse
import logging
import sys

from notevault.db.session import SessionLocal
from notevault.models.note import NoteType
from notevault.services.access_control import Principal
from notevault.services.note_service import create_note
from notevault.services.setup import count_admins, create_initial_admin
from notevault.services.workspace_service import create_workspace

logger = logging.getLogger(__name__)

SAMPLE_NOTES = [
    {
        "title": "Welcome to NoteVault",
        "content": "Notes live on a canvas. Drag them around and connect related ideas.",
        "type": NoteType.MARKDOWN,
        "tags": ["welcome"],
        "x": 40.0,
        "y": 40.0,
    },
    {
        "title": "Project plan",
        "content": "Step 1: collect requirements. Step 2: design. Step 3: build.",
        "type": NoteType.TEXT,
        "tags": ["planning"],
        "x": 340.0,
        "y": 40.0,
    },
    {
        "title": "Snippet",
        "content": "def hello():\n    return 'world'",
        "type": NoteType.CODE,
        "tags": ["code"],
        "x": 40.0,
        "y": 300.0,
    },
]


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Seed NoteVault with sample data")
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", required=True)
    parser.add_argument("--name", default="Administrator")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")

    db = SessionLocal()
    try:
        if count_admins(db) > 0:
            logger.info("Administrator already exists; nothing to seed")
            return 0
        admin = create_initial_admin(db, args.name, args.email, args.password)
        workspace = create_workspace(
            db,
            admin,
            name="Getting started",
            description="Sample workspace created by the seed script",
        )
        principal = Principal.from_user(admin)
        for sample in SAMPLE_NOTES:
            create_note(db, principal, {**sample, "workspace_id": workspace.id})
        logger.info("Seeded admin %s with workspace %s", admin.email, workspace.id)
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
