"""Create a NoteVault user.

Usage:
    python -m notevault.scripts.create_user --email admin@example.com --password <password>
    python -m notevault.scripts.create_user --email mod@example.com --password <pw> --role MODERATOR
"""

from __future__ import annotations

import argparse
import sys

from notevault.db.session import SessionLocal
from notevault.models.user import UserRole
from notevault.services.auth import EmailAlreadyRegisteredError, create_user


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a NoteVault user")
    parser.add_argument("--email", required=True, help="Login email for the new user")
    parser.add_argument("--password", required=True, help="Password for the new user")
    parser.add_argument("--name", default=None, help="Display name")
    parser.add_argument("--username", default=None, help="Optional unique username")
    parser.add_argument(
        "--role",
        default=UserRole.USER.value,
        choices=[r.value for r in UserRole],
        help="Global role (default: USER)",
    )
    args = parser.parse_args(argv)

    if len(args.password) < 8:
        print("Password must be at least 8 characters.", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        try:
            user = create_user(
                db,
                email=args.email,
                password=args.password,
                name=args.name,
                username=args.username,
                role=UserRole(args.role),
            )
        except EmailAlreadyRegisteredError as e:
            db.rollback()
            print(str(e), file=sys.stderr)
            return 1
        db.commit()
        print(f"User '{user.email}' created with role {user.role.value} (id={user.id}).")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
