"""Invite notifications.

Delivery is not wired to a mail provider; the message that would be sent is
logged instead.
"""

from __future__ import annotations

import logging

from notevault.config import get_settings

logger = logging.getLogger(__name__)


def build_invite_message(workspace_name: str, inviter_name: str | None, role: str) -> str:
    inviter = inviter_name or "A NoteVault user"
    return (
        f"{inviter} invited you to the workspace \"{workspace_name}\" as {role.lower()}.\n"
        "Sign in to NoteVault to open it."
    )


def send_invite_notification(
    to_email: str, workspace_name: str, inviter_name: str | None, role: str
) -> bool:
    """Log the invite email. Returns False when invite notifications are disabled."""
    settings = get_settings()
    if not settings.invite_email_enabled:
        logger.debug("Invite notifications disabled; skipping %s", to_email)
        return False
    subject = f"{settings.app_name}: you were invited to {workspace_name}"
    logger.info(
        "Invite notification to=%s subject=%r body=%r",
        to_email,
        subject,
        build_invite_message(workspace_name, inviter_name, role),
    )
    return True
