"""Shared helpers for API tests."""

from __future__ import annotations


def auth_headers(user) -> dict[str, str]:
    """Bearer header carrying a fresh token for *user*."""
    from notevault.services.auth import create_token_for_user

    return {"Authorization": f"Bearer {create_token_for_user(user)}"}
