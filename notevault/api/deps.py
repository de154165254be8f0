"""Shared FastAPI dependencies for API routes."""

from __future__ import annotations

from collections.abc import Callable

from fastapi import Cookie, Depends, Header, HTTPException, Request, status
from sqlalchemy.orm import Session

from notevault.db.session import get_db  # re-export
from notevault.models.user import User
from notevault.services.access_control import (
    Action,
    Principal,
    ResourceKind,
    is_globally_permitted,
)
from notevault.services.audit import record_unauthorized_attempt
from notevault.services.auth import get_user_from_token

__all__ = [
    "AUTH_COOKIE",
    "get_db",
    "get_current_user",
    "get_principal",
    "require_auth",
    "require_permission",
    "require_ui_auth",
]

# Cookie name for browser sessions
AUTH_COOKIE = "access_token"


def extract_token(authorization: str | None, cookie_token: str | None) -> str | None:
    """Bearer header first, then the session cookie."""
    if authorization and authorization.startswith("Bearer "):
        return authorization[len("Bearer ") :].strip() or None
    return cookie_token or None


def get_current_user(
    db: Session = Depends(get_db),
    authorization: str | None = Header(None),
    access_token: str | None = Cookie(None),
) -> User | None:
    """Return the authenticated user or None.

    Checks (in order):
    1. Authorization: Bearer <token> header
    2. access_token cookie
    """
    token = extract_token(authorization, access_token)
    if token is None:
        return None
    return get_user_from_token(db, token)


def require_auth(user: User | None = Depends(get_current_user)) -> User:
    """Dependency that requires authentication. Returns 401 when missing."""
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )
    return user


def get_principal(user: User = Depends(require_auth)) -> Principal:
    return Principal.from_user(user)


def require_ui_auth(user: User | None = Depends(get_current_user)) -> User:
    """Dependency that requires authentication for browser/UI routes.

    Redirects to /login instead of returning a 401 JSON response.
    """
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_303_SEE_OTHER,
            detail="Not authenticated",
            headers={"Location": "/login"},
        )
    return user


def require_permission(resource: ResourceKind, action: Action) -> Callable[..., User]:
    """Build a dependency enforcing a global permission.

    A denied request is audited as an unauthorized access attempt before the
    403 is raised.
    """

    def dependency(
        request: Request,
        db: Session = Depends(get_db),
        user: User = Depends(require_auth),
    ) -> User:
        if not is_globally_permitted(Principal.from_user(user), resource, action):
            record_unauthorized_attempt(db, user.id, resource.value, request)
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
        return user

    return dependency
