"""Request gates that run before routing.

SetupGateMiddleware sends page requests to /setup until an administrator
exists. MaintenanceGateMiddleware sends page requests from non-admins to
/maintenance while maintenance mode is on. Both read the database on every
request and only gate pages; /api routes pass through untouched.
"""

from __future__ import annotations

import logging

from fastapi.concurrency import run_in_threadpool
from fastapi.responses import RedirectResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from notevault.api.deps import AUTH_COOKIE, extract_token
from notevault.db.session import SessionLocal
from notevault.models.user import UserRole
from notevault.services import settings_service
from notevault.services import setup as setup_service
from notevault.services.auth import get_user_from_token

logger = logging.getLogger(__name__)

SETUP_PATH = "/setup"
MAINTENANCE_PATH = "/maintenance"

MAINTENANCE_ALLOWED = ("/login", "/logout", MAINTENANCE_PATH, SETUP_PATH, "/health")


def is_page_request(path: str) -> bool:
    """API routes, static assets and the health probe are never gated."""
    if path.startswith("/api/") or path == "/api":
        return False
    if path.startswith("/static/") or path == "/health":
        return False
    return "." not in path.rsplit("/", 1)[-1]


def _setup_required() -> bool:
    db = SessionLocal()
    try:
        return setup_service.is_setup_required(db)
    finally:
        db.close()


def _maintenance_blocks(authorization: str | None, cookie_token: str | None) -> bool:
    """True when maintenance mode is on and the caller is not an admin."""
    db = SessionLocal()
    try:
        enabled, _ = settings_service.is_maintenance_mode(db)
        if not enabled:
            return False
        token = extract_token(authorization, cookie_token)
        user = get_user_from_token(db, token) if token else None
        return user is None or user.role != UserRole.ADMIN
    finally:
        db.close()


class SetupGateMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        if not is_page_request(path):
            return await call_next(request)

        required = await run_in_threadpool(_setup_required)
        if required and path != SETUP_PATH:
            return RedirectResponse(url=SETUP_PATH, status_code=303)
        if not required and path == SETUP_PATH:
            return RedirectResponse(url="/", status_code=303)
        return await call_next(request)


class MaintenanceGateMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        if not is_page_request(path) or path in MAINTENANCE_ALLOWED:
            return await call_next(request)

        try:
            blocked = await run_in_threadpool(
                _maintenance_blocks,
                request.headers.get("authorization"),
                request.cookies.get(AUTH_COOKIE),
            )
        except SQLAlchemyError:
            logger.exception("Maintenance check failed; letting request through")
            blocked = False
        if blocked:
            return RedirectResponse(url=MAINTENANCE_PATH, status_code=303)
        return await call_next(request)
