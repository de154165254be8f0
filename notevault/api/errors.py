"""Exception handlers: every error body is {"error": ..., "details"?: [...]}."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from notevault.services.access_control import ForbiddenError, WorkspaceNotFoundError

logger = logging.getLogger(__name__)


def error_response(
    status_code: int,
    message: str,
    details: list[Any] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body: dict[str, Any] = {"error": message}
    if details is not None:
        body["details"] = details
    return JSONResponse(status_code=status_code, content=body, headers=headers)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    headers = getattr(exc, "headers", None)
    if exc.status_code == status.HTTP_303_SEE_OTHER and headers and "Location" in headers:
        return RedirectResponse(url=headers["Location"], status_code=exc.status_code)
    return error_response(exc.status_code, str(exc.detail), headers=headers)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # ctx can hold the raised exception object, which is not serializable
    details = [
        {key: value for key, value in err.items() if key not in ("ctx", "url")}
        for err in exc.errors()
    ]
    return error_response(
        status.HTTP_400_BAD_REQUEST, "Invalid input", details=jsonable_encoder(details)
    )


async def workspace_not_found_handler(request: Request, exc: WorkspaceNotFoundError):
    return error_response(status.HTTP_404_NOT_FOUND, "Workspace not found")


async def forbidden_handler(request: Request, exc: ForbiddenError):
    logger.info("Forbidden %s %s: %s", request.method, request.url.path, exc)
    return error_response(status.HTTP_403_FORBIDDEN, "Forbidden")


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    """Access-control errors raised by services map straight to 404/403."""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(WorkspaceNotFoundError, workspace_not_found_handler)
    app.add_exception_handler(ForbiddenError, forbidden_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
