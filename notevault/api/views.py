"""HTML-serving view routes: dashboard, login, setup, maintenance."""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError
from sqlalchemy.orm import Session

from notevault.api.auth import set_session_cookie
from notevault.api.deps import AUTH_COOKIE, get_db, require_ui_auth
from notevault.models.user import User
from notevault.schemas.audit import InitialAdminDetails
from notevault.schemas.setup import SetupRequest
from notevault.services import announcement_service, workspace_service
from notevault.services.activity import list_recent_activity
from notevault.services.audit import record_audit
from notevault.services.auth import (
    EmailAlreadyRegisteredError,
    authenticate_user,
    create_token_for_user,
)
from notevault.services.settings_service import is_maintenance_mode
from notevault.services.setup import SetupAlreadyCompletedError, create_initial_admin

logger = logging.getLogger(__name__)

router = APIRouter()

_TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
templates = Jinja2Templates(directory=str(_TEMPLATES_DIR))


# ── Public routes ────────────────────────────────────────────────────


@router.get("/login", response_class=HTMLResponse)
def login_page(request: Request):
    """Render login form."""
    return templates.TemplateResponse(request, "login.html", {})


@router.post("/login", response_class=HTMLResponse)
def login_submit(
    request: Request,
    db: Session = Depends(get_db),
    email: str = Form(""),
    password: str = Form(""),
):
    """Handle login form submission."""
    user = authenticate_user(db, email, password)
    if user is None:
        return templates.TemplateResponse(
            request,
            "login.html",
            {"error": "Invalid email or password", "email": email},
            status_code=401,
        )
    resp = RedirectResponse(url="/", status_code=303)
    set_session_cookie(resp, create_token_for_user(user))
    return resp


@router.get("/logout")
def logout():
    """Clear auth cookie and redirect to login."""
    resp = RedirectResponse(url="/login", status_code=303)
    resp.delete_cookie(key=AUTH_COOKIE, path="/")
    return resp


@router.get("/setup", response_class=HTMLResponse)
def setup_page(request: Request):
    """Initial administrator form. The setup gate hides it once an admin exists."""
    return templates.TemplateResponse(request, "setup.html", {})


@router.post("/setup", response_class=HTMLResponse)
def setup_submit(
    request: Request,
    db: Session = Depends(get_db),
    name: str = Form(""),
    email: str = Form(""),
    password: str = Form(""),
):
    try:
        data = SetupRequest(name=name, email=email, password=password)
    except ValidationError as e:
        return templates.TemplateResponse(
            request,
            "setup.html",
            {"errors": [err["msg"] for err in e.errors()], "name": name, "email": email},
            status_code=400,
        )
    try:
        user = create_initial_admin(db, data.name, data.email, data.password)
    except SetupAlreadyCompletedError:
        return RedirectResponse(url="/", status_code=303)
    except EmailAlreadyRegisteredError as e:
        db.rollback()
        return templates.TemplateResponse(
            request,
            "setup.html",
            {"errors": [str(e)], "name": name, "email": email},
            status_code=400,
        )
    record_audit(
        db,
        actor_id=user.id,
        resource="users",
        resource_id=user.id,
        details=InitialAdminDetails(email=user.email),
        request=request,
    )
    resp = RedirectResponse(url="/", status_code=303)
    set_session_cookie(resp, create_token_for_user(user))
    return resp


@router.get("/maintenance", response_class=HTMLResponse)
def maintenance_page(request: Request, db: Session = Depends(get_db)):
    enabled, message = is_maintenance_mode(db)
    return templates.TemplateResponse(
        request, "maintenance.html", {"enabled": enabled, "message": message}
    )


# ── Dashboard ────────────────────────────────────────────────────────


@router.get("/", response_class=HTMLResponse)
def dashboard(
    request: Request,
    db: Session = Depends(get_db),
    user: User = Depends(require_ui_auth),
):
    """Dashboard: profile stats, announcements, workspaces, recent activity."""
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "user": user,
            "announcements": announcement_service.list_announcements(db, only_active=True),
            "workspaces": workspace_service.list_workspaces(db, user.id),
            "activities": list_recent_activity(db, user.id, limit=10),
        },
    )
