"""
NoteVault FastAPI application entry point.

Request flow: setup gate → maintenance gate → session → access control → handler.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy import text

from notevault import __version__
from notevault.api.errors import register_exception_handlers
from notevault.api.middleware import MaintenanceGateMiddleware, SetupGateMiddleware
from notevault.config import get_settings
from notevault.db.session import check_db_connection, engine

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

_STATIC_DIR = Path(__file__).resolve().parent / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown."""
    logger.info("NoteVault starting")
    try:
        try:
            check_db_connection()
            logger.info("Database connection verified")
        except Exception as e:
            logger.critical("Database unreachable: %s", e)
            raise
        if not get_settings().secret_key:
            logger.warning("SECRET_KEY is empty; session tokens are not secure")
        yield
    finally:
        logger.info("NoteVault shutting down")
        engine.dispose()
        logger.info("Database connection pool closed")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )
    register_exception_handlers(app)

    # Last added runs first: the setup gate wraps the maintenance gate
    app.add_middleware(MaintenanceGateMiddleware)
    app.add_middleware(SetupGateMiddleware)

    from notevault.api.activity import router as activity_router
    from notevault.api.admin import router as admin_router
    from notevault.api.announcements import router as announcements_router
    from notevault.api.auth import router as auth_router
    from notevault.api.chat import router as chat_router
    from notevault.api.insights import router as insights_router
    from notevault.api.notes import router as notes_router
    from notevault.api.setup import router as setup_router
    from notevault.api.views import router as views_router
    from notevault.api.workspaces import router as workspaces_router

    app.include_router(setup_router, prefix="/api/setup", tags=["setup"])
    app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
    app.include_router(admin_router, prefix="/api/admin", tags=["admin"])
    app.include_router(workspaces_router, prefix="/api/workspaces", tags=["workspaces"])
    app.include_router(notes_router, prefix="/api/notes", tags=["notes"])
    app.include_router(chat_router, prefix="/api/chat", tags=["chat"])
    app.include_router(announcements_router, prefix="/api/announcements", tags=["announcements"])
    app.include_router(insights_router, prefix="/api/ai", tags=["ai"])
    app.include_router(activity_router, prefix="/api/activity", tags=["activity"])

    # HTML pages (no prefix: /, /login, /logout, /setup, /maintenance)
    app.include_router(views_router, tags=["views"])
    app.mount("/static", StaticFiles(directory=str(_STATIC_DIR)), name="static")

    @app.get("/health")
    def health() -> dict:
        """Health check endpoint. Confirms DB connectivity."""
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return {
                "status": "ok",
                "version": __version__,
                "database": "connected",
            }
        except Exception:
            logger.exception("Health check: database unreachable")
            return JSONResponse(
                status_code=503,
                content={
                    "status": "unhealthy",
                    "version": __version__,
                    "database": "disconnected",
                },
            )

    return app


app = create_app()
