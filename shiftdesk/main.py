"""
ShiftDesk Backend - Main Application Entry Point
"""
import logging
from urllib.parse import urlparse, urlunparse

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError

from shiftdesk.api.router import api_router
from shiftdesk.core.config import settings
from shiftdesk.core.errors import (
    generic_exception_handler,
    http_exception_handler,
    shiftdesk_exception_handler,
    validation_exception_handler,
)
from shiftdesk.core.exceptions import ShiftDeskError
from shiftdesk.core.logging import setup_logging
from shiftdesk.db.session import SessionLocal, create_sqlite_tables
from shiftdesk.services.employee_service import ensure_initial_admin

# Setup logging first
setup_logging()
logger = logging.getLogger(__name__)


def _mask_database_url(url: str) -> str:
    """Mask password in DATABASE_URL for safe logging; show full path for sqlite."""
    parsed = urlparse(url)
    if parsed.scheme.startswith("sqlite") or not parsed.password:
        return url
    netloc = f"{parsed.username}:****@{parsed.hostname or ''}"
    if parsed.port:
        netloc += f":{parsed.port}"
    return urlunparse(parsed._replace(netloc=netloc))


app = FastAPI(
    title="ShiftDesk Backend",
    description="Shift scheduling, leave and attendance service",
    version=settings.VERSION or "1.0.0"
)

# Configure CORS - must be before other middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register exception handlers
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(ShiftDeskError, shiftdesk_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)

# Include all API routes under /api/v1
app.include_router(api_router, prefix="/api/v1")


@app.on_event("startup")
def startup_database() -> None:
    """Log DATABASE_URL and create SQLite tables; other databases use Alembic."""
    logger.info("DATABASE_URL (app): %s", _mask_database_url(settings.DATABASE_URL))
    create_sqlite_tables()


@app.on_event("startup")
def bootstrap_initial_admin() -> None:
    """Create the initial admin user if no admin exists."""
    db = SessionLocal()
    try:
        if ensure_initial_admin(db, settings.INITIAL_ADMIN_EMAIL, settings.INITIAL_ADMIN_PASSWORD) is None:
            logger.info("Admin user already exists, skipping initial bootstrap")
    except OperationalError as e:
        db.rollback()
        if "no such table" in str(e).lower():
            logger.warning("Database tables not ready yet, skipping initial bootstrap")
        else:
            logger.error("Database error during admin bootstrap: %s", e)
    finally:
        db.close()


async def _handle_operational_error(request, exc: OperationalError) -> JSONResponse:
    if "no such table" in str(exc).lower():
        return JSONResponse(
            status_code=500,
            content={"detail": "Run alembic upgrade head"},
        )
    return await generic_exception_handler(request, exc)


app.add_exception_handler(OperationalError, _handle_operational_error)
