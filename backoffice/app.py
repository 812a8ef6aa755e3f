"""FastAPI application for the hosting back office sync surface."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from panelkit.api.errors import ControlPanelError, RemoteConflict, RemoteTransientError

from .config import settings
from .sync.errors import SyncError

log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    # Auto-create tables for SQLite (local dev); PostgreSQL uses Alembic migrations
    if "sqlite" in settings.database_url:
        from .database import engine
        from .models import Base
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    yield


app = FastAPI(title=settings.app_title, lifespan=lifespan)


@app.exception_handler(SyncError)
async def sync_error_handler(request: Request, exc: SyncError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "upstream_status": None},
    )


@app.exception_handler(ControlPanelError)
async def control_panel_error_handler(request: Request, exc: ControlPanelError):
    if isinstance(exc, RemoteConflict):
        status_code = 409
    elif isinstance(exc, RemoteTransientError):
        status_code = 503
    else:
        status_code = 502
    log.warning("%s %s failed upstream: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "upstream_status": exc.status_code},
    )


# Import and register routers
from .routers import control_panels, health, sync  # noqa: E402

app.include_router(sync.router)
app.include_router(control_panels.router)
app.include_router(health.router)
