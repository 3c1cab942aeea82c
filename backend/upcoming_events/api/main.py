"""
main.py — Upcoming events block entry point

The FastAPI application instance lives here. All middleware, routers,
and startup/shutdown events are registered in this file.

Usage
-----
Development (auto-reloads on file save):
    uvicorn upcoming_events.api.main:app --reload --port 8000

Production (multiple worker processes):
    gunicorn upcoming_events.api.main:app -c backend/gunicorn.conf.py
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import HTTPException, RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from upcoming_events import __version__
from upcoming_events.api.routers.block import router as block_router
from upcoming_events.api.routers.health import router as health_router
from upcoming_events.core.config import settings
from upcoming_events.core.exceptions import AuthenticationError, UpcomingEventsError, UpstreamQueryError
from upcoming_events.core.logging import configure_logging
from upcoming_events.core.middleware import RequestIDMiddleware, TimingMiddleware

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Lifespan — startup and shutdown hooks
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.log_level)
    logger.info(
        "Upcoming events block starting",
        extra={
            "environment": settings.environment,
            "version": __version__,
            "log_level": settings.log_level,
            "site_id": settings.site_id,
        },
    )
    yield
    logger.info("Upcoming events block shutting down")


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Upcoming Events Block",
    description="Paginated upcoming calendar events for the course dashboard.",
    version=__version__,
    docs_url=None if settings.is_production else "/docs",
    redoc_url=None if settings.is_production else "/redoc",
    lifespan=lifespan,
)


# ---------------------------------------------------------------------------
# Middleware (last added = outermost)
#   CORS → RequestID → Timing → route handler
# ---------------------------------------------------------------------------

app.add_middleware(TimingMiddleware)
app.add_middleware(RequestIDMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Exception handlers — every error shares one JSON envelope
# ---------------------------------------------------------------------------

def _error_response(request: Request, status_code: int, error, **fields) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": error,
            "status_code": status_code,
            "request_id": getattr(request.state, "request_id", None),
            **fields,
        },
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return _error_response(request, exc.status_code, exc.detail)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Missing or malformed required parameters."""
    errors = [
        {"param": ".".join(str(p) for p in err.get("loc", ())[1:]), "message": err.get("msg")}
        for err in exc.errors()
    ]
    return _error_response(request, 422, "Invalid parameters", error_code="invalidparameter", details=errors)


@app.exception_handler(AuthenticationError)
async def authentication_exception_handler(request: Request, exc: AuthenticationError) -> JSONResponse:
    return _error_response(request, exc.status_code, exc.message, error_code=exc.error_code)


@app.exception_handler(UpstreamQueryError)
async def upstream_exception_handler(request: Request, exc: UpstreamQueryError) -> JSONResponse:
    logger.error(
        "calendar unavailable",
        extra={"request_id": getattr(request.state, "request_id", None), "path": request.url.path},
    )
    return _error_response(request, exc.status_code, "Calendar service unavailable", error_code=exc.error_code)


@app.exception_handler(UpcomingEventsError)
async def block_exception_handler(request: Request, exc: UpcomingEventsError) -> JSONResponse:
    return _error_response(request, exc.status_code, exc.message, error_code=exc.error_code)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unhandled exceptions: log the traceback, return clean JSON."""
    logger.error(
        "unhandled exception",
        extra={
            "request_id": getattr(request.state, "request_id", None),
            "method": request.method,
            "path": request.url.path,
            "error": str(exc),
        },
        exc_info=True,
    )
    return _error_response(request, 500, "Internal server error")


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------

app.include_router(health_router)
app.include_router(block_router, prefix="/blocks/upcoming_events", tags=["upcoming_events"])
