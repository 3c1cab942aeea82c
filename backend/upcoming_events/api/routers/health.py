"""api/routers/health.py — Health check endpoints.

Routes (mounted at root):
    GET /health        Liveness check — returns env, version, timestamp
    GET /health/db     Readiness check — verifies the host DB is reachable
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from upcoming_events import __version__
from upcoming_events.api.dependencies import check_db_connectivity
from upcoming_events.core.config import settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health", summary="Liveness check")
def health():
    """Returns environment, version, and current UTC timestamp."""
    return {
        "status": "ok",
        "environment": settings.environment,
        "version": __version__,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/health/db", summary="Readiness check")
def health_db():
    """HTTP 200 when the host database answers SELECT 1, HTTP 503 when not."""
    try:
        check_db_connectivity()
        logger.debug("health/db: database reachable")
        return {"status": "ok", "db": "connected"}
    except RuntimeError as exc:
        logger.warning("health/db: database unreachable — %s", exc)
        return JSONResponse(
            status_code=503,
            content={"status": "error", "db": str(exc)},
        )
