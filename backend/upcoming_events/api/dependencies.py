"""
dependencies.py — FastAPI dependency injection

Everything the block used to reach for as global host state (DB handle,
logged-in session, renderer, clock) is provided here and injected with
Depends(), so route handlers and tests can swap any of them.

Usage in a route handler:
    @router.get("/example")
    def example(session: UserSession = Depends(require_session),
                calendar: CalendarApi = Depends(get_calendar_api)):
        ...
"""

from __future__ import annotations

import hmac
import logging
import time
from typing import Callable, Generator, Optional

from fastapi import Depends, Request
from sqlalchemy import text
from sqlalchemy.orm import Session

from upcoming_events.core.config import settings
from upcoming_events.core.exceptions import AuthenticationError
from upcoming_events.db.database import SessionLocal
from upcoming_events.db.models import UserSession
from upcoming_events.services.calendar import CalendarApi
from upcoming_events.services.directory import HostDirectory
from upcoming_events.services.rendering import Renderer

logger = logging.getLogger(__name__)


def get_db() -> Generator[Session, None, None]:
    """Yield a database session, guaranteed to close after the request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_db_connectivity() -> bool:
    """Execute SELECT 1 to verify the database is reachable.

    Raises:
        RuntimeError: with a descriptive message if the connection fails.
    """
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception as exc:
        raise RuntimeError(f"Database connectivity check failed: {exc}") from exc
    finally:
        db.close()


def get_directory(db: Session = Depends(get_db)) -> HostDirectory:
    return HostDirectory(db)


def get_calendar_api(db: Session = Depends(get_db)) -> CalendarApi:
    return CalendarApi(db)


def get_renderer() -> Renderer:
    return Renderer()


def get_clock() -> Callable[[], int]:
    return lambda: int(time.time())


async def get_request_params(request: Request) -> dict[str, str]:
    """Request parameters: the POST form body first, then the query string."""
    params = dict(request.query_params)
    if request.method == "POST":
        form = await request.form()
        params.update({key: value for key, value in form.items() if isinstance(value, str)})
    return params


def get_current_session(
    request: Request,
    directory: HostDirectory = Depends(get_directory),
) -> Optional[UserSession]:
    sid = request.cookies.get(settings.session_cookie)
    if not sid:
        return None
    return directory.get_session(sid)


def _session_expired(session: UserSession, now: int) -> bool:
    return session.timemodified + settings.session_timeout < now


def require_login(
    request: Request,
    session: Optional[UserSession] = Depends(get_current_session),
    directory: HostDirectory = Depends(get_directory),
    clock: Callable[[], int] = Depends(get_clock),
) -> UserSession:
    """The request must belong to a live session of an existing user."""
    if (
        session is None
        or not session.userid
        or _session_expired(session, clock())
        or directory.get_user(session.userid) is None
    ):
        logger.warning(
            "login required",
            extra={"request_id": getattr(request.state, "request_id", None), "path": request.url.path},
        )
        raise AuthenticationError("You must be logged in to view upcoming events", "requireloginerror")
    return session


def require_session(
    request: Request,
    params: dict[str, str] = Depends(get_request_params),
    session: Optional[UserSession] = Depends(get_current_session),
    directory: HostDirectory = Depends(get_directory),
    clock: Callable[[], int] = Depends(get_clock),
) -> UserSession:
    """Check the session key first, then the login, before any data access."""
    sesskey = params.get("sesskey")
    if (
        session is None
        or not sesskey
        or not hmac.compare_digest(sesskey.encode("utf-8"), session.sesskey.encode("utf-8"))
    ):
        logger.warning(
            "invalid session key",
            extra={"request_id": getattr(request.state, "request_id", None), "path": request.url.path},
        )
        raise AuthenticationError("Invalid session key", "invalidsesskey")
    return require_login(request, session, directory, clock)
