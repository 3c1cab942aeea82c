"""api/routers/block.py — Upcoming events block endpoints.

Routes (mounted under /blocks/upcoming_events):
    GET  ""           Rendered block HTML for the course page (non-JS paging via ?page=)
    GET  /context     Template context {events, pagination} for the host page renderer
    GET|POST /reload  Next/previous page as {"output": <li> fragment, "end": bool}
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse
from pydantic import ValidationError

from upcoming_events.api.dependencies import (
    get_calendar_api,
    get_clock,
    get_directory,
    get_renderer,
    get_request_params,
    require_login,
    require_session,
)
from upcoming_events.core.config import settings
from upcoming_events.core.strings import get_string
from upcoming_events.db.models import UserSession
from upcoming_events.schemas.event import EventListContext, PageRequest, ReloadParams, ReloadResponse
from upcoming_events.services.calendar import CalendarApi
from upcoming_events.services.directory import HostDirectory
from upcoming_events.services.eventlist import EventList
from upcoming_events.services.rendering import Renderer

logger = logging.getLogger(__name__)

router = APIRouter()


def _page_request(
    courseid: Optional[int] = Query(None, description="Course the block is shown on; defaults to the site"),
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    lookahead: Optional[int] = Query(None, ge=0, description="Days ahead; defaults to calendar_lookahead"),
    limitnum: Optional[int] = Query(None, ge=1, description="Events per page; defaults to calendar_maxevents"),
) -> PageRequest:
    return PageRequest.for_page(
        lookahead=settings.calendar_lookahead if lookahead is None else lookahead,
        courseid=settings.site_id if courseid is None else courseid,
        limit_num=settings.calendar_maxevents if limitnum is None else limitnum,
        page=page,
    )


def _build_context(
    page_request: PageRequest,
    session: UserSession,
    categoryid: Optional[int],
    calendar: CalendarApi,
    directory: HostDirectory,
    renderer: Renderer,
    clock: Callable[[], int],
) -> EventListContext:
    eventlist = EventList.from_request(
        page_request,
        calendar=calendar,
        directory=directory,
        renderer=renderer,
        userid=session.userid,
        categoryid=categoryid,
        now=clock(),
    )
    return eventlist.export_for_template()


@router.get("", response_class=HTMLResponse, summary="Render the block")
def block(
    session: UserSession = Depends(require_login),
    page_request: PageRequest = Depends(_page_request),
    categoryid: Optional[int] = Query(None, description="Category context, if any"),
    calendar: CalendarApi = Depends(get_calendar_api),
    directory: HostDirectory = Depends(get_directory),
    renderer: Renderer = Depends(get_renderer),
    clock: Callable[[], int] = Depends(get_clock),
):
    context = _build_context(page_request, session, categoryid, calendar, directory, renderer, clock)
    html = renderer.render_from_template("block", {
        **context.model_dump(),
        "courseid": page_request.courseid,
        "lookahead": page_request.lookahead,
        "limitnum": page_request.limit_num,
        "sesskey": session.sesskey,
    })
    return HTMLResponse(html)


@router.get("/context", response_model=EventListContext, summary="Block template context")
def block_context(
    session: UserSession = Depends(require_login),
    page_request: PageRequest = Depends(_page_request),
    categoryid: Optional[int] = Query(None, description="Category context, if any"),
    calendar: CalendarApi = Depends(get_calendar_api),
    directory: HostDirectory = Depends(get_directory),
    renderer: Renderer = Depends(get_renderer),
    clock: Callable[[], int] = Depends(get_clock),
):
    return _build_context(page_request, session, categoryid, calendar, directory, renderer, clock)


def _reload_params(
    request: Request,
    params: dict[str, str] = Depends(get_request_params),
) -> ReloadParams:
    try:
        return ReloadParams.model_validate(params)
    except ValidationError as exc:
        source = "body" if request.method == "POST" else "query"
        raise RequestValidationError(
            [{**error, "loc": (source, *error["loc"])} for error in exc.errors(include_url=False)]
        ) from exc


@router.api_route("/reload", methods=["GET", "POST"], response_model=ReloadResponse,
                  summary="Reload a page of events")
def reload_events(
    request: Request,
    session: UserSession = Depends(require_session),
    params: ReloadParams = Depends(_reload_params),
    calendar: CalendarApi = Depends(get_calendar_api),
    directory: HostDirectory = Depends(get_directory),
    renderer: Renderer = Depends(get_renderer),
    clock: Callable[[], int] = Depends(get_clock),
):
    page_request = PageRequest.for_page(params.lookahead, params.courseid, params.limitnum, params.page)
    logger.info(
        "reloading events",
        extra={
            "request_id": getattr(request.state, "request_id", None),
            "userid": session.userid,
            **page_request.model_dump(),
        },
    )

    context = _build_context(page_request, session, None, calendar, directory, renderer, clock)

    output = ""
    if context.events:
        output += renderer.render_from_template(
            "eventlist", {"events": [e.model_dump() for e in context.events]}
        )

    end = not context.pagination.has_next
    if end:
        output += f"<li>{get_string('nomoreevents')}</li>"

    return ReloadResponse(output=output, end=end)
