"""schemas/event.py — Event request/response schemas.

DB source: event (read through services.calendar.CalendarApi)
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from upcoming_events.schemas.shared import PaginationState


class CourseSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    shortname: str = ""
    fullname: str = ""


class EventRecord(BaseModel):
    """An event as returned by the host calendar, before decoration."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    timestart: int
    eventtype: str
    courseid: int = 0
    categoryid: int = 0
    groupid: int = 0
    userid: int = 0
    course: Optional[CourseSummary] = None


class DecoratedEvent(EventRecord):
    """Event plus the display-only fields the block adds."""

    time_until: str
    description: str
    img: str = ""
    url: str = ""


class EventListContext(BaseModel):
    """Template context exported by EventList for the host page renderer."""

    events: list[DecoratedEvent]
    pagination: PaginationState


class PageRequest(BaseModel):
    """One request for a page of upcoming events."""

    lookahead: int = Field(ge=0, description="Days forward from now")
    courseid: int
    last_id: int = 0
    last_date: int = 0
    limit_from: int = Field(0, ge=0)
    limit_num: int = Field(ge=1)
    page: int = Field(1, ge=1)

    @classmethod
    def for_page(cls, lookahead: int, courseid: int, limit_num: int, page: int) -> "PageRequest":
        """Build a request whose offset is derived from the 1-indexed page number."""
        limit_from = (page - 1) * limit_num if page > 1 else 0
        return cls(
            lookahead=lookahead,
            courseid=courseid,
            limit_from=limit_from,
            limit_num=limit_num,
            page=page,
        )


class ReloadResponse(BaseModel):
    output: str
    end: bool


class ReloadParams(BaseModel):
    """Required reload parameters, read from the form body or query string."""

    lookahead: int = Field(ge=0)
    courseid: int
    limitnum: int = Field(ge=1)
    page: int = Field(ge=1)
