"""services/eventlist.py — Builds one page of decorated upcoming events.

EventList fetches a window of upcoming events from the host calendar, slices
the requested page out of it and decorates each event with display fields
(time until, description, avatar). export_for_template() is the contract
consumed by both the block page and the reload endpoint.

Paging fetches every event up to the end of the requested page plus one, so
the block can page backwards and forwards and still know whether a later
page exists.
"""

from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Optional

from upcoming_events.core.config import settings
from upcoming_events.core.strings import get_string
from upcoming_events.schemas.event import DecoratedEvent, EventListContext, EventRecord, PageRequest
from upcoming_events.services.calendar import (
    SECONDS_PER_DAY,
    CalendarApi,
    CalendarInformation,
    event_is_visible,
)
from upcoming_events.services.directory import HostDirectory
from upcoming_events.services.pagination import Pagination
from upcoming_events.services.pictures import AnonymousPicture, CoursePicture, UserPicture
from upcoming_events.services.rendering import Renderer
from upcoming_events.services.timing import human_timing

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    USER = "user"
    COURSE = "course"
    SITE = "site"
    OTHER = "other"

    @classmethod
    def from_raw(cls, value: Optional[str]) -> "EventType":
        try:
            return cls((value or "").lower())
        except ValueError:
            return cls.OTHER


class EventList:
    def __init__(
        self,
        lookahead: int,
        courseid: int,
        lastid: int,
        lastdate: int,
        limitfrom: int,
        limitnum: int,
        page: int,
        *,
        calendar: CalendarApi,
        directory: HostDirectory,
        renderer: Renderer,
        userid: int,
        categoryid: Optional[int] = None,
        now: Optional[int] = None,
    ) -> None:
        self.lookahead = lookahead
        self.courseid = courseid
        self.lastid = lastid
        self.lastdate = lastdate
        self.limitfrom = limitfrom
        self.limitnum = limitnum
        self.page = page
        self.calendar = calendar
        self.directory = directory
        self.output = renderer
        self.userid = userid
        self.categoryid = categoryid
        self.now = int(time.time()) if now is None else now

    @classmethod
    def from_request(cls, request: PageRequest, **dependencies) -> "EventList":
        return cls(
            request.lookahead,
            request.courseid,
            request.last_id,
            request.last_date,
            request.limit_from,
            request.limit_num,
            request.page,
            **dependencies,
        )

    def export_for_template(self) -> EventListContext:
        more, events = self.get_events()
        pagination = Pagination.for_page(self.page, more)
        return EventListContext(events=events, pagination=pagination.export_for_template())

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    def get_events(self) -> tuple[bool, list[DecoratedEvent]]:
        """Return (more, page of decorated events)."""
        eventnum = self.limitfrom + self.limitnum + 1
        events = self.get_all_events(eventnum)

        more = len(events) > self.limitfrom + self.limitnum
        page = events[self.limitfrom:self.limitfrom + self.limitnum]

        logger.debug(
            "event page built",
            extra={
                "courseid": self.courseid,
                "fetched": len(events),
                "limitfrom": self.limitfrom,
                "limitnum": self.limitnum,
                "more": more,
            },
        )
        return more, [self.add_event_metadata(event) for event in page]

    def get_all_events(self, limitnum: int) -> list[EventRecord]:
        calendar = CalendarInformation.create(
            self.now, self.courseid, self.categoryid, self.userid, self.directory
        )
        return self.get_view(calendar, self.lastdate, self.lastid, limitnum)

    def get_view(self, calendar: CalendarInformation, tstart: int = 0, tstartaftereventid: int = 0,
                 eventlimit: int = 5) -> list[EventRecord]:
        tstart = tstart or calendar.time
        # Minus one second so the window does not reach into the next day
        tend = tstart + self.lookahead * SECONDS_PER_DAY - 1

        users, groups, courses, categories = calendar.filters()
        result = self.calendar.get_events(
            tstart,
            tend,
            users=users,
            groups=groups,
            courses=courses,
            categories=categories,
            after_event_id=tstartaftereventid,
            limit=eventlimit,
            visible=event_is_visible,
        )
        return result.events

    # ------------------------------------------------------------------
    # Decoration
    # ------------------------------------------------------------------

    def add_event_metadata(self, event: EventRecord) -> DecoratedEvent:
        courseid = event.course.id if event.course else 0

        if courseid and courseid != settings.site_id:
            description = get_string("courseevent", {
                "name": event.name,
                "course": self.get_course_displayname(courseid),
            })
        else:
            description = get_string("event", {"name": event.name})

        eventtype = EventType.from_raw(event.eventtype)
        if eventtype is EventType.USER:
            img = self.get_user_img(event.userid)
        elif eventtype is EventType.COURSE:
            img = self.get_course_img(event.courseid)
        elif eventtype is EventType.SITE:
            img = self.get_site_img()
        else:
            img = self.get_course_img(courseid)

        return DecoratedEvent(
            **event.model_dump(),
            time_until=self.human_timing(event.timestart),
            description=description,
            img=img,
            url=self.output.url(
                f"calendar/view.php?view=day&course={event.courseid or settings.site_id}"
                f"&time={event.timestart}#event_{event.id}"
            ),
        )

    def human_timing(self, timestamp: int) -> str:
        return human_timing(timestamp, self.now)

    def get_course_displayname(self, courseid: int) -> str:
        course = self.directory.get_course(courseid)
        if course is None:
            return ""
        return course.shortname

    def get_course_img(self, courseid: int) -> str:
        course = self.directory.get_course(courseid)
        if course is None:
            return ""
        picture = CoursePicture(course, link=True, css_class="coursepicture")
        return self.output.render_from_template("course_picture", picture.export_for_template(self.output))

    def get_user_img(self, userid: Optional[int]) -> str:
        user = self.directory.get_user(userid)
        if user is None:
            return self.output.render_user_picture(AnonymousPicture())
        return self.output.render_user_picture(
            UserPicture(user, link=True, css_class="personpicture", courseid=self.courseid)
        )

    def get_site_img(self) -> str:
        adminuserid = settings.default_admin_id
        for admin in self.directory.get_admins(settings.site_admins):
            if admin.username == "admin":
                adminuserid = admin.id
                break
        return self.get_user_img(adminuserid)
