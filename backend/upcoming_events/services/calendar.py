"""services/calendar.py — Host calendar query API.

CalendarApi.get_events() is the only way the block reads events. It applies
the time window and entity filters in SQL, then the visibility predicate in
Python, and stops once `limit` visible events have been collected.

Entity filters (users, groups, courses, categories) follow the host's
convention, see normalise_filter():
    None  -> no restriction
    []    -> match nothing
    [ids] -> match those ids
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from sqlalchemy import and_, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from upcoming_events.core.config import settings
from upcoming_events.core.exceptions import UpstreamQueryError
from upcoming_events.db.models import CalendarEvent, Course, CourseCategory, CourseModule
from upcoming_events.schemas.event import CourseSummary, EventRecord
from upcoming_events.services.directory import HostDirectory

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400

# Rows pulled per round trip while filling `limit` visible events
_BATCH_SIZE = 50


def normalise_filter(param: Any) -> Optional[list]:
    """True -> None (no filter), False -> [] (nothing), scalar -> [scalar]."""
    if param is True:
        return None
    if param is False:
        return []
    if not isinstance(param, (list, tuple, set)):
        return [param]
    return list(param)


@dataclass
class CalendarInformation:
    """Which entities' events a calendar view shows, and from when."""

    time: int
    courseid: int
    users: Any = False
    groups: Any = False
    courses: Any = False
    categories: Any = False

    @classmethod
    def create(
        cls,
        time: int,
        courseid: int,
        categoryid: Optional[int],
        userid: int,
        directory: HostDirectory,
    ) -> "CalendarInformation":
        if courseid and courseid != settings.site_id:
            courses = [settings.site_id, courseid]
        else:
            courses = [settings.site_id] + [
                c for c in directory.get_enrolled_course_ids(userid) if c != settings.site_id
            ]
        return cls(
            time=time,
            courseid=courseid,
            users=[userid] if userid else False,
            groups=False,
            courses=courses,
            categories=[categoryid] if categoryid else False,
        )

    def filters(self) -> tuple:
        return tuple(
            normalise_filter(p) for p in (self.users, self.groups, self.courses, self.categories)
        )


@dataclass
class RelatedObjectsCache:
    """Courses, course modules and categories referenced by fetched events."""

    db: Session
    courses: dict[int, Course] = field(default_factory=dict)
    modules: dict[int, CourseModule] = field(default_factory=dict)
    categories: dict[int, CourseCategory] = field(default_factory=dict)

    def load(self, events: list[CalendarEvent]) -> None:
        self._load(Course, self.courses, {e.courseid for e in events if e.courseid})
        self._load(CourseModule, self.modules, {e.course_module_id for e in events if e.course_module_id})
        self._load(CourseCategory, self.categories, {e.categoryid for e in events if e.categoryid})

    def _load(self, model, store: dict, ids: set[int]) -> None:
        missing = ids - store.keys()
        if not missing:
            return
        for row in self.db.execute(select(model).where(model.id.in_(missing))).scalars():
            store[row.id] = row

    def get_course(self, event) -> Optional[Course]:
        return self.courses.get(event.courseid)

    def get_course_module(self, event) -> Optional[CourseModule]:
        if not event.course_module_id:
            return None
        return self.modules.get(event.course_module_id)

    def get_category(self, event) -> Optional[CourseCategory]:
        if not event.categoryid:
            return None
        return self.categories.get(event.categoryid)


VisibilityPredicate = Callable[[CalendarEvent, RelatedObjectsCache], bool]


def event_is_visible(event: CalendarEvent, related: RelatedObjectsCache) -> bool:
    """Module visibility wins over category visibility; visible by default."""
    cm = related.get_course_module(event)
    if cm is not None:
        return cm.uservisible

    category = related.get_category(event)
    if category is not None:
        return category.is_uservisible()

    return True


@dataclass
class EventsResult:
    events: list[EventRecord]
    cache: RelatedObjectsCache


class CalendarApi:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get_events(
        self,
        tstart: int,
        tend: int,
        *,
        users: Optional[list] = None,
        groups: Optional[list] = None,
        courses: Optional[list] = None,
        categories: Optional[list] = None,
        after_event_id: int = 0,
        limit: int = 20,
        visible: VisibilityPredicate = event_is_visible,
    ) -> EventsResult:
        """Return up to `limit` visible events starting in [tstart, tend].

        Ordered by (timestart, id) ascending.

        Raises:
            UpstreamQueryError: if the underlying query fails.
        """
        try:
            return self._get_events(
                tstart, tend, users, groups, courses, categories, after_event_id, limit, visible
            )
        except SQLAlchemyError as exc:
            logger.error(
                "calendar query failed",
                extra={"tstart": tstart, "tend": tend, "limit": limit, "error": str(exc)},
            )
            raise UpstreamQueryError(f"Calendar query failed: {exc}") from exc

    def _get_events(self, tstart, tend, users, groups, courses, categories, after_event_id, limit, visible):
        related = RelatedObjectsCache(self.db)
        entity_clause = self._entity_clause(users, groups, courses, categories)
        if entity_clause is None or limit <= 0:
            return EventsResult(events=[], cache=related)

        conditions = [
            CalendarEvent.timestart >= tstart,
            CalendarEvent.timestart <= tend,
            CalendarEvent.visible.is_(True),
            entity_clause,
        ]

        if after_event_id:
            after = self.db.get(CalendarEvent, after_event_id)
            if after is not None:
                conditions.append(or_(
                    CalendarEvent.timestart > after.timestart,
                    and_(CalendarEvent.timestart == after.timestart, CalendarEvent.id > after.id),
                ))

        stmt = (
            select(CalendarEvent)
            .where(*conditions)
            .order_by(CalendarEvent.timestart, CalendarEvent.id)
        )

        found: list[CalendarEvent] = []
        offset = 0
        while len(found) < limit:
            batch = self.db.execute(stmt.limit(_BATCH_SIZE).offset(offset)).scalars().all()
            if not batch:
                break
            related.load(batch)
            for event in batch:
                if visible(event, related):
                    found.append(event)
                    if len(found) == limit:
                        break
            offset += len(batch)

        logger.debug(
            "calendar events fetched",
            extra={"tstart": tstart, "tend": tend, "limit": limit, "count": len(found)},
        )
        return EventsResult(
            events=[self._to_record(event, related) for event in found],
            cache=related,
        )

    @staticmethod
    def _entity_clause(users, groups, courses, categories):
        """OR of per-entity clauses; None when every filter matches nothing."""
        clauses = []

        if users is None:
            clauses.append(CalendarEvent.eventtype == "user")
        elif users:
            clauses.append(and_(CalendarEvent.eventtype == "user", CalendarEvent.userid.in_(users)))

        if groups is None:
            clauses.append(CalendarEvent.groupid != 0)
        elif groups:
            clauses.append(CalendarEvent.groupid.in_(groups))

        course_event = and_(
            CalendarEvent.eventtype.notin_(("user", "category")),
            CalendarEvent.groupid == 0,
            CalendarEvent.courseid != 0,
        )
        if courses is None:
            clauses.append(course_event)
        elif courses:
            clauses.append(and_(course_event, CalendarEvent.courseid.in_(courses)))

        if categories is None:
            clauses.append(CalendarEvent.eventtype == "category")
        elif categories:
            clauses.append(and_(
                CalendarEvent.eventtype == "category",
                CalendarEvent.categoryid.in_(categories),
            ))

        if not clauses:
            return None
        return or_(*clauses)

    @staticmethod
    def _to_record(event: CalendarEvent, related: RelatedObjectsCache) -> EventRecord:
        course = related.get_course(event)
        return EventRecord(
            id=event.id,
            name=event.name,
            timestart=event.timestart,
            eventtype=event.eventtype,
            courseid=event.courseid,
            categoryid=event.categoryid,
            groupid=event.groupid,
            userid=event.userid,
            course=CourseSummary.model_validate(course) if course is not None else None,
        )
