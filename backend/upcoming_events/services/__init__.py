from upcoming_events.services.calendar import (
    CalendarApi,
    CalendarInformation,
    EventsResult,
    event_is_visible,
    normalise_filter,
)
from upcoming_events.services.directory import HostDirectory
from upcoming_events.services.eventlist import EventList, EventType
from upcoming_events.services.pagination import Pagination
from upcoming_events.services.rendering import Renderer

__all__ = [
    "CalendarApi", "CalendarInformation", "EventsResult", "event_is_visible", "normalise_filter",
    "HostDirectory",
    "EventList", "EventType",
    "Pagination",
    "Renderer",
]
