from upcoming_events.schemas.shared import PaginationState
from upcoming_events.schemas.event import (
    CourseSummary,
    DecoratedEvent,
    EventListContext,
    EventRecord,
    PageRequest,
    ReloadParams,
    ReloadResponse,
)

__all__ = [
    "PaginationState",
    "CourseSummary", "EventRecord", "DecoratedEvent", "EventListContext",
    "PageRequest", "ReloadParams", "ReloadResponse",
]
