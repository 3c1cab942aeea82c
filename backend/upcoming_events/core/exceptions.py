"""core/exceptions.py — Error types raised by the block.

Each carries the HTTP status the exception handlers in api/main.py answer
with. Parameter validation failures are FastAPI's own RequestValidationError.
"""

from __future__ import annotations


class UpcomingEventsError(Exception):
    status_code = 500

    def __init__(self, message: str, error_code: str = "error") -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code


class AuthenticationError(UpcomingEventsError):
    """Missing/invalid session or session key. Raised before any data access."""

    status_code = 401


class UpstreamQueryError(UpcomingEventsError):
    """The host calendar query failed."""

    status_code = 502

    def __init__(self, message: str, error_code: str = "calendarqueryfailed") -> None:
        super().__init__(message, error_code)
