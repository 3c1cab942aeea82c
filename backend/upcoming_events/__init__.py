"""Upcoming events block: paginated upcoming calendar events for a course dashboard."""

__version__ = "1.0.0"
