"""services/timing.py — "How long until" labels for event start times."""

from __future__ import annotations

from typing import Optional

from upcoming_events.core.strings import get_string

# Largest first; a month is 30 days and a year 365.
TIME_UNITS: tuple[tuple[int, str], ...] = (
    (31536000, "year"),
    (2592000, "month"),
    (604800, "week"),
    (86400, "day"),
    (3600, "hour"),
    (60, "minute"),
    (1, "second"),
)


def format_time_units(seconds: int) -> Optional[str]:
    """Express `seconds` in the largest unit it covers, e.g. "2 days".

    Returns None when less than one second remains.
    """
    for unit, identifier in TIME_UNITS:
        if seconds < unit:
            continue
        count = seconds // unit
        return f"{count} {get_string(identifier)}{'s' if count > 1 else ''}"
    return None


def human_timing(timestamp: int, now: int) -> str:
    """Label for an event starting at `timestamp`; "Today" if it already started."""
    units = format_time_units(int(timestamp - now))
    if units is None:
        return get_string("today")
    return get_string("time", units)
