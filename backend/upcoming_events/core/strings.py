"""core/strings.py — Display strings for the block (English).

Placeholders follow str.format: a scalar argument fills {a}, a mapping fills
its named fields.
"""

from __future__ import annotations

from typing import Any, Mapping

STRINGS: dict[str, str] = {
    "pluginname": "Upcoming events",
    "today": "Today",
    "year": "year",
    "month": "month",
    "week": "week",
    "day": "day",
    "hour": "hour",
    "minute": "minute",
    "second": "second",
    "time": "{a}",
    "event": "{name}",
    "courseevent": "{name} in {course}",
    "nomoreevents": "No more events",
    "noevents": "There are no upcoming events",
    "anon": "Anonymous user",
    "pictureof": "Picture of {a}",
    "sooner": "Sooner",
    "later": "Later",
}


def get_string(identifier: str, a: Any = None) -> str:
    """Return the display string for ``identifier`` with ``a`` substituted.

    Raises:
        KeyError: if the identifier is not defined.
    """
    text = STRINGS[identifier]
    if a is None:
        return text
    if isinstance(a, Mapping):
        return text.format(**a)
    return text.format(a=a)
