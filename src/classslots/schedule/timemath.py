"""Time-of-day arithmetic for fixed-duration class sessions."""

from __future__ import annotations

import re

from classslots.schedule.exceptions import InvalidTimeFormatError
from classslots.schedule.models import strip_time_prefix

SESSION_MINUTES = 50

_TIME_RE = re.compile(r"^(?P<hours>\d{1,2}):(?P<minutes>\d{2})$")


def to_minutes(label: str) -> int:
    """Convert "HH:MM" (optionally "BRT HH:MM") to minutes since midnight.

    Raises:
        InvalidTimeFormatError: If the label is not a valid time of day.
    """
    match = _TIME_RE.match(strip_time_prefix(label))
    if match is None:
        raise InvalidTimeFormatError(f"Invalid time '{label}', expected HH:MM")
    hours = int(match.group("hours"))
    minutes = int(match.group("minutes"))
    if hours > 23 or minutes > 59:
        raise InvalidTimeFormatError(f"Invalid time '{label}', expected HH:MM")
    return hours * 60 + minutes


def overlaps(time_a: str, time_b: str, duration_minutes: int = SESSION_MINUTES) -> bool:
    """True if [a, a+duration) and [b, b+duration) intersect."""
    start_a = to_minutes(time_a)
    start_b = to_minutes(time_b)
    return start_a < start_b + duration_minutes and start_b < start_a + duration_minutes


def end_time(label: str, duration_minutes: int = SESSION_MINUTES) -> str:
    """Label of the moment a session starting at ``label`` ends.

    Wraps past midnight.
    """
    total = (to_minutes(label) + duration_minutes) % (24 * 60)
    return f"{total // 60:02d}:{total % 60:02d}"
