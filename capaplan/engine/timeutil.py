"""Clock-time helpers for capaplan.

All scheduling math works on day-relative minute offsets (minutes from midnight).
Intervals are half-open: [start, end).
"""

import re
from typing import Optional

from capaplan.errors import InvalidFormat


MINUTES_PER_DAY = 24 * 60

_CLOCK_RE = re.compile(r"^(?P<h>\d{1,2}):(?P<m>\d{2})(?::(?P<s>\d{2}))?$")


def time_to_minutes(value: Optional[str]) -> Optional[int]:
    """Convert an ``HH:MM`` clock string to minutes from midnight.

    A trailing ``:SS`` component is accepted and ignored (stores often return
    ``09:00:00``).

    Args:
        value: Clock string, or None/empty for "no time"

    Returns:
        Minutes from midnight, or None when no time was given

    Raises:
        InvalidFormat: If the string is not a valid 24-hour clock time
    """
    if value is None:
        return None
    text = value.strip()
    if not text:
        return None

    m = _CLOCK_RE.match(text)
    if not m:
        raise InvalidFormat(f"Invalid clock time: {value!r}", field="time")

    hours = int(m.group("h"))
    minutes = int(m.group("m"))
    if hours > 23 or minutes > 59:
        raise InvalidFormat(f"Invalid clock time: {value!r}", field="time")
    return hours * 60 + minutes


def minutes_to_time(minutes: int) -> str:
    """Convert minutes from midnight to a zero-padded 24-hour ``HH:MM`` string.

    ``1440`` renders as ``24:00`` so a window ending at midnight stays printable.
    """
    if minutes < 0 or minutes > MINUTES_PER_DAY:
        raise InvalidFormat(f"Minute offset out of range: {minutes}", field="minutes")
    hours, mins = divmod(int(minutes), 60)
    return f"{hours:02d}:{mins:02d}"


def overlaps(start_a: int, end_a: int, start_b: int, end_b: int) -> bool:
    """Half-open interval intersection test.

    Touching intervals (``end_a == start_b``) do not overlap.
    """
    return start_a < end_b and start_b < end_a


def format_minutes(minutes: int) -> str:
    """Format a duration for display (``45 min``, ``2 h``, ``1:30 h``)."""
    if minutes < 60:
        return f"{minutes} min"
    hours, mins = divmod(minutes, 60)
    if mins == 0:
        return f"{hours} h"
    return f"{hours}:{mins:02d} h"
