"""
Wall-clock parsing and 12-hour display formatting.

This is the single place shift times are turned into text; API schemas and
TimeWindow.display() both go through format_to_12_hour.

    >>> format_to_12_hour("00:00")
    '12:00 AM'
    >>> format_to_12_hour("23:45")
    '11:45 PM'
"""
import re
from datetime import time
from typing import Union

from shiftdesk.core.exceptions import InvalidTimeRange

MINUTES_PER_DAY = 24 * 60

# Same shape the shift catalog accepts: H:MM or HH:MM, hour 0-23
HHMM_PATTERN = re.compile(r"^([0-1]?[0-9]|2[0-3]):([0-5][0-9])$")


def parse_hhmm(value: str) -> int:
    """
    Parse a 24-hour "HH:MM" string into minutes since midnight.

    Raises:
        InvalidTimeRange: if the text is not a valid wall-clock time
    """
    match = HHMM_PATTERN.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise InvalidTimeRange(f"Invalid time '{value}', expected HH:MM (00:00-23:59)")
    return int(match.group(1)) * 60 + int(match.group(2))


def minutes_to_hhmm(minutes: int) -> str:
    """Render minutes since midnight as zero-padded 24-hour "HH:MM"."""
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise InvalidTimeRange(f"Minute value {minutes} is outside 0-1439")
    hours, mins = divmod(minutes, 60)
    return f"{hours:02d}:{mins:02d}"


def minutes_of(moment: time) -> int:
    """Minutes since midnight of a time-of-day (seconds are dropped)."""
    return moment.hour * 60 + moment.minute


def format_to_12_hour(time24: Union[str, int, time]) -> str:
    """
    Format a wall-clock value as "h:mm AM/PM".

    Accepts "HH:MM" text, minutes since midnight, or a datetime.time. The hour
    has no leading zero, minutes are always two digits, hour 0 renders as
    12 AM and hour 12 as 12 PM.
    """
    if isinstance(time24, time):
        minutes = minutes_of(time24)
    elif isinstance(time24, int):
        minutes_to_hhmm(time24)  # bounds check
        minutes = time24
    else:
        minutes = parse_hhmm(time24)

    hours, mins = divmod(minutes, 60)
    period = "PM" if hours >= 12 else "AM"
    display_hours = hours % 12 or 12
    return f"{display_hours}:{mins:02d} {period}"


def format_shift_timing(start: Union[str, int], end: Union[str, int]) -> str:
    """
    "<start> - <end>" in 12-hour form.

    Overnight ranges are rendered as-is, without a next-day marker.
    """
    return f"{format_to_12_hour(start)} - {format_to_12_hour(end)}"
