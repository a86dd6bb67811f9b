"""
Field types shared by several schemas
"""
from typing import List, Literal, Optional

from shiftdesk.core.exceptions import InvalidTimeRange
from shiftdesk.utils.time_formatter import parse_hhmm

Weekday = Literal["sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday"]
ShiftCode = Literal["shift1", "shift2", "shift3", "shift4"]
AssignedShift = Literal["shift1", "shift2", "shift3", "shift4", "flexible"]


def check_hhmm(value: Optional[str]) -> Optional[str]:
    """Validate HH:MM text and return it zero-padded (9:05 -> 09:05)."""
    if value is None:
        return None
    try:
        minutes = parse_hhmm(value)
    except InvalidTimeRange as exc:
        raise ValueError(exc.detail)
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def check_weekly_off(value: Optional[List[str]]) -> Optional[List[str]]:
    if value is None:
        return None
    duplicates = sorted({day for day in value if value.count(day) > 1})
    if duplicates:
        raise ValueError(f"weekly_off contains duplicate days: {', '.join(duplicates)}")
    return value
