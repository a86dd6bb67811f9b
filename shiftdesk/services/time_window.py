"""
Wall-clock time windows with overnight wrap.

A window whose end is numerically earlier than its start (17:00-01:00) runs
past midnight into the next day. That is a normal shift, not an error.
"""
from dataclasses import dataclass
from typing import Callable, Union

from shiftdesk.core.exceptions import InvalidTimeRange
from shiftdesk.utils.time_formatter import (
    MINUTES_PER_DAY,
    format_to_12_hour,
    minutes_to_hhmm,
    parse_hhmm,
)


def _check_minutes(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidTimeRange(f"{name} must be an integer minute value, got {value!r}")
    if not 0 <= value < MINUTES_PER_DAY:
        raise InvalidTimeRange(f"{name} {value} is outside 0-{MINUTES_PER_DAY - 1}")


@dataclass(frozen=True)
class TimeWindow:
    """Start/end pair in minutes since midnight (0-1439)."""

    start: int
    end: int

    def __post_init__(self):
        _check_minutes("start", self.start)
        _check_minutes("end", self.end)

    @classmethod
    def normalize(cls, start_minutes: int, end_minutes: int) -> "TimeWindow":
        """
        Build a window from minute values.

        Raises:
            InvalidTimeRange: if either value is outside [0, 1439]. end < start
            is accepted and means the window is overnight.
        """
        return cls(start_minutes, end_minutes)

    @classmethod
    def from_hhmm(cls, start: str, end: str) -> "TimeWindow":
        """Build a window from persisted "HH:MM" strings."""
        return cls(parse_hhmm(start), parse_hhmm(end))

    @property
    def is_overnight(self) -> bool:
        return self.end < self.start

    @property
    def start_hhmm(self) -> str:
        return minutes_to_hhmm(self.start)

    @property
    def end_hhmm(self) -> str:
        return minutes_to_hhmm(self.end)

    def contains(self, instant_minutes: int) -> bool:
        """
        True if the wall-clock minute falls inside the window.

        Start is inclusive, end exclusive. An overnight window covers
        [start, 24:00) and [00:00, end).
        """
        _check_minutes("instant", instant_minutes)
        if self.is_overnight:
            return instant_minutes >= self.start or instant_minutes < self.end
        return self.start <= instant_minutes < self.end

    def duration_minutes(self) -> int:
        """Length in minutes, always in [0, 1440). A start == end window has length 0."""
        if self.is_overnight:
            return self.end - self.start + MINUTES_PER_DAY
        return self.end - self.start

    def display(self, formatter: Callable[[Union[str, int]], str] = format_to_12_hour) -> str:
        """Render as "<start> - <end>" with the given 12-hour formatter, no next-day marker."""
        return f"{formatter(self.start_hhmm)} - {formatter(self.end_hhmm)}"
