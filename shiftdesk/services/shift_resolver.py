"""
Current-shift resolution over a catalog of time windows
"""
from typing import Hashable, Iterable, Optional, Tuple, TypeVar

from shiftdesk.services.time_window import TimeWindow

ShiftId = TypeVar("ShiftId", bound=Hashable)


def resolve_current(
    windows: Iterable[Tuple[ShiftId, TimeWindow]],
    now_minutes: int,
) -> Optional[ShiftId]:
    """
    Return the id of the first window containing now_minutes, or None.

    Iteration order is the caller's; when windows overlap the first one wins.
    Callers sort by start time to get the catalog's natural order. None is a
    normal outcome for catalogs with gaps.
    """
    for shift_id, window in windows:
        if window.contains(now_minutes):
            return shift_id
    return None


def sort_by_start(windows: Iterable[Tuple[ShiftId, TimeWindow]]) -> list:
    """Stable sort of (id, window) pairs by window start."""
    return sorted(windows, key=lambda pair: pair[1].start)
