"""
Per-day index of leave records for calendar views.

build_leave_index() expands every leave's [start_date, end_date] (clipped to
the requested range) into one entry per day, keyed by ISO date. The result is
computed in full before it is returned; nothing is cached or persisted.
"""
from dataclasses import dataclass, asdict
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional

from shiftdesk.core.exceptions import InvalidRange
from shiftdesk.utils.enums import enum_to_str


@dataclass(frozen=True)
class IndexedLeave:
    leave_id: int
    employee_id: int
    employee_name: Optional[str]
    reason: str
    type: str
    status: str
    start_date: date
    end_date: date
    notes: str
    is_spanning: bool

    def to_dict(self) -> dict:
        return asdict(self)


def is_spanning(day: date, start_date: date, end_date: date) -> bool:
    """True unless the leave is a single day equal to `day`."""
    return start_date != day or end_date != day


def _employee_name(leave) -> Optional[str]:
    employee = getattr(leave, "employee", None)
    return getattr(employee, "name", None)


def build_leave_index(
    leaves: Iterable,
    range_start: date,
    range_end: date,
) -> Dict[str, List[IndexedLeave]]:
    """
    Expand leaves into a map of ISO date -> leaves active that day.

    Args:
        leaves: leave records (id, employee_id, reason, leave_type, status,
            start_date, end_date, notes)
        range_start: first day of the view (inclusive)
        range_end: last day of the view (inclusive)

    Returns:
        Dict keyed by "YYYY-MM-DD" in ascending date order. Entries for a day
        keep ascending start_date order; ties keep input order.

    Raises:
        InvalidRange: if range_start > range_end, or a record ends before it starts
    """
    if range_start > range_end:
        raise InvalidRange(
            f"Range start {range_start.isoformat()} is after range end {range_end.isoformat()}"
        )

    ordered = sorted(leaves, key=lambda leave: leave.start_date)
    by_day: Dict[date, List[IndexedLeave]] = {}

    for leave in ordered:
        if leave.start_date > leave.end_date:
            raise InvalidRange(f"Leave {leave.id} ends before it starts")

        first = max(leave.start_date, range_start)
        last = min(leave.end_date, range_end)
        for offset in range((last - first).days + 1):
            day = first + timedelta(days=offset)
            by_day.setdefault(day, []).append(
                IndexedLeave(
                    leave_id=leave.id,
                    employee_id=leave.employee_id,
                    employee_name=_employee_name(leave),
                    reason=leave.reason,
                    type=enum_to_str(leave.leave_type),
                    status=enum_to_str(leave.status),
                    start_date=leave.start_date,
                    end_date=leave.end_date,
                    notes=leave.notes or "",
                    is_spanning=is_spanning(day, leave.start_date, leave.end_date),
                )
            )

    return {day.isoformat(): by_day[day] for day in sorted(by_day)}
