"""
Daily status resolution.

For one employee and one day exactly one status applies. The rules are
checked in this order and the first match wins:

1. the day's weekday is in the employee's weekly-off set  -> weekly_off
2. an approved leave of the employee covers the day       -> on_leave
3. an attendance record exists for the day                -> its status
4. otherwise                                              -> present

Weekly-off beats an explicit attendance mark and leave beats attendance.
"""
from collections import Counter
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, Optional
import enum

from shiftdesk.core.constants import WEEKDAY_NAMES
from shiftdesk.utils.enums import enum_to_str


class DayStatus(str, enum.Enum):
    PRESENT = "present"
    ABSENT = "absent"
    HALF_DAY = "half_day"
    ON_LEAVE = "on_leave"
    WEEKLY_OFF = "weekly_off"


class StatusSource(str, enum.Enum):
    WEEKLY_OFF = "weekly_off"
    LEAVE = "leave"
    ATTENDANCE = "attendance"
    DEFAULT = "default"


_STATUS_TEXT = {
    DayStatus.PRESENT: "Present",
    DayStatus.ABSENT: "Absent",
    DayStatus.HALF_DAY: "Half Day",
    DayStatus.ON_LEAVE: "On Leave",
    DayStatus.WEEKLY_OFF: "Weekly Off",
}

_STATUS_COLOR = {
    DayStatus.PRESENT: "green",
    DayStatus.ABSENT: "orange",
    DayStatus.HALF_DAY: "orange",
    DayStatus.ON_LEAVE: "red",
    DayStatus.WEEKLY_OFF: "gray",
}


@dataclass(frozen=True)
class DailyStatus:
    status: DayStatus
    source: StatusSource
    reason: Optional[str] = None
    leave_id: Optional[int] = None
    attendance_id: Optional[int] = None

    @property
    def status_text(self) -> str:
        return _STATUS_TEXT[self.status]

    @property
    def status_color(self) -> str:
        return _STATUS_COLOR[self.status]


def weekday_name(day: date) -> str:
    """Lowercase English weekday name, e.g. "monday"."""
    return WEEKDAY_NAMES[day.weekday()]


def _covering_leave(employee_id: int, day: date, leaves: Iterable):
    covering = [
        leave for leave in leaves
        if leave.employee_id == employee_id
        and enum_to_str(leave.status) == "approved"
        and leave.start_date <= day <= leave.end_date
    ]
    if not covering:
        return None
    # Overlapping approved leaves: earliest start wins, then lowest id
    return min(covering, key=lambda leave: (leave.start_date, leave.id or 0))


def resolve_daily_status(
    employee,
    day: date,
    approved_leaves_for_day: Iterable,
    attendance_for_day=None,
) -> DailyStatus:
    """
    Resolve one employee's status for `day`.

    Args:
        employee: object with `id` and `weekly_off` (lowercase weekday names)
        day: the calendar day being resolved
        approved_leaves_for_day: leave records; entries for other employees,
            other statuses or other days are ignored
        attendance_for_day: the employee's attendance record for `day`, or None

    Returns:
        DailyStatus with the winning status and the rule that produced it
    """
    if weekday_name(day) in (employee.weekly_off or ()):
        return DailyStatus(status=DayStatus.WEEKLY_OFF, source=StatusSource.WEEKLY_OFF)

    leave = _covering_leave(employee.id, day, approved_leaves_for_day)
    if leave is not None:
        return DailyStatus(
            status=DayStatus.ON_LEAVE,
            source=StatusSource.LEAVE,
            reason=leave.reason,
            leave_id=leave.id,
        )

    if attendance_for_day is not None:
        status = DayStatus(enum_to_str(attendance_for_day.status))
        return DailyStatus(
            status=status,
            source=StatusSource.ATTENDANCE,
            reason=(attendance_for_day.notes or None) if status == DayStatus.ON_LEAVE else None,
            attendance_id=attendance_for_day.id,
        )

    return DailyStatus(status=DayStatus.PRESENT, source=StatusSource.DEFAULT)


def summarize(statuses: Iterable[DailyStatus]) -> Dict[str, int]:
    """Count resolved statuses; every DayStatus appears, zero when absent."""
    counts = Counter(s.status for s in statuses)
    return {member.value: counts.get(member, 0) for member in DayStatus}
