"""
Tests for daily status precedence
"""
from datetime import date
from types import SimpleNamespace

from shiftdesk.services.daily_status import DayStatus, StatusSource, resolve_daily_status, summarize

MONDAY = date(2024, 5, 6)
TUESDAY = date(2024, 5, 7)


def employee(weekly_off=None, employee_id=1):
    return SimpleNamespace(id=employee_id, weekly_off=weekly_off or [])


def approved_leave(leave_id, start, end, employee_id=1, reason="Family function", status="approved"):
    return SimpleNamespace(
        id=leave_id, employee_id=employee_id, status=status,
        start_date=start, end_date=end, reason=reason,
    )


def attendance(status, record_id=10, notes=""):
    return SimpleNamespace(id=record_id, status=status, notes=notes)


def test_weekly_off_beats_leave_and_attendance():
    result = resolve_daily_status(
        employee(["monday"]),
        MONDAY,
        [approved_leave(1, MONDAY, MONDAY)],
        attendance("present"),
    )
    assert result.status == DayStatus.WEEKLY_OFF
    assert result.source == StatusSource.WEEKLY_OFF
    assert result.status_color == "gray"


def test_leave_beats_attendance():
    result = resolve_daily_status(employee(), TUESDAY, [approved_leave(1, MONDAY, TUESDAY)], attendance("present"))
    assert result.status == DayStatus.ON_LEAVE
    assert result.reason == "Family function"
    assert result.leave_id == 1
    assert result.status_text == "On Leave"
    assert result.status_color == "red"


def test_attendance_status_used_verbatim():
    result = resolve_daily_status(employee(), TUESDAY, [], attendance("half_day"))
    assert result.status == DayStatus.HALF_DAY
    assert result.source == StatusSource.ATTENDANCE
    assert result.attendance_id == 10
    assert result.status_color == "orange"


def test_on_leave_attendance_displays_as_leave():
    result = resolve_daily_status(employee(), TUESDAY, [], attendance("on_leave", notes="Doctor"))
    assert result.status == DayStatus.ON_LEAVE
    assert result.reason == "Doctor"
    assert result.status_color == "red"


def test_unmarked_day_defaults_to_present():
    result = resolve_daily_status(employee(["monday"]), TUESDAY, [], None)
    assert result.status == DayStatus.PRESENT
    assert result.source == StatusSource.DEFAULT
    assert result.status_color == "green"


def test_unapproved_and_foreign_leaves_are_ignored():
    leaves = [
        approved_leave(1, TUESDAY, TUESDAY, status="pending"),
        approved_leave(2, TUESDAY, TUESDAY, employee_id=2),
        approved_leave(3, MONDAY, MONDAY),
    ]
    assert resolve_daily_status(employee(), TUESDAY, leaves).status == DayStatus.PRESENT


def test_overlapping_leaves_earliest_start_wins():
    leaves = [
        approved_leave(7, TUESDAY, TUESDAY, reason="later"),
        approved_leave(9, MONDAY, TUESDAY, reason="earlier"),
        approved_leave(8, MONDAY, TUESDAY, reason="earlier, lower id"),
    ]
    result = resolve_daily_status(employee(), TUESDAY, leaves)
    assert result.leave_id == 8
    assert result.reason == "earlier, lower id"


def test_summarize_counts_every_status():
    counts = summarize([
        resolve_daily_status(employee(), TUESDAY, []),
        resolve_daily_status(employee(["tuesday"]), TUESDAY, []),
    ])
    assert counts == {"present": 1, "absent": 0, "half_day": 0, "on_leave": 0, "weekly_off": 1}
