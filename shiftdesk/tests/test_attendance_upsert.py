"""
Tests for attendance upsert
"""
from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from shiftdesk.core.exceptions import EmployeeNotFound
from shiftdesk.models.attendance import AttendanceRecord
from shiftdesk.models.audit_log import AuditLog
from shiftdesk.services import attendance_service
from shiftdesk.services.attendance_service import upsert_attendance
from shiftdesk.tests.helpers import make_employee

DAY = date(2024, 5, 1)


def records_for(db, employee_id, day=DAY):
    return db.query(AttendanceRecord).filter(
        AttendanceRecord.employee_id == employee_id,
        AttendanceRecord.date == day,
    ).all()


def test_second_upsert_overwrites_single_record(db, sink, admin_user, employee_user):
    upsert_attendance(db, employee_user.id, DAY, "present", sink, marked_by_id=admin_user.id)
    record = upsert_attendance(db, employee_user.id, DAY, "absent", sink, notes="No show", marked_by_id=admin_user.id)

    rows = records_for(db, employee_user.id)
    assert len(rows) == 1
    assert rows[0].id == record.id
    assert rows[0].status == "absent"
    assert rows[0].notes == "No show"


def test_clock_times_on_same_day_collide(db, sink, employee_user):
    morning = datetime(2024, 5, 1, 9, 15)
    evening = datetime(2024, 5, 1, 21, 40)
    first = upsert_attendance(db, employee_user.id, morning, "present", sink)
    second = upsert_attendance(db, employee_user.id, evening, "half_day", sink)

    assert first.id == second.id
    assert second.date == DAY
    assert len(records_for(db, employee_user.id)) == 1


def test_aware_datetime_uses_business_day(db, sink, employee_user):
    # 20:00 UTC on Apr 30 is 01:30 on May 1 in Asia/Kolkata
    record = upsert_attendance(db, employee_user.id, datetime(2024, 4, 30, 20, 0, tzinfo=timezone.utc), "present", sink)
    assert record.date == DAY


def test_update_keeps_check_in_unless_supplied(db, sink, employee_user):
    check_in = datetime(2024, 5, 1, 3, 30, tzinfo=timezone.utc)
    upsert_attendance(db, employee_user.id, DAY, "present", sink, check_in=check_in, total_hours=Decimal("7.50"))
    record = upsert_attendance(db, employee_user.id, DAY, "half_day", sink)

    assert record.check_in is not None
    assert record.total_hours == Decimal("7.50")
    assert record.status == "half_day"


def test_shift_recorded_from_assignment(db, sink):
    flexible = make_employee(db, "flex@example.com", shift="flexible")
    evening = make_employee(db, "eve@example.com", shift="shift2")

    assert upsert_attendance(db, flexible.id, DAY, "present", sink).shift == "shift1"
    assert upsert_attendance(db, evening.id, DAY, "present", sink).shift == "shift2"
    assert upsert_attendance(db, evening.id, DAY, "present", sink, shift_code="shift3").shift == "shift3"


def test_unknown_employee_raises(db, sink):
    with pytest.raises(EmployeeNotFound):
        upsert_attendance(db, 999, DAY, "present", sink)
    assert sink.events == []


def test_emits_attendance_marked_and_audits(db, sink, admin_user, employee_user):
    record = upsert_attendance(db, employee_user.id, DAY, "present", sink, marked_by_id=admin_user.id)

    assert sink.names() == ["attendanceMarked"]
    _, rooms, payload = sink.events[0]
    assert rooms == ["admin", f"employee_{employee_user.id}"]
    assert payload["id"] == record.id
    assert payload["date"] == "2024-05-01"

    audit = db.query(AuditLog).filter(AuditLog.action == "ATTENDANCE_MARK").one()
    assert audit.entity_id == record.id
    assert audit.actor_id == admin_user.id


def test_concurrent_insert_is_resolved_by_updating_winner(db, sink, employee_user, monkeypatch):
    winner = upsert_attendance(db, employee_user.id, DAY, "present", sink)

    real_get = attendance_service.get_attendance
    calls = []

    def stale_first_read(session, employee_id, day):
        calls.append(day)
        if len(calls) == 1:
            return None  # the competing insert is not visible yet
        return real_get(session, employee_id, day)

    monkeypatch.setattr(attendance_service, "get_attendance", stale_first_read)
    record = upsert_attendance(db, employee_user.id, DAY, "absent", sink)

    assert len(calls) == 2
    assert record.id == winner.id
    rows = records_for(db, employee_user.id)
    assert len(rows) == 1
    assert rows[0].status == "absent"
