"""
Tests for daily status and dashboard endpoints
"""
from datetime import date

from shiftdesk.models.leave import LeaveRequest, LeaveStatus, LeaveType
from shiftdesk.services.attendance_service import upsert_attendance
from shiftdesk.tests.helpers import make_employee

MONDAY = date(2024, 5, 6)


def add_leave(db, employee, start, end, leave_status=LeaveStatus.APPROVED, reason="Trip"):
    leave = LeaveRequest(
        employee_id=employee.id, start_date=start, end_date=end, reason=reason,
        leave_type=LeaveType.PLANNED, status=leave_status, notes="",
    )
    db.add(leave)
    db.commit()
    return leave


def by_name(items):
    return {item["name"]: item for item in items}


def test_today_status_applies_precedence(client, db, sink, admin_headers):
    off = make_employee(db, "off@example.com", name="Off", weekly_off=["monday"])
    away = make_employee(db, "away@example.com", name="Away")
    half = make_employee(db, "half@example.com", name="Half")
    make_employee(db, "quiet@example.com", name="Quiet")

    add_leave(db, off, MONDAY, MONDAY)
    upsert_attendance(db, off.id, MONDAY, "present", sink)
    add_leave(db, away, date(2024, 5, 5), date(2024, 5, 7), reason="Visiting family")
    upsert_attendance(db, away.id, MONDAY, "present", sink)
    add_leave(db, half, MONDAY, MONDAY, leave_status=LeaveStatus.PENDING)
    upsert_attendance(db, half.id, MONDAY, "half_day", sink)

    response = client.get("/api/v1/employees/today/status", params={"day": "2024-05-06"}, headers=admin_headers)
    assert response.status_code == 200
    items = by_name(response.json()["items"])

    assert items["Off"]["status"] == "weekly_off"
    assert items["Off"]["status_color"] == "gray"
    assert items["Away"]["status"] == "on_leave"
    assert items["Away"]["reason"] == "Visiting family"
    assert items["Half"]["status"] == "half_day"
    assert items["Half"]["status_text"] == "Half Day"
    assert items["Quiet"]["status"] == "present"
    assert items["Quiet"]["source"] == "default"


def test_inactive_employees_are_skipped(client, db, admin_headers):
    make_employee(db, "gone@example.com", name="Gone", active=False)
    response = client.get("/api/v1/employees/today/status", params={"day": "2024-05-06"}, headers=admin_headers)
    assert "Gone" not in by_name(response.json()["items"])


def test_employee_status_self_only(client, employee_headers, employee_user, other_employee):
    response = client.get(
        f"/api/v1/employees/{employee_user.id}/status", params={"day": "2024-05-07"}, headers=employee_headers
    )
    assert response.status_code == 200
    assert response.json()["status"] == "present"

    response = client.get(
        f"/api/v1/employees/{other_employee.id}/status", params={"day": "2024-05-07"}, headers=employee_headers
    )
    assert response.status_code == 403


def test_employee_status_unknown_employee(client, admin_headers):
    response = client.get("/api/v1/employees/999/status", params={"day": "2024-05-07"}, headers=admin_headers)
    assert response.status_code == 404


def test_dashboard_counts_and_current_shift(client, db, admin_headers, shift_catalog, employee_user):
    add_leave(db, employee_user, MONDAY, MONDAY)
    add_leave(db, employee_user, date(2024, 6, 1), date(2024, 6, 2), leave_status=LeaveStatus.PENDING)

    response = client.get("/api/v1/dashboard", params={"day": "2024-05-06", "at": "18:00"}, headers=admin_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["total_employees"] == 2
    assert data["counts"]["on_leave"] == 1
    assert data["counts"]["present"] == 1
    assert data["counts"]["weekly_off"] == 0
    assert data["pending_leaves"] == 1
    assert data["current_shift"]["code"] == "shift2"


def test_dashboard_requires_admin(client, employee_headers):
    assert client.get("/api/v1/dashboard", headers=employee_headers).status_code == 403
