"""
Tests for employee endpoints
"""
from fastapi import status

from shiftdesk.models.audit_log import AuditLog
from shiftdesk.models.employee import Employee


def new_employee(**overrides):
    payload = {
        "name": "Meera",
        "email": "meera@example.com",
        "phone": "9876543210",
        "password": "meerapass",
        "shift": "shift2",
        "weekly_off": ["sunday"],
    }
    payload.update(overrides)
    return payload


def test_create_generates_emp_code(client, admin_headers, db):
    response = client.post("/api/v1/employees", json=new_employee(), headers=admin_headers)
    assert response.status_code == status.HTTP_201_CREATED, response.text
    data = response.json()
    assert data["emp_code"] == "EMP0002"
    assert data["weekly_off"] == ["sunday"]
    assert "password_hash" not in data

    stored = db.get(Employee, data["id"])
    assert stored.password_hash != "meerapass"


def test_create_rejects_duplicate_email(client, admin_headers):
    client.post("/api/v1/employees", json=new_employee(), headers=admin_headers)
    response = client.post("/api/v1/employees", json=new_employee(email="MEERA@example.com"), headers=admin_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_create_rejects_duplicate_weekly_off(client, admin_headers):
    response = client.post(
        "/api/v1/employees", json=new_employee(weekly_off=["sunday", "sunday"]), headers=admin_headers
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_create_rejects_unknown_weekday(client, admin_headers):
    response = client.post("/api/v1/employees", json=new_employee(weekly_off=["Sunday"]), headers=admin_headers)
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_create_requires_both_custom_times(client, admin_headers):
    response = client.post("/api/v1/employees", json=new_employee(custom_start="10:00"), headers=admin_headers)
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_create_requires_admin(client, employee_headers):
    response = client.post("/api/v1/employees", json=new_employee(), headers=employee_headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_employee_reads_self_not_others(client, employee_headers, employee_user, other_employee):
    assert client.get(f"/api/v1/employees/{employee_user.id}", headers=employee_headers).status_code == 200
    assert client.get(f"/api/v1/employees/{other_employee.id}", headers=employee_headers).status_code == 403


def test_update_employee_notifies(client, admin_headers, employee_user, sink):
    response = client.put(
        f"/api/v1/employees/{employee_user.id}",
        json={"phone": "1112223333", "weekly_off": ["saturday", "sunday"]},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["weekly_off"] == ["saturday", "sunday"]
    assert sink.names() == ["employeeUpdated"]


def test_delete_employee(client, admin_headers, employee_user, admin_user):
    assert client.delete(f"/api/v1/employees/{employee_user.id}", headers=admin_headers).status_code == 204
    assert client.get(f"/api/v1/employees/{employee_user.id}", headers=admin_headers).status_code == 404
    assert client.delete(f"/api/v1/employees/{admin_user.id}", headers=admin_headers).status_code == 400


def test_timing_update_and_resolution(client, admin_headers, employee_user, shift_catalog, sink, db):
    response = client.get(f"/api/v1/employees/{employee_user.id}/timing", headers=admin_headers)
    assert response.json()["source"] == "catalog"
    assert response.json()["display_time"] == "9:00 AM - 5:00 PM"

    response = client.put(
        f"/api/v1/employees/{employee_user.id}/timing",
        json={"shift": "flexible", "custom_start": "22:00", "custom_end": "04:00"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["custom_start"] == "22:00"
    assert sink.names() == ["employeeUpdated"]

    timing = client.get(f"/api/v1/employees/{employee_user.id}/timing", headers=admin_headers).json()
    assert timing["source"] == "custom"
    assert timing["is_overnight"] is True
    assert timing["duration_minutes"] == 360
    assert db.query(AuditLog).filter(AuditLog.action == "TIMING_UPDATE").count() == 1


def test_clearing_custom_timing_falls_back_to_flexible_default(client, admin_headers, employee_user):
    client.put(
        f"/api/v1/employees/{employee_user.id}/timing",
        json={"shift": "flexible", "custom_start": "10:00", "custom_end": "14:00"},
        headers=admin_headers,
    )
    client.put(
        f"/api/v1/employees/{employee_user.id}/timing",
        json={"custom_start": None, "custom_end": None},
        headers=admin_headers,
    )
    timing = client.get(f"/api/v1/employees/{employee_user.id}/timing", headers=admin_headers).json()
    assert timing["source"] == "default"
    assert (timing["start_time"], timing["end_time"]) == ("09:00", "17:00")


def test_mark_attendance_endpoint(client, admin_headers, employee_user, admin_user, sink):
    url = f"/api/v1/employees/{employee_user.id}/attendance"
    first = client.post(url, json={"date": "2024-05-01", "status": "present"}, headers=admin_headers)
    second = client.post(url, json={"date": "2024-05-01", "status": "absent", "notes": "sick"}, headers=admin_headers)

    assert first.status_code == 200, first.text
    assert second.json()["id"] == first.json()["id"]
    assert second.json()["status"] == "absent"
    assert second.json()["marked_by_id"] == admin_user.id
    assert sink.names() == ["attendanceMarked", "attendanceMarked"]

    history = client.get(url, headers=admin_headers).json()
    assert len(history) == 1


def test_mark_attendance_unknown_employee(client, admin_headers):
    response = client.post(
        "/api/v1/employees/999/attendance", json={"date": "2024-05-01", "status": "present"}, headers=admin_headers
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_mark_attendance_requires_admin(client, employee_headers, employee_user):
    response = client.post(
        f"/api/v1/employees/{employee_user.id}/attendance",
        json={"date": "2024-05-01", "status": "present"},
        headers=employee_headers,
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN
