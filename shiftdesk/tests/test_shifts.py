"""
Tests for shift catalog endpoints
"""
from fastapi import status

from shiftdesk.models.audit_log import AuditLog
from shiftdesk.tests.helpers import make_employee


def test_initialize_creates_default_catalog(client, admin_headers):
    response = client.post("/api/v1/shifts/initialize", headers=admin_headers)
    assert response.status_code == status.HTTP_201_CREATED
    shifts = response.json()
    assert [s["code"] for s in shifts] == ["shift3", "shift1", "shift2"]

    evening = next(s for s in shifts if s["code"] == "shift2")
    assert evening["is_overnight"] is True
    assert evening["duration_minutes"] == 480
    assert evening["display_time"] == "5:00 PM - 1:00 AM"

    again = client.post("/api/v1/shifts/initialize", headers=admin_headers)
    assert again.status_code == status.HTTP_400_BAD_REQUEST


def test_initialize_requires_admin(client, employee_headers):
    response = client.post("/api/v1/shifts/initialize", headers=employee_headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_list_sorted_by_start_time(client, shift_catalog, employee_headers):
    response = client.get("/api/v1/shifts", headers=employee_headers)
    assert response.status_code == 200
    assert [s["start_time"] for s in response.json()] == ["01:00", "09:00", "17:00"]
    assert response.json()[1]["start_time_12h"] == "9:00 AM"


def test_create_overnight_shift(client, admin_headers, db):
    response = client.post(
        "/api/v1/shifts",
        json={"name": "Late", "code": "shift4", "start_time": "22:00", "end_time": "6:00"},
        headers=admin_headers,
    )
    assert response.status_code == status.HTTP_201_CREATED, response.text
    data = response.json()
    assert data["end_time"] == "06:00"
    assert data["is_overnight"] is True
    assert data["duration_minutes"] == 480
    assert db.query(AuditLog).filter(AuditLog.entity_type == "shifts", AuditLog.action == "CREATE").count() == 1


def test_create_rejects_bad_time(client, admin_headers):
    response = client.post(
        "/api/v1/shifts",
        json={"name": "Broken", "code": "shift4", "start_time": "25:00", "end_time": "06:00"},
        headers=admin_headers,
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_create_rejects_duplicate_code(client, admin_headers, shift_catalog):
    response = client.post(
        "/api/v1/shifts",
        json={"name": "Another", "code": "shift1", "start_time": "10:00", "end_time": "12:00"},
        headers=admin_headers,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_update_shift_times(client, admin_headers, shift_catalog):
    shift_id = shift_catalog[0].id
    response = client.put(f"/api/v1/shifts/{shift_id}", json={"end_time": "18:00"}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["duration_minutes"] == 540


def test_get_missing_shift_is_404(client, admin_headers):
    response = client.get("/api/v1/shifts/999", headers=admin_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["error"] is True


def test_delete_refused_while_assigned(client, admin_headers, shift_catalog, db):
    make_employee(db, "night@example.com", shift="shift3")
    night = next(s for s in shift_catalog if s.code == "shift3")
    evening = next(s for s in shift_catalog if s.code == "shift2")

    response = client.delete(f"/api/v1/shifts/{night.id}", headers=admin_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "assigned" in response.json()["detail"]

    response = client.delete(f"/api/v1/shifts/{evening.id}", headers=admin_headers)
    assert response.status_code == status.HTTP_204_NO_CONTENT


def test_current_shift_resolves_overnight(client, shift_catalog, employee_headers):
    response = client.get("/api/v1/shifts/current", params={"at": "23:30"}, headers=employee_headers)
    assert response.status_code == 200
    assert response.json()["at"] == "23:30"
    assert response.json()["shift"]["code"] == "shift2"

    response = client.get("/api/v1/shifts/current", params={"at": "09:00"}, headers=employee_headers)
    assert response.json()["shift"]["code"] == "shift1"


def test_current_shift_none_when_gap(client, admin_headers, db):
    client.post(
        "/api/v1/shifts",
        json={"name": "Day", "code": "shift1", "start_time": "09:00", "end_time": "17:00"},
        headers=admin_headers,
    )
    response = client.get("/api/v1/shifts/current", params={"at": "20:00"}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == {"at": "20:00", "shift": None}


def test_inactive_shift_is_skipped(client, shift_catalog, employee_headers, db):
    day_shift = next(s for s in shift_catalog if s.code == "shift1")
    day_shift.is_active = False
    db.commit()

    response = client.get("/api/v1/shifts/current", params={"at": "10:00"}, headers=employee_headers)
    assert response.json()["shift"] is None

    response = client.get("/api/v1/shifts", params={"active_only": True}, headers=employee_headers)
    assert [s["code"] for s in response.json()] == ["shift3", "shift2"]

    response = client.get("/api/v1/shifts", headers=employee_headers)
    assert len(response.json()) == 3


def test_current_shift_rejects_bad_at(client, employee_headers):
    response = client.get("/api/v1/shifts/current", params={"at": "7pm"}, headers=employee_headers)
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_current_shift_employees_include_flexible(client, shift_catalog, admin_headers, db):
    make_employee(db, "day@example.com", name="Day", shift="shift1")
    make_employee(db, "flex@example.com", name="Flex", shift="flexible")
    make_employee(db, "eve@example.com", name="Eve", shift="shift2")

    response = client.get("/api/v1/shifts/current/employees", params={"at": "10:15"}, headers=admin_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["shift"]["code"] == "shift1"
    names = {e["name"] for e in data["employees"]}
    assert {"Day", "Flex"} <= names
    assert "Eve" not in names
    assert data["total"] == len(data["employees"])
