"""
Test data helpers shared by fixtures and test modules
"""
from shiftdesk.core.security import hash_password
from shiftdesk.models import Employee, Role


def make_employee(db, email, name="Employee", role=Role.EMPLOYEE, shift="shift1",
                  weekly_off=None, password="secret123", emp_code=None, active=True, **extra):
    employee = Employee(
        emp_code=emp_code or f"EMP{db.query(Employee).count() + 1:04d}",
        name=name,
        email=email,
        phone="9999999999",
        password_hash=hash_password(password),
        role=role.value,
        shift=shift,
        weekly_off=weekly_off or [],
        active=active,
        **extra,
    )
    db.add(employee)
    db.commit()
    db.refresh(employee)
    return employee


def auth_headers(client, email, password):
    response = client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}
