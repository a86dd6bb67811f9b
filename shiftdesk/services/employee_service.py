"""
Employee service - business logic for employee management
"""
import logging
import re
from typing import List, Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from shiftdesk.core.constants import (
    DEFAULT_FLEXIBLE_END,
    DEFAULT_FLEXIBLE_START,
    DEFAULT_SHIFTS,
    FLEXIBLE_SHIFT,
)
from shiftdesk.core.exceptions import EmployeeNotFound, PermissionDenied
from shiftdesk.core.identity import Caller, can_access_employee
from shiftdesk.core.security import hash_password
from shiftdesk.models.employee import Employee, Role
from shiftdesk.models.shift import Shift
from shiftdesk.schemas.employee import (
    EmployeeCreate,
    EmployeeTimingOut,
    EmployeeTimingUpdate,
    EmployeeUpdate,
    ProfileUpdate,
)
from shiftdesk.services.audit_service import log_audit
from shiftdesk.services.notifications import NotificationSink
from shiftdesk.services.time_window import TimeWindow
from shiftdesk.utils.enums import enum_to_str
from shiftdesk.utils.time_formatter import format_to_12_hour

logger = logging.getLogger(__name__)

EMP_CODE_PATTERN = re.compile(r"^EMP(\d+)$")


def generate_emp_code(db: Session) -> str:
    """Next free code of the form EMP0001, EMP0002, ..."""
    highest = 0
    for (code,) in db.query(Employee.emp_code).all():
        match = EMP_CODE_PATTERN.match(code or "")
        if match:
            highest = max(highest, int(match.group(1)))
    return f"EMP{highest + 1:04d}"


def _ensure_unique_email(db: Session, email: str, exclude_id: Optional[int] = None) -> None:
    query = db.query(Employee).filter(func.lower(Employee.email) == email.lower())
    if exclude_id is not None:
        query = query.filter(Employee.id != exclude_id)
    if query.first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Employee with email '{email}' already exists"
        )


def get_employee(db: Session, employee_id: int) -> Employee:
    """
    Load an employee by id

    Raises:
        EmployeeNotFound: if no such employee exists
    """
    employee = db.get(Employee, employee_id)
    if employee is None:
        raise EmployeeNotFound(f"Employee {employee_id} not found")
    return employee


def get_employee_for_caller(db: Session, caller: Caller, employee_id: int) -> Employee:
    """Admins may load anyone; employees only themselves."""
    if not can_access_employee(caller, employee_id):
        raise PermissionDenied("You can only view your own record")
    return get_employee(db, employee_id)


def list_employees(
    db: Session,
    skip: int = 0,
    limit: int = 100,
    active_only: Optional[bool] = None,
    shift: Optional[str] = None,
) -> Tuple[List[Employee], int]:
    """
    List employees with optional filtering

    Returns:
        Tuple of (employees, total count before paging)
    """
    query = db.query(Employee)
    if active_only is not None:
        query = query.filter(Employee.active == active_only)
    if shift:
        query = query.filter(Employee.shift == shift)

    total = query.count()
    employees = query.order_by(Employee.name, Employee.id).offset(skip).limit(limit).all()
    return employees, total


def list_active_employees(db: Session) -> List[Employee]:
    return db.query(Employee).filter(Employee.active == True).order_by(Employee.name, Employee.id).all()  # noqa: E712


def create_employee(
    db: Session,
    employee_data: EmployeeCreate,
    actor_id: int
) -> Employee:
    """
    Create a new employee

    Args:
        db: Database session
        employee_data: Employee creation data
        actor_id: ID of the admin creating the employee

    Returns:
        Created Employee instance

    Raises:
        HTTPException: If the email or emp_code is already taken
    """
    _ensure_unique_email(db, employee_data.email)

    emp_code = employee_data.emp_code or generate_emp_code(db)
    if db.query(Employee).filter(Employee.emp_code == emp_code).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Employee with emp_code '{emp_code}' already exists"
        )

    employee = Employee(
        emp_code=emp_code,
        name=employee_data.name,
        email=employee_data.email.lower(),
        phone=employee_data.phone,
        password_hash=hash_password(employee_data.password),
        role=enum_to_str(employee_data.role),
        shift=employee_data.shift,
        custom_start=employee_data.custom_start,
        custom_end=employee_data.custom_end,
        weekly_off=list(employee_data.weekly_off),
        active=employee_data.active,
    )
    db.add(employee)
    db.commit()
    db.refresh(employee)

    log_audit(
        db=db,
        actor_id=actor_id,
        action="CREATE",
        entity_type="employees",
        entity_id=employee.id,
        meta={"emp_code": employee.emp_code, "email": employee.email, "shift": employee.shift}
    )
    logger.info("Employee %s created (%s)", employee.emp_code, employee.email)
    return employee


def update_employee(
    db: Session,
    employee_id: int,
    employee_data: EmployeeUpdate,
    actor_id: int,
    sink: NotificationSink,
) -> Employee:
    """
    Update an employee; only fields present in the request are changed
    """
    employee = get_employee(db, employee_id)
    changes = employee_data.model_dump(exclude_unset=True)

    if changes.get("email"):
        _ensure_unique_email(db, changes["email"], exclude_id=employee.id)
        changes["email"] = changes["email"].lower()

    password = changes.pop("password", None)
    if password:
        employee.password_hash = hash_password(password)

    if changes.get("role") is not None:
        changes["role"] = enum_to_str(changes["role"])

    for field, value in changes.items():
        if value is None and field not in ("custom_start", "custom_end"):
            continue
        setattr(employee, field, value)

    db.commit()
    db.refresh(employee)

    log_audit(
        db=db,
        actor_id=actor_id,
        action="UPDATE",
        entity_type="employees",
        entity_id=employee.id,
        meta={"fields": sorted(changes.keys()), "password_changed": bool(password)}
    )
    sink.on_employee_updated(employee)
    return employee


def update_own_profile(
    db: Session,
    employee: Employee,
    profile_data: ProfileUpdate,
    sink: NotificationSink,
) -> Employee:
    """
    Self-service update of name, email and phone

    Raises:
        HTTPException: if the new email belongs to another employee
    """
    changes = profile_data.model_dump(exclude_unset=True, exclude_none=True)
    if "email" in changes:
        _ensure_unique_email(db, changes["email"], exclude_id=employee.id)
        changes["email"] = changes["email"].lower()

    for field, value in changes.items():
        setattr(employee, field, value)

    db.commit()
    db.refresh(employee)

    log_audit(
        db=db,
        actor_id=employee.id,
        action="PROFILE_UPDATE",
        entity_type="employees",
        entity_id=employee.id,
        meta={"fields": sorted(changes.keys())}
    )
    sink.on_employee_updated(employee)
    return employee


def delete_employee(db: Session, employee_id: int, actor_id: int) -> None:
    """Delete an employee together with their leaves and attendance"""
    if employee_id == actor_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot delete your own account"
        )
    employee = get_employee(db, employee_id)
    emp_code = employee.emp_code
    db.delete(employee)
    db.commit()

    log_audit(
        db=db,
        actor_id=actor_id,
        action="DELETE",
        entity_type="employees",
        entity_id=employee_id,
        meta={"emp_code": emp_code}
    )


def update_employee_timing(
    db: Session,
    employee_id: int,
    timing: EmployeeTimingUpdate,
    actor_id: int,
    sink: NotificationSink,
) -> Employee:
    """
    Change an employee's shift code and/or custom timing.

    Sending custom_start and custom_end as null clears the custom timing;
    omitting them leaves it as it is.
    """
    employee = get_employee(db, employee_id)
    before = {
        "shift": employee.shift,
        "custom_start": employee.custom_start,
        "custom_end": employee.custom_end,
    }

    if timing.shift is not None:
        employee.shift = timing.shift
    if "custom_start" in timing.model_fields_set or "custom_end" in timing.model_fields_set:
        employee.custom_start = timing.custom_start
        employee.custom_end = timing.custom_end

    db.commit()
    db.refresh(employee)

    log_audit(
        db=db,
        actor_id=actor_id,
        action="TIMING_UPDATE",
        entity_type="employees",
        entity_id=employee.id,
        meta={
            "before": before,
            "after": {
                "shift": employee.shift,
                "custom_start": employee.custom_start,
                "custom_end": employee.custom_end,
            },
        }
    )
    sink.on_employee_updated(employee)
    return employee


def resolve_employee_window(
    employee: Employee,
    catalog: List[Shift],
) -> Tuple[TimeWindow, str]:
    """
    Concrete working window for display.

    Custom timing wins, then the employee's catalog shift, then the built-in
    definition of that code, then the flexible default.

    Returns:
        (window, source) where source is "custom", "catalog" or "default"
    """
    if employee.has_custom_timing:
        return TimeWindow.from_hhmm(employee.custom_start, employee.custom_end), "custom"

    if employee.shift != FLEXIBLE_SHIFT:
        for shift in catalog:
            if shift.code == employee.shift:
                return TimeWindow.from_hhmm(shift.start_time, shift.end_time), "catalog"
        for definition in DEFAULT_SHIFTS:
            if definition["code"] == employee.shift:
                return TimeWindow.from_hhmm(definition["start_time"], definition["end_time"]), "default"

    return TimeWindow.from_hhmm(DEFAULT_FLEXIBLE_START, DEFAULT_FLEXIBLE_END), "default"


def get_employee_timing(db: Session, employee: Employee) -> EmployeeTimingOut:
    catalog = db.query(Shift).all()
    window, source = resolve_employee_window(employee, catalog)
    return EmployeeTimingOut(
        employee_id=employee.id,
        shift=employee.shift,
        source=source,
        start_time=window.start_hhmm,
        end_time=window.end_hhmm,
        start_time_12h=format_to_12_hour(window.start),
        end_time_12h=format_to_12_hour(window.end),
        display_time=window.display(),
        duration_minutes=window.duration_minutes(),
        is_overnight=window.is_overnight,
    )


def ensure_initial_admin(db: Session, email: str, password: str) -> Optional[Employee]:
    """
    Create the bootstrap admin when no admin account exists yet.

    Returns:
        The created admin, or None if an admin was already present
    """
    if db.query(Employee).filter(Employee.role == Role.ADMIN.value).first():
        return None

    admin = Employee(
        emp_code=generate_emp_code(db),
        name="System Administrator",
        email=email.lower(),
        phone="",
        password_hash=hash_password(password),
        role=Role.ADMIN.value,
        shift="shift1",
        weekly_off=[],
        active=True,
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    logger.info("Initial admin %s created (%s)", admin.emp_code, admin.email)
    return admin
