"""
Status service - loads employees, leaves and attendance for a day and runs
them through the daily status resolver
"""
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from shiftdesk.core.identity import Caller
from shiftdesk.models.employee import Employee
from shiftdesk.schemas.shift import ShiftOut
from shiftdesk.schemas.status import DashboardOut, EmployeeStatusOut
from shiftdesk.services.attendance_service import get_attendance, list_attendance_for_day
from shiftdesk.services.daily_status import resolve_daily_status, summarize
from shiftdesk.services.employee_service import get_employee_for_caller, list_active_employees
from shiftdesk.services.leave_service import count_pending_leaves, list_approved_leaves_overlapping
from shiftdesk.services.shift_service import get_current_shift


def _status_out(employee: Employee, day: date, resolved) -> EmployeeStatusOut:
    return EmployeeStatusOut(
        employee_id=employee.id,
        emp_code=employee.emp_code,
        name=employee.name,
        shift=employee.shift,
        date=day,
        status=resolved.status.value,
        source=resolved.source.value,
        reason=resolved.reason,
        leave_id=resolved.leave_id,
        attendance_id=resolved.attendance_id,
        status_text=resolved.status_text,
        status_color=resolved.status_color,
    )


def list_daily_statuses(db: Session, day: date) -> List[EmployeeStatusOut]:
    """Resolved status of every active employee for `day`"""
    employees = list_active_employees(db)
    leaves = list_approved_leaves_overlapping(db, day)
    attendance = {record.employee_id: record for record in list_attendance_for_day(db, day)}

    return [
        _status_out(
            employee,
            day,
            resolve_daily_status(employee, day, leaves, attendance.get(employee.id)),
        )
        for employee in employees
    ]


def get_employee_status(db: Session, caller: Caller, employee_id: int, day: date) -> EmployeeStatusOut:
    """
    Raises:
        PermissionDenied: if a non-admin asks for someone else
        EmployeeNotFound: if the employee does not exist
    """
    employee = get_employee_for_caller(db, caller, employee_id)
    leaves = list_approved_leaves_overlapping(db, day, employee_id=employee.id)
    resolved = resolve_daily_status(employee, day, leaves, get_attendance(db, employee.id, day))
    return _status_out(employee, day, resolved)


def build_dashboard(db: Session, day: date, now_minutes: Optional[int]) -> DashboardOut:
    """Per-status counts for `day` plus the shift running at now_minutes"""
    statuses = list_daily_statuses(db, day)
    counts = {key: 0 for key in summarize([])}
    for item in statuses:
        counts[item.status] += 1

    current = get_current_shift(db, now_minutes) if now_minutes is not None else None
    return DashboardOut(
        date=day,
        total_employees=len(statuses),
        counts=counts,
        pending_leaves=count_pending_leaves(db),
        current_shift=ShiftOut.from_model(current) if current is not None else None,
        statuses=statuses,
    )
