"""
Employee management, timing, attendance and daily status endpoints
"""
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from shiftdesk.core.deps import get_db, get_caller, get_notification_sink, require_admin
from shiftdesk.core.identity import Caller
from shiftdesk.models.employee import Employee
from shiftdesk.schemas.attendance import AttendanceMarkRequest, AttendanceOut
from shiftdesk.schemas.common import AssignedShift
from shiftdesk.schemas.employee import (
    EmployeeCreate,
    EmployeeOut,
    EmployeeTimingOut,
    EmployeeTimingUpdate,
    EmployeeUpdate,
)
from shiftdesk.schemas.status import DailyStatusListResponse, EmployeeStatusOut
from shiftdesk.services import attendance_service, employee_service, status_service
from shiftdesk.services.notifications import NotificationSink
from shiftdesk.utils.datetime_utils import today_local

router = APIRouter()


@router.post("", response_model=EmployeeOut, status_code=201)
async def create_employee_endpoint(
    employee_data: EmployeeCreate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_admin)
):
    """Create a new employee (Admin-only)"""
    return employee_service.create_employee(db, employee_data, current_user.id)


@router.get("", response_model=List[EmployeeOut])
async def list_employees_endpoint(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    active_only: Optional[bool] = Query(None),
    shift: Optional[AssignedShift] = Query(None),
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_admin)
):
    """List employees (Admin-only)"""
    employees, _ = employee_service.list_employees(db, skip=skip, limit=limit, active_only=active_only, shift=shift)
    return employees


@router.get("/today/status", response_model=DailyStatusListResponse)
async def today_status_endpoint(
    day: Optional[date] = Query(None, description="Business day; defaults to today"),
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_admin)
):
    """Resolved daily status of every active employee (Admin-only)"""
    day = day or today_local()
    items = status_service.list_daily_statuses(db, day)
    return DailyStatusListResponse(date=day, items=items, total=len(items))


@router.get("/{employee_id}", response_model=EmployeeOut)
async def get_employee_endpoint(
    employee_id: int,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_caller)
):
    """Get an employee (self or admin)"""
    return employee_service.get_employee_for_caller(db, caller, employee_id)


@router.put("/{employee_id}", response_model=EmployeeOut)
async def update_employee_endpoint(
    employee_id: int,
    employee_data: EmployeeUpdate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_admin),
    sink: NotificationSink = Depends(get_notification_sink)
):
    """Update an employee (Admin-only)"""
    return employee_service.update_employee(db, employee_id, employee_data, current_user.id, sink)


@router.delete("/{employee_id}", status_code=204)
async def delete_employee_endpoint(
    employee_id: int,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_admin)
):
    """Delete an employee with their leaves and attendance (Admin-only)"""
    employee_service.delete_employee(db, employee_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{employee_id}/timing", response_model=EmployeeTimingOut)
async def get_employee_timing_endpoint(
    employee_id: int,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_caller)
):
    """Concrete working window (custom timing, catalog shift or default)"""
    employee = employee_service.get_employee_for_caller(db, caller, employee_id)
    return employee_service.get_employee_timing(db, employee)


@router.put("/{employee_id}/timing", response_model=EmployeeOut)
async def update_employee_timing_endpoint(
    employee_id: int,
    timing: EmployeeTimingUpdate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_admin),
    sink: NotificationSink = Depends(get_notification_sink)
):
    """Change shift code and/or custom timing (Admin-only)"""
    return employee_service.update_employee_timing(db, employee_id, timing, current_user.id, sink)


@router.post("/{employee_id}/attendance", response_model=AttendanceOut)
async def mark_attendance_endpoint(
    employee_id: int,
    request: AttendanceMarkRequest,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_admin),
    sink: NotificationSink = Depends(get_notification_sink)
):
    """
    Mark attendance for one day (Admin-only)

    Re-marking the same day overwrites status, shift, notes and marker of the
    existing record.
    """
    return attendance_service.upsert_attendance(
        db,
        employee_id,
        request.date or today_local(),
        request.status,
        sink,
        notes=request.notes,
        marked_by_id=current_user.id,
        check_in=request.check_in,
        check_out=request.check_out,
        total_hours=request.total_hours,
    )


@router.get("/{employee_id}/attendance", response_model=List[AttendanceOut])
async def list_attendance_endpoint(
    employee_id: int,
    from_date: Optional[date] = Query(None),
    to_date: Optional[date] = Query(None),
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_caller)
):
    """Attendance history (self or admin), newest first"""
    employee = employee_service.get_employee_for_caller(db, caller, employee_id)
    return attendance_service.list_attendance_for_employee(db, employee.id, from_date, to_date)


@router.get("/{employee_id}/status", response_model=EmployeeStatusOut)
async def employee_status_endpoint(
    employee_id: int,
    day: Optional[date] = Query(None, description="Business day; defaults to today"),
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_caller)
):
    """Resolved daily status for one employee (self or admin)"""
    return status_service.get_employee_status(db, caller, employee_id, day or today_local())
