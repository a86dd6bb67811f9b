"""
Shift catalog endpoints
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from shiftdesk.core.deps import get_db, get_current_user, require_admin
from shiftdesk.models.employee import Employee
from shiftdesk.schemas.employee import EmployeeOut
from shiftdesk.schemas.shift import (
    CurrentShiftEmployeesOut,
    CurrentShiftOut,
    ShiftCreate,
    ShiftOut,
    ShiftUpdate,
)
from shiftdesk.services import shift_service
from shiftdesk.utils.datetime_utils import local_minutes
from shiftdesk.utils.time_formatter import minutes_to_hhmm

router = APIRouter()

AT_QUERY = Query(None, description="Wall-clock time HH:MM; defaults to now in the business timezone")


@router.get("", response_model=List[ShiftOut])
async def list_shifts_endpoint(
    active_only: bool = Query(False),
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    """List shift definitions sorted by start time"""
    return [ShiftOut.from_model(shift) for shift in shift_service.list_shift_definitions(db, active_only)]


@router.post("/initialize", response_model=List[ShiftOut], status_code=201)
async def initialize_shifts_endpoint(
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_admin)
):
    """Create the default three-shift catalog (Admin-only)"""
    return [ShiftOut.from_model(shift) for shift in shift_service.initialize_default_shifts(db, current_user.id)]


@router.get("/current", response_model=CurrentShiftOut)
async def current_shift_endpoint(
    at: Optional[str] = AT_QUERY,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    """Shift running at `at`; `shift` is null when no active shift covers it"""
    minutes = local_minutes(at)
    shift = shift_service.get_current_shift(db, minutes)
    return CurrentShiftOut(
        at=minutes_to_hhmm(minutes),
        shift=ShiftOut.from_model(shift) if shift is not None else None,
    )


@router.get("/current/employees", response_model=CurrentShiftEmployeesOut)
async def current_shift_employees_endpoint(
    at: Optional[str] = AT_QUERY,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    """Active employees on the current shift plus flexible employees"""
    minutes = local_minutes(at)
    shift, employees = shift_service.list_current_shift_employees(db, minutes)
    return CurrentShiftEmployeesOut(
        at=minutes_to_hhmm(minutes),
        shift=ShiftOut.from_model(shift) if shift is not None else None,
        employees=[EmployeeOut.model_validate(employee) for employee in employees],
        total=len(employees),
    )


@router.get("/{shift_id}", response_model=ShiftOut)
async def get_shift_endpoint(
    shift_id: int,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    return ShiftOut.from_model(shift_service.get_shift(db, shift_id))


@router.post("", response_model=ShiftOut, status_code=201)
async def create_shift_endpoint(
    shift_data: ShiftCreate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_admin)
):
    """Create a shift definition (Admin-only); end before start means overnight"""
    return ShiftOut.from_model(shift_service.create_shift(db, shift_data, current_user.id))


@router.put("/{shift_id}", response_model=ShiftOut)
async def update_shift_endpoint(
    shift_id: int,
    shift_data: ShiftUpdate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_admin)
):
    """Update a shift definition (Admin-only)"""
    return ShiftOut.from_model(shift_service.update_shift(db, shift_id, shift_data, current_user.id))


@router.delete("/{shift_id}", status_code=204)
async def delete_shift_endpoint(
    shift_id: int,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_admin)
):
    """Delete a shift definition (Admin-only); refused while employees use it"""
    shift_service.delete_shift(db, shift_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
