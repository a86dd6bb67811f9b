"""
Shift service - shift catalog management and current-shift lookup
"""
import logging
from typing import List, Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from shiftdesk.core.constants import DEFAULT_SHIFTS, FLEXIBLE_SHIFT
from shiftdesk.core.exceptions import ShiftInUse, ShiftNotFound
from shiftdesk.models.employee import Employee
from shiftdesk.models.shift import Shift
from shiftdesk.schemas.shift import ShiftCreate, ShiftUpdate
from shiftdesk.services.audit_service import log_audit
from shiftdesk.services.shift_resolver import resolve_current, sort_by_start
from shiftdesk.services.time_window import TimeWindow

logger = logging.getLogger(__name__)


def catalog_windows(shifts: List[Shift]) -> List[Tuple[Shift, TimeWindow]]:
    """(shift, window) pairs in ascending start-time order."""
    return sort_by_start(
        (shift, TimeWindow.from_hhmm(shift.start_time, shift.end_time)) for shift in shifts
    )


def list_shift_definitions(db: Session, active_only: bool = False) -> List[Shift]:
    """Shift catalog sorted by start time (ties by id)"""
    query = db.query(Shift)
    if active_only:
        query = query.filter(Shift.is_active == True)  # noqa: E712
    return [shift for shift, _ in catalog_windows(query.order_by(Shift.id).all())]


def get_shift(db: Session, shift_id: int) -> Shift:
    shift = db.get(Shift, shift_id)
    if shift is None:
        raise ShiftNotFound(f"Shift {shift_id} not found")
    return shift


def _ensure_unique(db: Session, field, value: str, label: str, exclude_id: Optional[int] = None) -> None:
    query = db.query(Shift).filter(field == value)
    if exclude_id is not None:
        query = query.filter(Shift.id != exclude_id)
    if query.first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Shift with {label} '{value}' already exists"
        )


def create_shift(db: Session, shift_data: ShiftCreate, actor_id: int) -> Shift:
    """
    Create a shift definition

    Raises:
        InvalidTimeRange: if a time is not valid HH:MM
        HTTPException: if the name or code is already used
    """
    window = TimeWindow.from_hhmm(shift_data.start_time, shift_data.end_time)
    _ensure_unique(db, Shift.name, shift_data.name, "name")
    _ensure_unique(db, Shift.code, shift_data.code, "code")

    shift = Shift(
        name=shift_data.name,
        code=shift_data.code,
        start_time=window.start_hhmm,
        end_time=window.end_hhmm,
        description=shift_data.description,
        color=shift_data.color,
        is_active=shift_data.is_active,
    )
    db.add(shift)
    db.commit()
    db.refresh(shift)

    log_audit(
        db=db,
        actor_id=actor_id,
        action="CREATE",
        entity_type="shifts",
        entity_id=shift.id,
        meta={"code": shift.code, "start_time": shift.start_time, "end_time": shift.end_time}
    )
    return shift


def update_shift(db: Session, shift_id: int, shift_data: ShiftUpdate, actor_id: int) -> Shift:
    shift = get_shift(db, shift_id)
    changes = shift_data.model_dump(exclude_unset=True, exclude_none=True)

    window = TimeWindow.from_hhmm(
        changes.get("start_time", shift.start_time),
        changes.get("end_time", shift.end_time),
    )
    if "name" in changes:
        _ensure_unique(db, Shift.name, changes["name"], "name", exclude_id=shift.id)

    for field, value in changes.items():
        setattr(shift, field, value)
    shift.start_time = window.start_hhmm
    shift.end_time = window.end_hhmm

    db.commit()
    db.refresh(shift)

    log_audit(
        db=db,
        actor_id=actor_id,
        action="UPDATE",
        entity_type="shifts",
        entity_id=shift.id,
        meta=changes
    )
    return shift


def delete_shift(db: Session, shift_id: int, actor_id: int) -> None:
    """
    Delete a shift definition

    Raises:
        ShiftInUse: if any employee is assigned to the shift's code
    """
    shift = get_shift(db, shift_id)
    assigned = db.query(Employee).filter(Employee.shift == shift.code).count()
    if assigned:
        raise ShiftInUse(
            f"Cannot delete shift '{shift.name}': {assigned} employee(s) are assigned to it"
        )

    code = shift.code
    db.delete(shift)
    db.commit()

    log_audit(
        db=db,
        actor_id=actor_id,
        action="DELETE",
        entity_type="shifts",
        entity_id=shift_id,
        meta={"code": code}
    )


def initialize_default_shifts(db: Session, actor_id: Optional[int] = None) -> List[Shift]:
    """
    Seed the default three-shift catalog

    Raises:
        HTTPException: if any shift already exists
    """
    if db.query(Shift).count():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Shifts already initialized"
        )

    shifts = [Shift(**definition, is_active=True) for definition in DEFAULT_SHIFTS]
    db.add_all(shifts)
    db.commit()
    for shift in shifts:
        db.refresh(shift)

    log_audit(
        db=db,
        actor_id=actor_id,
        action="INITIALIZE",
        entity_type="shifts",
        meta={"codes": [shift.code for shift in shifts]}
    )
    logger.info("Default shift catalog created (%d shifts)", len(shifts))
    return list_shift_definitions(db)


def get_current_shift(db: Session, now_minutes: int) -> Optional[Shift]:
    """Active shift whose window contains now_minutes, or None when the catalog has a gap"""
    return resolve_current(
        catalog_windows(db.query(Shift).filter(Shift.is_active == True).order_by(Shift.id).all()),  # noqa: E712
        now_minutes,
    )


def list_current_shift_employees(
    db: Session,
    now_minutes: int,
) -> Tuple[Optional[Shift], List[Employee]]:
    """
    Active employees working at now_minutes: those assigned to the current
    shift plus every flexible employee.
    """
    current = get_current_shift(db, now_minutes)
    codes = [FLEXIBLE_SHIFT]
    if current is not None:
        codes.append(current.code)

    employees = (
        db.query(Employee)
        .filter(Employee.active == True, Employee.shift.in_(codes))  # noqa: E712
        .order_by(Employee.name, Employee.id)
        .all()
    )
    return current, employees
