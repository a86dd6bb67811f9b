"""
Attendance service - one attendance record per employee per business day
"""
import logging
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional, Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shiftdesk.core.constants import FLEXIBLE_ATTENDANCE_SHIFT, FLEXIBLE_SHIFT
from shiftdesk.models.attendance import AttendanceRecord, AttendanceStatus
from shiftdesk.models.employee import Employee
from shiftdesk.services.audit_service import log_audit
from shiftdesk.services.employee_service import get_employee
from shiftdesk.services.notifications import NotificationSink
from shiftdesk.utils.datetime_utils import ensure_utc, to_business_day
from shiftdesk.utils.enums import enum_to_str

logger = logging.getLogger(__name__)


def attendance_shift_for(employee: Employee) -> str:
    """Shift code stored on attendance; flexible employees are recorded against shift1"""
    if employee.shift == FLEXIBLE_SHIFT:
        return FLEXIBLE_ATTENDANCE_SHIFT
    return employee.shift


def get_attendance(db: Session, employee_id: int, day: date) -> Optional[AttendanceRecord]:
    return (
        db.query(AttendanceRecord)
        .filter(AttendanceRecord.employee_id == employee_id, AttendanceRecord.date == day)
        .first()
    )


def list_attendance_for_day(db: Session, day: date) -> List[AttendanceRecord]:
    return (
        db.query(AttendanceRecord)
        .filter(AttendanceRecord.date == day)
        .order_by(AttendanceRecord.employee_id)
        .all()
    )


def list_attendance_for_employee(
    db: Session,
    employee_id: int,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
) -> List[AttendanceRecord]:
    query = db.query(AttendanceRecord).filter(AttendanceRecord.employee_id == employee_id)
    if from_date:
        query = query.filter(AttendanceRecord.date >= from_date)
    if to_date:
        query = query.filter(AttendanceRecord.date <= to_date)
    return query.order_by(AttendanceRecord.date.desc()).all()


def _apply_fields(
    record: AttendanceRecord,
    shift_code: str,
    status: str,
    notes: str,
    marked_by_id: Optional[int],
    check_in: Optional[datetime],
    check_out: Optional[datetime],
    total_hours: Optional[Decimal],
) -> None:
    record.shift = shift_code
    record.status = status
    record.notes = notes
    record.marked_by_id = marked_by_id
    # Timing fields are only touched when supplied
    if check_in is not None:
        record.check_in = ensure_utc(check_in)
    if check_out is not None:
        record.check_out = ensure_utc(check_out)
    if total_hours is not None:
        record.total_hours = total_hours


def upsert_attendance(
    db: Session,
    employee_id: int,
    day: Union[date, datetime],
    status: Union[AttendanceStatus, str],
    sink: NotificationSink,
    notes: str = "",
    marked_by_id: Optional[int] = None,
    shift_code: Optional[str] = None,
    check_in: Optional[datetime] = None,
    check_out: Optional[datetime] = None,
    total_hours: Optional[Decimal] = None,
) -> AttendanceRecord:
    """
    Create or overwrite the attendance record for (employee, day).

    `day` is truncated to its business day, so any two clock times on the same
    day address the same record. An existing record keeps its check-in,
    check-out and total hours unless new values are supplied. When a
    concurrent insert wins the unique (employee_id, date) constraint, this
    call re-reads that row and applies its own values on top.

    Args:
        shift_code: shift at time of marking; defaults to the employee's
            assigned shift (shift1 for flexible employees)

    Raises:
        EmployeeNotFound: if employee_id does not exist
    """
    employee = get_employee(db, employee_id)
    business_day = to_business_day(day)
    status_value = enum_to_str(status)
    shift_code = shift_code or attendance_shift_for(employee)
    fields = dict(
        shift_code=shift_code,
        status=status_value,
        notes=notes or "",
        marked_by_id=marked_by_id,
        check_in=check_in,
        check_out=check_out,
        total_hours=total_hours,
    )

    record = get_attendance(db, employee.id, business_day)
    created = record is None
    if created:
        record = AttendanceRecord(employee_id=employee.id, date=business_day, total_hours=Decimal("0"))
        _apply_fields(record, **fields)
        db.add(record)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            record = get_attendance(db, employee.id, business_day)
            if record is None:
                raise
            logger.info(
                "Attendance for employee %s on %s was inserted concurrently; updating it",
                employee.id, business_day,
            )
            created = False
            _apply_fields(record, **fields)
            db.commit()
    else:
        _apply_fields(record, **fields)
        db.commit()

    db.refresh(record)

    log_audit(
        db=db,
        actor_id=marked_by_id,
        action="ATTENDANCE_MARK",
        entity_type="attendance_records",
        entity_id=record.id,
        meta={
            "employee_id": employee.id,
            "date": business_day,
            "status": status_value,
            "shift": shift_code,
            "created": created,
        }
    )
    sink.on_attendance_marked(record)
    return record
