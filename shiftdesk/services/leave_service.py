"""
Leave service - leave requests, status transitions and calendar views
"""
import logging
from datetime import date
from typing import Dict, List, Optional

from sqlalchemy.orm import Session, joinedload

from shiftdesk.core.exceptions import (
    InvalidLeaveTransition,
    InvalidRange,
    LeaveNotFound,
    PermissionDenied,
)
from shiftdesk.core.identity import Caller, can_access_employee, is_admin
from shiftdesk.models.leave import LEAVE_TRANSITIONS, LeaveRequest, LeaveStatus, LeaveType
from shiftdesk.schemas.leave import EmergencyLeaveCreate, LeaveCreate, LeaveUpdate
from shiftdesk.services.audit_service import log_audit
from shiftdesk.services.employee_service import get_employee
from shiftdesk.services.leave_index import IndexedLeave, build_leave_index
from shiftdesk.services.notifications import NotificationSink
from shiftdesk.utils.enums import enum_to_str

logger = logging.getLogger(__name__)


def _leave_query(db: Session):
    return db.query(LeaveRequest).options(joinedload(LeaveRequest.employee))


def _overlapping(query, range_start: date, range_end: date):
    return query.filter(
        LeaveRequest.start_date <= range_end,
        LeaveRequest.end_date >= range_start,
    )


def list_leaves(
    db: Session,
    caller: Caller,
    employee_id: Optional[int] = None,
    status_filter: Optional[LeaveStatus] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[LeaveRequest]:
    """
    List leave requests, newest first.

    Admins see every leave (optionally narrowed to one employee); employees
    only ever see their own.
    """
    query = _leave_query(db)
    if not is_admin(caller):
        query = query.filter(LeaveRequest.employee_id == caller.employee_id)
    elif employee_id is not None:
        query = query.filter(LeaveRequest.employee_id == employee_id)
    if status_filter is not None:
        query = query.filter(LeaveRequest.status == status_filter)

    return (
        query.order_by(LeaveRequest.created_at.desc(), LeaveRequest.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def get_leave(db: Session, leave_id: int) -> LeaveRequest:
    leave = _leave_query(db).filter(LeaveRequest.id == leave_id).first()
    if leave is None:
        raise LeaveNotFound(f"Leave {leave_id} not found")
    return leave


def get_leave_for_caller(db: Session, caller: Caller, leave_id: int) -> LeaveRequest:
    leave = get_leave(db, leave_id)
    if not can_access_employee(caller, leave.employee_id):
        raise PermissionDenied("You can only view your own leaves")
    return leave


def apply_leave(
    db: Session,
    caller: Caller,
    leave_data: LeaveCreate,
    sink: NotificationSink,
) -> LeaveRequest:
    """
    Apply for leave on the caller's own behalf (creates a PENDING request)

    Raises:
        EmployeeNotFound: if the caller's employee record no longer exists
    """
    employee = get_employee(db, caller.employee_id)

    leave = LeaveRequest(
        employee_id=employee.id,
        start_date=leave_data.start_date,
        end_date=leave_data.end_date,
        reason=leave_data.reason,
        leave_type=leave_data.leave_type,
        status=LeaveStatus.PENDING,
        notes=leave_data.notes,
    )
    db.add(leave)
    db.commit()
    db.refresh(leave)

    log_audit(
        db=db,
        actor_id=employee.id,
        action="LEAVE_APPLY",
        entity_type="leave_requests",
        entity_id=leave.id,
        meta={
            "leave_type": leave.leave_type,
            "start_date": leave.start_date,
            "end_date": leave.end_date,
            "status": LeaveStatus.PENDING,
        }
    )
    sink.on_new_leave(leave)
    return leave


def check_transition(current: LeaveStatus, requested: LeaveStatus) -> bool:
    """
    Validate a status change.

    Returns:
        True if the status changes, False for a same-status no-op

    Raises:
        InvalidLeaveTransition: for anything other than pending -> approved|rejected
    """
    current = LeaveStatus(enum_to_str(current))
    requested = LeaveStatus(enum_to_str(requested))
    if current == requested:
        return False
    if requested not in LEAVE_TRANSITIONS[current]:
        raise InvalidLeaveTransition(
            f"Cannot change leave status from {current.value} to {requested.value}"
        )
    return True


def update_leave(
    db: Session,
    caller: Caller,
    leave_id: int,
    leave_data: LeaveUpdate,
    sink: NotificationSink,
) -> LeaveRequest:
    """
    Update a leave request.

    The owner may edit dates, reason, type and notes while the leave is
    pending. Admins may edit at any time and are the only ones who may change
    status; the admin who changes it is recorded as approver.

    Raises:
        LeaveNotFound, PermissionDenied, InvalidLeaveTransition, InvalidRange
    """
    leave = get_leave(db, leave_id)
    admin = is_admin(caller)

    if not admin:
        if leave.employee_id != caller.employee_id:
            raise PermissionDenied("You can only edit your own leaves")
        if enum_to_str(leave.status) != LeaveStatus.PENDING.value:
            raise PermissionDenied("Only pending leaves can be edited")
        if leave_data.status is not None:
            raise PermissionDenied("Only admins can change leave status")

    changes = leave_data.model_dump(exclude_unset=True, exclude_none=True)
    requested_status = changes.pop("status", None)

    new_start = changes.get("start_date", leave.start_date)
    new_end = changes.get("end_date", leave.end_date)
    if new_start > new_end:
        raise InvalidRange("start_date must be less than or equal to end_date")

    status_changed = False
    previous_status = enum_to_str(leave.status)
    if requested_status is not None:
        status_changed = check_transition(leave.status, requested_status)

    for field, value in changes.items():
        setattr(leave, field, value)
    if status_changed:
        leave.status = requested_status
        leave.approver_id = caller.employee_id

    db.commit()
    db.refresh(leave)

    log_audit(
        db=db,
        actor_id=caller.employee_id,
        action="LEAVE_STATUS_CHANGE" if status_changed else "LEAVE_UPDATE",
        entity_type="leave_requests",
        entity_id=leave.id,
        meta={
            "fields": sorted(changes.keys()),
            "from_status": previous_status,
            "to_status": enum_to_str(leave.status),
        }
    )

    if status_changed:
        logger.info("Leave %s %s -> %s by %s", leave.id, previous_status, enum_to_str(leave.status), caller.employee_id)
        sink.on_leave_status_changed(leave)
    return leave


def delete_leave(db: Session, caller: Caller, leave_id: int) -> None:
    """Owner may delete while pending; admins may delete any leave"""
    leave = get_leave(db, leave_id)
    if not is_admin(caller):
        if leave.employee_id != caller.employee_id:
            raise PermissionDenied("You can only delete your own leaves")
        if enum_to_str(leave.status) != LeaveStatus.PENDING.value:
            raise PermissionDenied("Only pending leaves can be deleted")

    meta = {
        "employee_id": leave.employee_id,
        "start_date": leave.start_date,
        "end_date": leave.end_date,
        "status": leave.status,
    }
    db.delete(leave)
    db.commit()

    log_audit(
        db=db,
        actor_id=caller.employee_id,
        action="DELETE",
        entity_type="leave_requests",
        entity_id=leave_id,
        meta=meta
    )


def assign_emergency_leave(
    db: Session,
    caller: Caller,
    leave_data: EmergencyLeaveCreate,
    sink: NotificationSink,
) -> LeaveRequest:
    """
    Record an emergency leave for an employee; it is approved immediately

    Raises:
        PermissionDenied: if the caller is not an admin
        EmployeeNotFound: if the target employee does not exist
    """
    if not is_admin(caller):
        raise PermissionDenied("Only admins can assign emergency leave")
    employee = get_employee(db, leave_data.employee_id)

    leave = LeaveRequest(
        employee_id=employee.id,
        approver_id=caller.employee_id,
        start_date=leave_data.start_date,
        end_date=leave_data.end_date,
        reason=leave_data.reason,
        leave_type=LeaveType.EMERGENCY,
        status=LeaveStatus.APPROVED,
        notes=leave_data.notes,
    )
    db.add(leave)
    db.commit()
    db.refresh(leave)

    log_audit(
        db=db,
        actor_id=caller.employee_id,
        action="EMERGENCY_LEAVE_ASSIGN",
        entity_type="leave_requests",
        entity_id=leave.id,
        meta={"employee_id": employee.id, "start_date": leave.start_date, "end_date": leave.end_date}
    )
    sink.on_emergency_leave_assigned(leave)
    return leave


def list_approved_leaves_overlapping(
    db: Session,
    range_start: date,
    range_end: Optional[date] = None,
    employee_id: Optional[int] = None,
) -> List[LeaveRequest]:
    """Approved leaves intersecting [range_start, range_end] (a single day when range_end is omitted)"""
    range_end = range_end or range_start
    query = _overlapping(_leave_query(db), range_start, range_end).filter(
        LeaveRequest.status == LeaveStatus.APPROVED
    )
    if employee_id is not None:
        query = query.filter(LeaveRequest.employee_id == employee_id)
    return query.order_by(LeaveRequest.start_date, LeaveRequest.id).all()


def list_leaves_for_day(db: Session, caller: Caller, day: date) -> List[LeaveRequest]:
    """Approved leaves covering `day`, scoped to the caller"""
    employee_id = None if is_admin(caller) else caller.employee_id
    return list_approved_leaves_overlapping(db, day, employee_id=employee_id)


def leaves_by_date(
    db: Session,
    caller: Caller,
    range_start: date,
    range_end: date,
) -> Dict[str, List[IndexedLeave]]:
    """
    Per-day calendar of every leave (any status) overlapping the range.
    Non-admins only see their own leaves.

    Raises:
        InvalidRange: if range_start > range_end
    """
    if range_start > range_end:
        raise InvalidRange(
            f"start_date {range_start.isoformat()} is after end_date {range_end.isoformat()}"
        )

    query = _overlapping(_leave_query(db), range_start, range_end)
    if not is_admin(caller):
        query = query.filter(LeaveRequest.employee_id == caller.employee_id)

    leaves = query.order_by(LeaveRequest.start_date, LeaveRequest.id).all()
    return build_leave_index(leaves, range_start, range_end)


def count_pending_leaves(db: Session) -> int:
    return db.query(LeaveRequest).filter(LeaveRequest.status == LeaveStatus.PENDING).count()
