"""
Leave request endpoints
"""
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from shiftdesk.core.deps import get_db, get_caller, get_notification_sink, require_admin
from shiftdesk.core.identity import Caller
from shiftdesk.models.employee import Employee
from shiftdesk.models.leave import LeaveStatus
from shiftdesk.schemas.leave import (
    EmergencyLeaveCreate,
    IndexedLeaveOut,
    LeaveCreate,
    LeaveListResponse,
    LeaveOut,
    LeavesByDateResponse,
    LeaveUpdate,
)
from shiftdesk.services import leave_service
from shiftdesk.services.notifications import NotificationSink
from shiftdesk.utils.datetime_utils import today_local

router = APIRouter()


@router.get("", response_model=LeaveListResponse)
async def list_leaves_endpoint(
    employee_id: Optional[int] = Query(None, description="Admin only: narrow to one employee"),
    status_filter: Optional[LeaveStatus] = Query(None, alias="status"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_caller)
):
    """List leaves (admin: all, employee: own)"""
    items = leave_service.list_leaves(db, caller, employee_id, status_filter, skip, limit)
    return LeaveListResponse(items=[LeaveOut.model_validate(leave) for leave in items], total=len(items))


@router.post("", response_model=LeaveOut, status_code=201)
async def apply_leave_endpoint(
    leave_data: LeaveCreate,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_caller),
    sink: NotificationSink = Depends(get_notification_sink)
):
    """Apply for leave; the request starts as pending"""
    return leave_service.apply_leave(db, caller, leave_data, sink)


@router.get("/today", response_model=List[LeaveOut])
async def today_leaves_endpoint(
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_caller)
):
    """Approved leaves covering today"""
    return leave_service.list_leaves_for_day(db, caller, today_local())


@router.get("/bydate", response_model=LeavesByDateResponse)
async def leaves_by_date_endpoint(
    start_date: date = Query(..., description="First day (inclusive)"),
    end_date: date = Query(..., description="Last day (inclusive)"),
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_caller)
):
    """Calendar view: ISO date -> leaves active that day"""
    index = leave_service.leaves_by_date(db, caller, start_date, end_date)
    return LeavesByDateResponse(
        start_date=start_date,
        end_date=end_date,
        days={
            day: [IndexedLeaveOut.model_validate(entry) for entry in entries]
            for day, entries in index.items()
        },
    )


@router.get("/status/{leave_status}", response_model=LeaveListResponse)
async def leaves_by_status_endpoint(
    leave_status: LeaveStatus,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_admin),
    caller: Caller = Depends(get_caller)
):
    """All leaves with the given status (Admin-only)"""
    items = leave_service.list_leaves(db, caller, status_filter=leave_status, limit=1000)
    return LeaveListResponse(items=[LeaveOut.model_validate(leave) for leave in items], total=len(items))


@router.post("/emergency", response_model=LeaveOut, status_code=201)
async def emergency_leave_endpoint(
    leave_data: EmergencyLeaveCreate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_admin),
    caller: Caller = Depends(get_caller),
    sink: NotificationSink = Depends(get_notification_sink)
):
    """Assign an approved emergency leave to an employee (Admin-only)"""
    return leave_service.assign_emergency_leave(db, caller, leave_data, sink)


@router.get("/{leave_id}", response_model=LeaveOut)
async def get_leave_endpoint(
    leave_id: int,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_caller)
):
    return leave_service.get_leave_for_caller(db, caller, leave_id)


@router.put("/{leave_id}", response_model=LeaveOut)
async def update_leave_endpoint(
    leave_id: int,
    leave_data: LeaveUpdate,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_caller),
    sink: NotificationSink = Depends(get_notification_sink)
):
    """
    Update a leave

    Owners may edit while pending; admins may edit any time and approve or
    reject pending leaves via `status`.
    """
    return leave_service.update_leave(db, caller, leave_id, leave_data, sink)


@router.delete("/{leave_id}", status_code=204)
async def delete_leave_endpoint(
    leave_id: int,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_caller)
):
    leave_service.delete_leave(db, caller, leave_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
