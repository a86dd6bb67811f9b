"""
Database models
"""
from shiftdesk.models.employee import Employee, Role
from shiftdesk.models.shift import Shift
from shiftdesk.models.leave import LeaveRequest, LeaveType, LeaveStatus, LEAVE_TRANSITIONS
from shiftdesk.models.attendance import AttendanceRecord, AttendanceStatus
from shiftdesk.models.audit_log import AuditLog

__all__ = [
    "Employee",
    "Role",
    "Shift",
    "LeaveRequest",
    "LeaveType",
    "LeaveStatus",
    "LEAVE_TRANSITIONS",
    "AttendanceRecord",
    "AttendanceStatus",
    "AuditLog",
]
