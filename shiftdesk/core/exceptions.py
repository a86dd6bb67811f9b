"""
Domain exceptions

Each carries the HTTP status the API layer answers with; see
shiftdesk.core.errors.shiftdesk_exception_handler.
"""
from fastapi import status


class ShiftDeskError(Exception):
    """Base class for business rule violations"""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_detail: str = "Request could not be processed"

    def __init__(self, detail: str = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class InvalidTimeRange(ShiftDeskError):
    """A time window built from out-of-bounds minute values or unparsable HH:MM text"""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_detail = "Time must be within 00:00 and 23:59"


class InvalidRange(ShiftDeskError):
    """A calendar range whose start is after its end"""

    default_detail = "start_date must be less than or equal to end_date"


class EmployeeNotFound(ShiftDeskError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Employee not found"


class ShiftNotFound(ShiftDeskError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Shift not found"


class LeaveNotFound(ShiftDeskError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Leave not found"


class ShiftInUse(ShiftDeskError):
    """Deleting a shift that employees are still assigned to"""

    default_detail = "Cannot delete shift while employees are assigned to it"


class InvalidLeaveTransition(ShiftDeskError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Leave status can only move from pending to approved or rejected"


class PermissionDenied(ShiftDeskError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Not authorized to perform this action"
