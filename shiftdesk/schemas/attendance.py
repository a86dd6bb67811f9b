"""
Attendance schemas
"""
from datetime import date as date_type, datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from shiftdesk.models.attendance import AttendanceStatus


class AttendanceMarkRequest(BaseModel):
    """Schema for marking an employee's attendance for one day"""
    date: Optional[date_type] = Field(None, description="Business day; defaults to today")
    status: AttendanceStatus = Field(..., description="Attendance status")
    notes: str = Field(default="", description="Optional notes")
    check_in: Optional[datetime] = Field(None, description="Check-in time; left unchanged when omitted")
    check_out: Optional[datetime] = Field(None, description="Check-out time; left unchanged when omitted")
    total_hours: Optional[Decimal] = Field(None, ge=0, le=24, description="Worked hours; left unchanged when omitted")


class AttendanceOut(BaseModel):
    """Schema for attendance output"""
    id: int
    employee_id: int
    date: date_type
    shift: str
    status: str
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    total_hours: Decimal
    notes: str = ""
    marked_by_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
