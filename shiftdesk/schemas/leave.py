"""
Leave schemas
"""
from datetime import date, datetime
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator
from shiftdesk.models.leave import LeaveStatus, LeaveType


class LeaveCreate(BaseModel):
    """Schema for applying leave; always stored as pending"""
    start_date: date = Field(..., description="First day of leave")
    end_date: date = Field(..., description="Last day of leave (inclusive)")
    reason: str = Field(..., min_length=1, description="Reason for leave")
    leave_type: LeaveType = Field(default=LeaveType.PLANNED, description="Type of leave")
    notes: str = Field(default="", description="Optional notes")

    @model_validator(mode="after")
    def check_dates(self) -> "LeaveCreate":
        if self.start_date > self.end_date:
            raise ValueError("start_date must be less than or equal to end_date")
        return self


class LeaveUpdate(BaseModel):
    """
    Schema for updating a leave. Only admins may set status; the owner may
    change the other fields while the leave is pending.
    """
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    reason: Optional[str] = Field(None, min_length=1)
    leave_type: Optional[LeaveType] = None
    notes: Optional[str] = None
    status: Optional[LeaveStatus] = None

    @model_validator(mode="after")
    def check_dates(self) -> "LeaveUpdate":
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date must be less than or equal to end_date")
        return self


class EmergencyLeaveCreate(BaseModel):
    """Admin-assigned emergency leave; created approved"""
    employee_id: int = Field(..., description="Employee the leave is assigned to")
    start_date: date
    end_date: date
    reason: str = Field(..., min_length=1)
    notes: str = Field(default="")

    @model_validator(mode="after")
    def check_dates(self) -> "EmergencyLeaveCreate":
        if self.start_date > self.end_date:
            raise ValueError("start_date must be less than or equal to end_date")
        return self


class LeaveOut(BaseModel):
    """Schema for leave output"""
    id: int
    employee_id: int
    employee_name: Optional[str] = None
    approver_id: Optional[int] = None
    start_date: date
    end_date: date
    reason: str
    leave_type: LeaveType
    status: LeaveStatus
    notes: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class LeaveListResponse(BaseModel):
    items: List[LeaveOut]
    total: int


class IndexedLeaveOut(BaseModel):
    """One leave as seen on one calendar day"""
    leave_id: int
    employee_id: int
    employee_name: Optional[str] = None
    reason: str
    type: str
    status: str
    start_date: date
    end_date: date
    notes: str
    is_spanning: bool

    model_config = ConfigDict(from_attributes=True)


class LeavesByDateResponse(BaseModel):
    start_date: date
    end_date: date
    days: Dict[str, List[IndexedLeaveOut]] = Field(..., description="ISO date -> leaves active that day")
