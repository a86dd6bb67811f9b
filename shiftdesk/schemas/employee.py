"""
Employee schemas
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from shiftdesk.models.employee import Role
from shiftdesk.schemas.common import AssignedShift, Weekday, check_hhmm, check_weekly_off


class _TimingFields(BaseModel):
    custom_start: Optional[str] = Field(None, description="Custom start time (HH:MM)")
    custom_end: Optional[str] = Field(None, description="Custom end time (HH:MM)")

    @field_validator("custom_start", "custom_end")
    @classmethod
    def validate_time(cls, v: Optional[str]) -> Optional[str]:
        return check_hhmm(v)

    @model_validator(mode="after")
    def timing_pair(self):
        if (self.custom_start is None) != (self.custom_end is None):
            raise ValueError("custom_start and custom_end must be given together")
        return self


class EmployeeCreate(_TimingFields):
    """Schema for creating an employee"""
    emp_code: Optional[str] = Field(None, description="Employee code; generated as EMP#### when omitted")
    name: str = Field(..., min_length=1, description="Employee name")
    email: EmailStr = Field(..., description="Login email (unique)")
    phone: str = Field(..., min_length=1, description="Phone number")
    password: str = Field(..., min_length=6, max_length=72, description="Initial password")
    role: Role = Field(default=Role.EMPLOYEE, description="Account role")
    shift: AssignedShift = Field(default="shift1", description="Assigned shift code or 'flexible'")
    weekly_off: List[Weekday] = Field(default_factory=list, description="Weekly-off days")
    active: bool = Field(default=True, description="Employee active status")

    @field_validator("name", "password", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("weekly_off")
    @classmethod
    def validate_weekly_off(cls, v):
        return check_weekly_off(v)


class EmployeeUpdate(_TimingFields):
    """Schema for updating an employee; omitted fields are left unchanged"""
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    password: Optional[str] = Field(None, description="New password; blank keeps the current one")
    role: Optional[Role] = None
    shift: Optional[AssignedShift] = None
    weekly_off: Optional[List[Weekday]] = None
    active: Optional[bool] = None

    @field_validator("weekly_off")
    @classmethod
    def validate_weekly_off(cls, v):
        return check_weekly_off(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        v = v.strip()
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters")
        if len(v.encode("utf-8")) > 72:
            raise ValueError("Password cannot be longer than 72 bytes when encoded as UTF-8")
        return v


class ProfileUpdate(BaseModel):
    """Fields an employee may change on their own account"""
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, min_length=1)

    @field_validator("name", "phone", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v


class EmployeeTimingUpdate(_TimingFields):
    """Schema for PUT /employees/{id}/timing"""
    shift: Optional[AssignedShift] = None


class EmployeeOut(BaseModel):
    """Schema for employee output"""
    id: int
    emp_code: str
    name: str
    email: str
    phone: str
    role: str
    shift: str
    custom_start: Optional[str] = None
    custom_end: Optional[str] = None
    weekly_off: List[str] = []
    active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class EmployeeTimingOut(BaseModel):
    """Concrete working window resolved for an employee"""
    employee_id: int
    shift: str
    source: str = Field(..., description="custom, catalog or default")
    start_time: str
    end_time: str
    start_time_12h: str
    end_time_12h: str
    display_time: str
    duration_minutes: int
    is_overnight: bool
