"""
Shift catalog schemas
"""
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from shiftdesk.schemas.common import ShiftCode, check_hhmm
from shiftdesk.schemas.employee import EmployeeOut
from shiftdesk.services.time_window import TimeWindow
from shiftdesk.utils.time_formatter import format_to_12_hour


class ShiftCreate(BaseModel):
    """Schema for creating a shift definition"""
    name: str = Field(..., min_length=1, description="Display name")
    code: ShiftCode = Field(..., description="Shift code (shift1..shift4)")
    start_time: str = Field(..., description="Start time (HH:MM, 24-hour)")
    end_time: str = Field(..., description="End time (HH:MM); earlier than start for overnight shifts")
    description: str = Field(default="", description="Free-text description")
    color: str = Field(default="#3b82f6", description="Display color")
    is_active: bool = Field(default=True)

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        return check_hhmm(v)


class ShiftUpdate(BaseModel):
    """Schema for updating a shift; omitted fields are left unchanged"""
    name: Optional[str] = Field(None, min_length=1)
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, v: Optional[str]) -> Optional[str]:
        return check_hhmm(v)


class ShiftOut(BaseModel):
    """Shift definition with derived display fields"""
    id: int
    name: str
    code: str
    start_time: str
    end_time: str
    description: str
    color: str
    is_active: bool
    start_time_12h: str
    end_time_12h: str
    display_time: str
    duration_minutes: int
    is_overnight: bool

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_model(cls, shift) -> "ShiftOut":
        window = TimeWindow.from_hhmm(shift.start_time, shift.end_time)
        return cls(
            id=shift.id,
            name=shift.name,
            code=shift.code,
            start_time=shift.start_time,
            end_time=shift.end_time,
            description=shift.description or "",
            color=shift.color,
            is_active=shift.is_active,
            start_time_12h=format_to_12_hour(shift.start_time),
            end_time_12h=format_to_12_hour(shift.end_time),
            display_time=window.display(),
            duration_minutes=window.duration_minutes(),
            is_overnight=window.is_overnight,
        )


class CurrentShiftOut(BaseModel):
    """Current shift at a wall-clock minute; shift is None when no window matches"""
    at: str
    shift: Optional[ShiftOut] = None


class CurrentShiftEmployeesOut(BaseModel):
    at: str
    shift: Optional[ShiftOut] = None
    employees: List[EmployeeOut]
    total: int
