"""
Daily status and dashboard schemas
"""
from datetime import date as date_type
from typing import Dict, List, Optional
from pydantic import BaseModel
from shiftdesk.schemas.shift import ShiftOut


class EmployeeStatusOut(BaseModel):
    employee_id: int
    emp_code: str
    name: str
    shift: str
    date: date_type
    status: str
    source: str
    reason: Optional[str] = None
    leave_id: Optional[int] = None
    attendance_id: Optional[int] = None
    status_text: str
    status_color: str


class DailyStatusListResponse(BaseModel):
    date: date_type
    items: List[EmployeeStatusOut]
    total: int


class DashboardOut(BaseModel):
    date: date_type
    total_employees: int
    counts: Dict[str, int]
    pending_leaves: int
    current_shift: Optional[ShiftOut] = None
    statuses: List[EmployeeStatusOut]
