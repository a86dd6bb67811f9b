"""
Employee model
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
from shiftdesk.db.base import Base


class Role(str, enum.Enum):
    ADMIN = "admin"
    EMPLOYEE = "employee"


class Employee(Base):
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    emp_code = Column(String, unique=True, nullable=False, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False, index=True)
    phone = Column(String, nullable=False, default="")
    password_hash = Column(String, nullable=True)
    role = Column(String, nullable=False, default=Role.EMPLOYEE.value)
    shift = Column(String, nullable=False, default="shift1")  # shift code or "flexible"
    custom_start = Column(String(5), nullable=True)  # HH:MM, overrides the named shift when set
    custom_end = Column(String(5), nullable=True)
    weekly_off = Column(JSON, nullable=False, default=list)  # lowercase weekday names
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), onupdate=func.current_timestamp(), nullable=False)

    # Relationships
    leave_requests = relationship(
        "LeaveRequest",
        foreign_keys="LeaveRequest.employee_id",
        back_populates="employee",
        cascade="all, delete-orphan",
    )
    attendance_records = relationship(
        "AttendanceRecord",
        foreign_keys="AttendanceRecord.employee_id",
        back_populates="employee",
        cascade="all, delete-orphan",
    )

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    @property
    def has_custom_timing(self) -> bool:
        return bool(self.custom_start and self.custom_end)
