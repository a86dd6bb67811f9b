"""
Attendance record model: one row per (employee, calendar day)
"""
from sqlalchemy import Column, Integer, Date, DateTime, ForeignKey, String, Text, Numeric, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
from shiftdesk.db.base import Base


class AttendanceStatus(str, enum.Enum):
    PRESENT = "present"
    ABSENT = "absent"
    HALF_DAY = "half_day"
    ON_LEAVE = "on_leave"


class AttendanceRecord(Base):
    __tablename__ = "attendance_records"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)  # business day, no time-of-day
    shift = Column(String, nullable=False)  # shift code at time of marking
    status = Column(String, nullable=False, default=AttendanceStatus.PRESENT.value)
    check_in = Column(DateTime(timezone=True), nullable=True)
    check_out = Column(DateTime(timezone=True), nullable=True)
    total_hours = Column(Numeric(5, 2), nullable=False, default=0)
    notes = Column(Text, nullable=False, default="")
    marked_by_id = Column(Integer, ForeignKey("employees.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), onupdate=func.current_timestamp(), nullable=False)

    __table_args__ = (
        UniqueConstraint('employee_id', 'date', name='uq_attendance_employee_date'),
    )

    # Relationships
    employee = relationship("Employee", foreign_keys=[employee_id], back_populates="attendance_records")
    marked_by = relationship("Employee", foreign_keys=[marked_by_id])
