"""
Leave models
"""
from sqlalchemy import (
    Column,
    Integer,
    Date,
    DateTime,
    ForeignKey,
    Text,
    Enum as SQLEnum,
    Index,
    CheckConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import text
import enum
from shiftdesk.db.base import Base


class LeaveType(str, enum.Enum):
    PLANNED = "planned"
    EMERGENCY = "emergency"
    SICK = "sick"
    CASUAL = "casual"


class LeaveStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


# Legal status changes; everything else (besides same-status no-ops) is rejected
LEAVE_TRANSITIONS = {
    LeaveStatus.PENDING: frozenset({LeaveStatus.APPROVED, LeaveStatus.REJECTED}),
    LeaveStatus.APPROVED: frozenset(),
    LeaveStatus.REJECTED: frozenset(),
}


class LeaveRequest(Base):
    __tablename__ = "leave_requests"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    approver_id = Column(Integer, ForeignKey("employees.id", ondelete="SET NULL"), nullable=True, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    reason = Column(Text, nullable=False)
    leave_type = Column(SQLEnum(LeaveType, values_callable=lambda e: [m.value for m in e]), nullable=False, default=LeaveType.PLANNED)
    status = Column(SQLEnum(LeaveStatus, values_callable=lambda e: [m.value for m in e]), nullable=False, default=LeaveStatus.PENDING)
    notes = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), server_default=text("CURRENT_TIMESTAMP"), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=text("CURRENT_TIMESTAMP"),
        onupdate=text("CURRENT_TIMESTAMP"),
        nullable=False,
    )

    # Relationships
    employee = relationship("Employee", foreign_keys=[employee_id], back_populates="leave_requests")
    approver = relationship("Employee", foreign_keys=[approver_id])

    __table_args__ = (
        Index('ix_leave_requests_employee_dates', 'employee_id', 'start_date', 'end_date'),
        CheckConstraint('start_date <= end_date', name='check_start_date_le_end_date'),
    )

    @property
    def employee_name(self):
        return self.employee.name if self.employee is not None else None
