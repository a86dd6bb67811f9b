"""
Shift definition model
"""
from sqlalchemy import Column, Integer, String, Boolean, Text
from shiftdesk.db.base import Base


class Shift(Base):
    __tablename__ = "shifts"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    code = Column(String, unique=True, nullable=False, index=True)  # shift1..shift4
    start_time = Column(String(5), nullable=False)  # HH:MM, 24-hour
    end_time = Column(String(5), nullable=False)  # earlier than start_time for overnight shifts
    description = Column(Text, nullable=False, default="")
    color = Column(String, nullable=False, default="#3b82f6")
    is_active = Column(Boolean, nullable=False, default=True)
