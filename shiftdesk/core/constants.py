"""
Shared constants
"""

SERVICE_NAME = "shiftdesk-backend"

# Canonical weekday vocabulary for weekly-off sets (index == date.weekday())
WEEKDAY_NAMES = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

# Shift codes
SHIFT_CODES = ("shift1", "shift2", "shift3", "shift4")
FLEXIBLE_SHIFT = "flexible"

# Attendance is recorded against a concrete shift; flexible employees fall back to this one
FLEXIBLE_ATTENDANCE_SHIFT = "shift1"

# Window shown for flexible employees without custom timing
DEFAULT_FLEXIBLE_START = "09:00"
DEFAULT_FLEXIBLE_END = "17:00"

DEFAULT_SHIFT_COLOR = "#3b82f6"

# Catalog created by POST /shifts/initialize and scripts/seed_shifts.py
DEFAULT_SHIFTS = (
    {
        "name": "Shift 1",
        "code": "shift1",
        "start_time": "09:00",
        "end_time": "17:00",
        "description": "Morning Shift (9 AM to 5 PM)",
        "color": "#3b82f6",
    },
    {
        "name": "Shift 2",
        "code": "shift2",
        "start_time": "17:00",
        "end_time": "01:00",
        "description": "Evening Shift (5 PM to 1 AM)",
        "color": "#f59e0b",
    },
    {
        "name": "Shift 3",
        "code": "shift3",
        "start_time": "01:00",
        "end_time": "09:00",
        "description": "Night Shift (1 AM to 9 AM)",
        "color": "#64748b",
    },
)
