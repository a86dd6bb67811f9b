"""
Seed the default shift catalog (Shift 1 09:00-17:00, Shift 2 17:00-01:00,
Shift 3 01:00-09:00). Leaves an existing catalog unchanged. Run from the
project root with .env loaded.

Usage:
  python scripts/seed_shifts.py
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from fastapi import HTTPException  # noqa: E402

from shiftdesk.db.session import SessionLocal, create_sqlite_tables  # noqa: E402
from shiftdesk.services.shift_service import initialize_default_shifts, list_shift_definitions  # noqa: E402
from shiftdesk.services.time_window import TimeWindow  # noqa: E402


def main():
    create_sqlite_tables()
    db = SessionLocal()
    try:
        try:
            shifts = initialize_default_shifts(db)
            print("Default shifts created:")
        except HTTPException as exc:
            print(f"{exc.detail}; current catalog:")
            shifts = list_shift_definitions(db)
        for shift in shifts:
            window = TimeWindow.from_hhmm(shift.start_time, shift.end_time)
            print(f"  {shift.code}: {shift.name} {window.display()} ({window.duration_minutes()} min)")
    finally:
        db.close()


if __name__ == "__main__":
    main()
