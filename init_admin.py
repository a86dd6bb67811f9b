"""
Quick script to create the initial admin user
Run this if you don't have an admin user yet (the app also does it at startup)

Usage:
  python init_admin.py                                # uses INITIAL_ADMIN_EMAIL / INITIAL_ADMIN_PASSWORD
  python init_admin.py admin@company.com S3cret!pass
"""
import sys

from shiftdesk.core.config import settings
from shiftdesk.db.session import SessionLocal, create_sqlite_tables
from shiftdesk.services.employee_service import ensure_initial_admin


def main():
    email = sys.argv[1] if len(sys.argv) > 1 else settings.INITIAL_ADMIN_EMAIL
    password = sys.argv[2] if len(sys.argv) > 2 else settings.INITIAL_ADMIN_PASSWORD

    create_sqlite_tables()
    db = SessionLocal()
    try:
        admin = ensure_initial_admin(db, email, password)
        if admin is None:
            print("Admin user already exists, skipping initialization")
        else:
            print("Database initialized!")
            print(f"Login credentials: Email: {admin.email} (code {admin.emp_code})")
    finally:
        db.close()


if __name__ == "__main__":
    main()
