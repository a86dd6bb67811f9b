"""
Admin dashboard endpoint
"""
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from shiftdesk.core.deps import get_db, require_admin
from shiftdesk.models.employee import Employee
from shiftdesk.schemas.status import DashboardOut
from shiftdesk.services.status_service import build_dashboard
from shiftdesk.utils.datetime_utils import local_minutes, today_local

router = APIRouter()


@router.get("", response_model=DashboardOut)
async def dashboard_endpoint(
    day: Optional[date] = Query(None, description="Business day; defaults to today"),
    at: Optional[str] = Query(None, description="Wall-clock time HH:MM for the current shift"),
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_admin)
):
    """Status counts, pending leaves and current shift for a day (Admin-only)"""
    return build_dashboard(db, day or today_local(), local_minutes(at))
