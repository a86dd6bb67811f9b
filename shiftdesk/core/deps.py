"""
Dependencies and guards for FastAPI endpoints
"""
from typing import Generator
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from shiftdesk.db.session import SessionLocal
from shiftdesk.core.security import decode_token
from shiftdesk.core.identity import Caller, caller_for
from shiftdesk.models.employee import Employee
from shiftdesk.services.notifications import NotificationHub, NotificationSink, default_sink, hub


security = HTTPBearer()


def get_db() -> Generator:
    """Dependency for getting database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_notification_sink() -> NotificationSink:
    """Dependency for the process-wide notification sink (overridden in tests)"""
    return default_sink


def get_notification_hub() -> NotificationHub:
    """Dependency for the WebSocket subscription hub"""
    return hub


def employee_from_token(db: Session, token: str) -> Employee:
    """
    Resolve a bearer token to an active employee.

    Raises:
        HTTPException: 401 for bad tokens or unknown users, 403 for inactive users
    """
    try:
        payload = decode_token(token)
        sub_value = payload.get("sub")
        if sub_value is None:
            raise ValueError("missing sub")
        employee_id = int(sub_value)
    except (ValueError, TypeError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    employee = db.get(Employee, employee_id)
    if employee is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not employee.active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Inactive user"
        )

    return employee


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> Employee:
    """Get current authenticated user from JWT token"""
    return employee_from_token(db, credentials.credentials)


async def get_caller(current_user: Employee = Depends(get_current_user)) -> Caller:
    """Current user as an AdminCaller / EmployeeCaller value"""
    return caller_for(current_user)


async def require_admin(current_user: Employee = Depends(get_current_user)) -> Employee:
    """Allow admins only"""
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. Admin role required"
        )
    return current_user
