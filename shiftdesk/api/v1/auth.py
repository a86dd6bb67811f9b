"""
Authentication endpoints
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session
from shiftdesk.core.deps import get_db, get_current_user, get_notification_sink
from shiftdesk.core.security import verify_password, create_access_token
from shiftdesk.models.employee import Employee
from shiftdesk.schemas.auth import LoginRequest, TokenResponse
from shiftdesk.schemas.employee import EmployeeOut, ProfileUpdate
from shiftdesk.services import employee_service
from shiftdesk.services.audit_service import log_audit
from shiftdesk.services.notifications import NotificationSink

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    db: Session = Depends(get_db)
):
    """
    Authenticate user and return JWT token

    Validates email and password, rejects inactive employees.
    """
    employee = db.query(Employee).filter(func.lower(Employee.email) == login_data.email.lower()).first()

    if not employee:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password"
        )

    if not employee.active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is inactive"
        )

    if employee.password_hash is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No password set for this account"
        )

    if not verify_password(login_data.password, employee.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password"
        )

    # JWT 'sub' claim must be a string
    token_data = {
        "sub": str(employee.id),
        "emp_code": employee.emp_code,
        "role": employee.role,
    }
    access_token = create_access_token(data=token_data)

    log_audit(
        db=db,
        actor_id=employee.id,
        action="AUTH_LOGIN_SUCCESS",
        entity_type="auth",
        meta={"emp_code": employee.emp_code, "role": employee.role}
    )
    logger.info("Login succeeded for %s", employee.emp_code)

    return TokenResponse(access_token=access_token, token_type="bearer")


@router.get("/me", response_model=EmployeeOut)
async def me(current_user: Employee = Depends(get_current_user)):
    """Profile of the authenticated user"""
    return current_user


@router.put("/me", response_model=EmployeeOut)
async def update_me(
    profile_data: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user),
    sink: NotificationSink = Depends(get_notification_sink)
):
    """Update the caller's own name, email or phone"""
    return employee_service.update_own_profile(db, current_user, profile_data, sink)
