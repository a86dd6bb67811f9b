"""
Main API router
"""
from fastapi import APIRouter

from shiftdesk.api.v1 import (
    health,
    version,
    auth,
    shifts,
    employees,
    leaves,
    dashboard,
    notifications,
)

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(version.router, tags=["version"])
api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(shifts.router, prefix="/shifts", tags=["shifts"])
api_router.include_router(employees.router, prefix="/employees", tags=["employees"])
api_router.include_router(leaves.router, prefix="/leaves", tags=["leaves"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
