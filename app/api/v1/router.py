"""Main API router aggregating all module routers."""

from fastapi import APIRouter

from app.api.v1.endpoints import (
    auth,
    dashboard,
    drives,
    reports,
    students,
)

api_router = APIRouter()

# Authentication (no token required for login)
api_router.include_router(
    auth.router,
    prefix="/auth",
    tags=["Authentication"],
)

# Students
api_router.include_router(
    students.router,
    prefix="/students",
    tags=["Students"],
)

# Vaccination drives
api_router.include_router(
    drives.router,
    prefix="/drives",
    tags=["Vaccination Drives"],
)

# Reports
api_router.include_router(
    reports.router,
    prefix="/reports",
    tags=["Reports"],
)

# Dashboard
api_router.include_router(
    dashboard.router,
    prefix="/dashboard",
    tags=["Dashboard"],
)
