"""Dashboard endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.dependencies import CurrentPrincipal
from app.schemas.dashboard import DashboardOverview, DashboardStats
from app.services.dashboard import DashboardService

router = APIRouter()


@router.get("/overview", response_model=DashboardOverview)
def get_overview(
    principal: CurrentPrincipal,
    db: Annotated[Session, Depends(get_db)],
):
    """
    Get total and vaccinated student counts, coverage percentage, and the
    drives scheduled in the next 30 days.
    """
    service = DashboardService(db)
    return service.get_overview()


@router.get("/stats", response_model=DashboardStats)
def get_stats(
    principal: CurrentPrincipal,
    db: Annotated[Session, Depends(get_db)],
):
    """
    Get vaccination coverage per class and the most used vaccines.

    Returns 404 when there are no students or no drives yet.
    """
    service = DashboardService(db)
    return service.get_stats()
