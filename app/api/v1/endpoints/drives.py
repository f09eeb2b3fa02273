"""Vaccination drive endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.dependencies import CoordinatorPrincipal, CurrentPrincipal
from app.schemas.drive import DriveCreate, DriveResponse, DriveUpdate
from app.services.drive import DriveService

router = APIRouter()


@router.post("", response_model=DriveResponse, status_code=status.HTTP_201_CREATED)
def create_drive(
    request: DriveCreate,
    principal: CoordinatorPrincipal,
    db: Annotated[Session, Depends(get_db)],
):
    """Schedule a vaccination drive."""
    service = DriveService(db)
    return service.create_drive(request)


@router.get("", response_model=list[DriveResponse])
def list_drives(
    principal: CurrentPrincipal,
    db: Annotated[Session, Depends(get_db)],
    include_expired: bool = Query(True, alias="includeExpired"),
):
    """List vaccination drives ordered by date."""
    service = DriveService(db)
    return service.list_drives(include_expired=include_expired)


@router.get("/{drive_id}", response_model=DriveResponse)
def get_drive(
    drive_id: str,
    principal: CurrentPrincipal,
    db: Annotated[Session, Depends(get_db)],
):
    """Get a vaccination drive by id."""
    service = DriveService(db)
    return DriveResponse.model_validate(service.get_drive(drive_id))


@router.put("/{drive_id}", response_model=DriveResponse)
def update_drive(
    drive_id: str,
    request: DriveUpdate,
    principal: CoordinatorPrincipal,
    db: Annotated[Session, Depends(get_db)],
):
    """Edit a vaccination drive that has not expired."""
    service = DriveService(db)
    return service.update_drive(drive_id, request)


@router.put("/{drive_id}/disable", response_model=DriveResponse)
def disable_drive(
    drive_id: str,
    principal: CoordinatorPrincipal,
    db: Annotated[Session, Depends(get_db)],
):
    """Disable a vaccination drive."""
    service = DriveService(db)
    return service.disable_drive(drive_id)
