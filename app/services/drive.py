"""Vaccination drive service."""

import logging
from datetime import date
from uuid import uuid4

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, InvalidStateError, NotFoundError
from app.models.drive import Drive
from app.schemas.drive import DriveCreate, DriveResponse, DriveUpdate

logger = logging.getLogger(__name__)


class DriveService:
    """Vaccination drive management service."""

    def __init__(self, db: Session):
        self.db = db

    def create_drive(self, request: DriveCreate) -> DriveResponse:
        """Schedule a new drive."""
        drive_id = request.drive_id or str(uuid4())
        if self._find_drive(drive_id):
            raise ConflictError("Vaccination drive already exists", details={"id": drive_id})

        drive = Drive(
            drive_id=drive_id,
            vaccine_name=request.vaccine_name,
            date=request.date,
            available_doses=request.available_doses,
            grades=request.grades,
            is_expired=False,
        )
        self.db.add(drive)
        try:
            self.db.flush()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("Vaccination drive already exists", details={"id": drive_id})
        self.db.refresh(drive)
        logger.info(f"[DRIVE] Created drive {drive.drive_id} ({drive.vaccine_name} on {drive.date})")
        return DriveResponse.model_validate(drive)

    def _find_drive(self, drive_id: str) -> Drive | None:
        result = self.db.execute(select(Drive).where(Drive.drive_id == drive_id))
        return result.scalar_one_or_none()

    def get_drive(self, drive_id: str) -> Drive:
        """Get drive by business key."""
        drive = self._find_drive(drive_id)
        if not drive:
            raise NotFoundError("Vaccination drive", drive_id)
        return drive

    def list_drives(self, include_expired: bool = True) -> list[DriveResponse]:
        """List drives ordered by date."""
        query = select(Drive)
        if not include_expired:
            query = query.where(Drive.is_expired.is_(False))
        query = query.order_by(Drive.date, Drive.drive_id)
        result = self.db.execute(query)
        return [DriveResponse.model_validate(d) for d in result.scalars().all()]

    def update_drive(self, drive_id: str, request: DriveUpdate) -> DriveResponse:
        """Edit a drive that has not expired."""
        drive = self.get_drive(drive_id)
        if drive.is_expired:
            raise InvalidStateError(
                "Expired drives cannot be edited",
                details={"id": drive_id},
            )
        update_data = request.model_dump(exclude_unset=True, exclude_none=True)
        for field, value in update_data.items():
            setattr(drive, field, value)
        self.db.flush()
        self.db.refresh(drive)
        return DriveResponse.model_validate(drive)

    def disable_drive(self, drive_id: str) -> DriveResponse:
        """Mark a drive as expired."""
        drive = self.get_drive(drive_id)
        drive.is_expired = True
        self.db.flush()
        self.db.refresh(drive)
        logger.info(f"[DRIVE] Disabled drive {drive_id}")
        return DriveResponse.model_validate(drive)

    def expire_past_drives(self, today: date | None = None) -> int:
        """Flag every active drive dated before today as expired."""
        today = today or date.today()
        result = self.db.execute(
            update(Drive)
            .where(Drive.is_expired.is_(False), Drive.date < today)
            .values(is_expired=True)
            .execution_options(synchronize_session=False)
        )
        self.db.flush()
        return result.rowcount or 0
