"""Vaccination recording service."""

import logging

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, InvalidStateError
from app.models.drive import Drive
from app.models.vaccination import VaccinationRecord
from app.schemas.student import StudentResponse, VaccinateRequest
from app.services.drive import DriveService
from app.services.student import StudentService

logger = logging.getLogger(__name__)


class VaccinationService:
    """Records a student's vaccination against a drive.

    One record per (student, drive). The dose decrement and the record insert
    run in the request's single transaction: the decrement is a conditional
    UPDATE that only matches while doses remain, and the unique constraint on
    (student, drive) rejects a concurrent duplicate, rolling the decrement
    back with it.
    """

    def __init__(self, db: Session):
        self.db = db
        self.students = StudentService(db)
        self.drives = DriveService(db)

    def vaccinate(
        self,
        student_id: str,
        request: VaccinateRequest,
    ) -> StudentResponse:
        """Mark a student as vaccinated under a drive, consuming one dose."""
        student = self.students.get_student(student_id)

        if any(r.drive_id == request.drive_id for r in student.vaccination_records):
            raise ConflictError(
                "Student already vaccinated for this drive",
                details={"studentID": student_id, "driveId": request.drive_id},
            )

        drive = self.drives.get_drive(request.drive_id)

        if drive.available_doses <= 0:
            raise InvalidStateError(
                "No available doses left for this drive",
                details={"driveId": drive.drive_id},
            )

        if request.vaccine_name != drive.vaccine_name or request.date != drive.date:
            logger.warning(
                f"[VACCINATE] Request for drive {drive.drive_id} sent "
                f"({request.vaccine_name}, {request.date}); using drive values "
                f"({drive.vaccine_name}, {drive.date})"
            )

        result = self.db.execute(
            update(Drive)
            .where(Drive.id == drive.id, Drive.available_doses > 0)
            .values(available_doses=Drive.available_doses - 1)
        )
        if result.rowcount == 0:
            # Another request consumed the last dose after our read
            raise InvalidStateError(
                "No available doses left for this drive",
                details={"driveId": drive.drive_id},
            )

        student.vaccination_records.append(
            VaccinationRecord(
                drive_id=drive.drive_id,
                vaccine_name=drive.vaccine_name,
                date=drive.date,
            )
        )
        try:
            self.db.flush()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(
                "Student already vaccinated for this drive",
                details={"studentID": student_id, "driveId": request.drive_id},
            )

        self.db.refresh(student)
        self.db.refresh(drive)
        logger.info(
            f"[VACCINATE] Student {student_id} vaccinated under drive {drive.drive_id}"
        )
        return StudentResponse.model_validate(student)
