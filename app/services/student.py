"""Student management service."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, NotFoundError
from app.models.student import Student
from app.models.vaccination import VaccinationRecord
from app.schemas.student import (
    StudentCreate,
    StudentFilter,
    StudentResponse,
    StudentUpdate,
    VaccinationStatus,
)

logger = logging.getLogger(__name__)


class StudentService:
    """Student management service."""

    def __init__(self, db: Session):
        self.db = db

    def create_student(self, request: StudentCreate) -> StudentResponse:
        """Register a new student, optionally with prior vaccination records."""
        if self._find_student(request.student_id):
            raise ConflictError(
                "Student already exists",
                details={"studentID": request.student_id},
            )

        student = Student(
            student_id=request.student_id,
            name=request.name,
            class_name=request.class_name,
            gender=request.gender,
            dob=request.dob,
            vaccination_records=[
                VaccinationRecord(
                    drive_id=record.drive_id,
                    vaccine_name=record.vaccine_name,
                    date=record.date,
                )
                for record in request.vaccination_records
            ],
        )
        self.db.add(student)
        try:
            self.db.flush()
        except IntegrityError:
            # Lost a race against a concurrent registration of the same ID
            self.db.rollback()
            raise ConflictError(
                "Student already exists",
                details={"studentID": request.student_id},
            )
        self.db.refresh(student)
        logger.info(f"[STUDENT] Created student {student.student_id}")
        return StudentResponse.model_validate(student)

    def _find_student(self, student_id: str) -> Student | None:
        result = self.db.execute(
            select(Student).where(Student.student_id == student_id)
        )
        return result.scalar_one_or_none()

    def get_student(self, student_id: str) -> Student:
        """Get student by business key."""
        student = self._find_student(student_id)
        if not student:
            raise NotFoundError("Student", student_id)
        return student

    def update_student(
        self,
        student_id: str,
        request: StudentUpdate,
    ) -> StudentResponse:
        """Update a student's profile fields."""
        student = self.get_student(student_id)
        update_data = request.model_dump(exclude_unset=True, exclude_none=True)
        for field, value in update_data.items():
            setattr(student, field, value)
        self.db.flush()
        self.db.refresh(student)
        return StudentResponse.model_validate(student)

    def list_students(
        self,
        filters: StudentFilter | None = None,
    ) -> list[StudentResponse]:
        """List students with class, name and vaccination-status filters."""
        query = select(Student)

        if filters:
            if filters.class_name:
                query = query.where(Student.class_name == filters.class_name)
            if filters.name:
                query = query.where(Student.name.icontains(filters.name, autoescape=True))
            if filters.status == VaccinationStatus.VACCINATED:
                query = query.where(Student.vaccination_records.any())
            elif filters.status == VaccinationStatus.NOT_VACCINATED:
                query = query.where(~Student.vaccination_records.any())

        query = query.order_by(Student.student_id)
        result = self.db.execute(query)
        students = result.scalars().all()
        return [StudentResponse.model_validate(s) for s in students]
