"""Student management endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.dependencies import CoordinatorPrincipal, CurrentPrincipal
from app.core.exceptions import BadFormatError
from app.schemas.student import (
    StudentCreate,
    StudentFilter,
    StudentImportResult,
    StudentResponse,
    StudentUpdate,
    VaccinateRequest,
    VaccinationStatus,
)
from app.services.student import StudentService
from app.services.student_import import StudentImportService
from app.services.vaccination import VaccinationService

router = APIRouter()


@router.post("", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
def create_student(
    request: StudentCreate,
    principal: CoordinatorPrincipal,
    db: Annotated[Session, Depends(get_db)],
):
    """Register a new student."""
    service = StudentService(db)
    return service.create_student(request)


@router.get("", response_model=list[StudentResponse])
def list_students(
    principal: CurrentPrincipal,
    db: Annotated[Session, Depends(get_db)],
    class_name: str | None = Query(None, alias="class"),
    name: str | None = None,
    status: VaccinationStatus | None = None,
):
    """List students filtered by class, name (case-insensitive) and vaccination status."""
    service = StudentService(db)
    filters = StudentFilter(class_name=class_name, name=name, status=status)
    return service.list_students(filters)


@router.post("/import", response_model=StudentImportResult, status_code=status.HTTP_201_CREATED)
def import_students(
    principal: CoordinatorPrincipal,
    db: Annotated[Session, Depends(get_db)],
    file: UploadFile = File(...),
):
    """
    Bulk import students from a CSV file.

    Expected columns: studentID, name, class, gender, dob.
    IDs that already exist are skipped; invalid rows are reported without
    aborting the rest of the file.
    """
    if not file.filename:
        raise BadFormatError("CSV file is required")

    if not any(file.filename.lower().endswith(ext) for ext in settings.ALLOWED_IMPORT_EXTENSIONS):
        raise BadFormatError("Only CSV files are allowed")

    content = file.file.read()
    if len(content) > settings.MAX_UPLOAD_SIZE_MB * 1024 * 1024:
        raise BadFormatError(f"File size exceeds {settings.MAX_UPLOAD_SIZE_MB}MB limit")

    service = StudentImportService(db)
    return service.import_upload(content)


@router.get("/{student_id}", response_model=StudentResponse)
def get_student(
    student_id: str,
    principal: CurrentPrincipal,
    db: Annotated[Session, Depends(get_db)],
):
    """Get a student by studentID."""
    service = StudentService(db)
    student = service.get_student(student_id)
    return StudentResponse.model_validate(student)


@router.put("/{student_id}", response_model=StudentResponse)
def update_student(
    student_id: str,
    request: StudentUpdate,
    principal: CoordinatorPrincipal,
    db: Annotated[Session, Depends(get_db)],
):
    """Update a student's details."""
    service = StudentService(db)
    return service.update_student(student_id, request)


@router.post("/{student_id}/vaccinate", response_model=StudentResponse)
def vaccinate_student(
    student_id: str,
    request: VaccinateRequest,
    principal: CoordinatorPrincipal,
    db: Annotated[Session, Depends(get_db)],
):
    """
    Record a vaccination for a student under a drive.

    Consumes one dose from the drive. A student can be vaccinated at most once
    per drive.
    """
    service = VaccinationService(db)
    return service.vaccinate(student_id, request)
