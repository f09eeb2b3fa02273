"""Student schemas."""

import enum
from datetime import date

from pydantic import Field, field_validator

from app.models.student import Gender
from app.schemas.common import BaseSchema, TimestampSchema


class VaccinationStatus(str, enum.Enum):
    """Student list filter on vaccination history."""

    VACCINATED = "vaccinated"
    NOT_VACCINATED = "not_vaccinated"


class VaccinationRecordBase(BaseSchema):
    """Vaccination record embedded in a student."""

    drive_id: str = Field(..., min_length=1, max_length=64)
    vaccine_name: str = Field(..., min_length=1, max_length=255)
    date: date


class VaccinationRecordResponse(VaccinationRecordBase):
    """Vaccination record response schema."""

    pass


class StudentBase(BaseSchema):
    """Base student schema."""

    student_id: str = Field(..., alias="studentID", min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=255)
    class_name: str = Field(..., alias="class", min_length=1, max_length=50)
    gender: Gender
    dob: date

    @field_validator("gender", mode="before")
    @classmethod
    def normalize_gender(cls, value):
        if isinstance(value, str):
            return value.strip().capitalize()
        return value

    @field_validator("dob")
    @classmethod
    def dob_not_in_future(cls, value: date) -> date:
        if value > date.today():
            raise ValueError("Date of birth cannot be in the future")
        return value


class StudentCreate(StudentBase):
    """Student creation schema."""

    vaccination_records: list[VaccinationRecordBase] = []

    @field_validator("vaccination_records")
    @classmethod
    def unique_drive_ids(cls, value: list[VaccinationRecordBase]) -> list[VaccinationRecordBase]:
        drive_ids = [record.drive_id for record in value]
        if len(drive_ids) != len(set(drive_ids)):
            raise ValueError("A student can only have one vaccination record per drive")
        return value


class StudentUpdate(BaseSchema):
    """Student update schema. The studentID business key is immutable."""

    name: str | None = Field(None, min_length=1, max_length=255)
    class_name: str | None = Field(None, alias="class", min_length=1, max_length=50)
    gender: Gender | None = None
    dob: date | None = None

    @field_validator("gender", mode="before")
    @classmethod
    def normalize_gender(cls, value):
        if isinstance(value, str):
            return value.strip().capitalize()
        return value

    @field_validator("dob")
    @classmethod
    def dob_not_in_future(cls, value: date | None) -> date | None:
        if value is not None and value > date.today():
            raise ValueError("Date of birth cannot be in the future")
        return value


class StudentResponse(StudentBase, TimestampSchema):
    """Student response schema."""

    vaccination_records: list[VaccinationRecordResponse] = []


class StudentFilter(BaseSchema):
    """Student filter options."""

    class_name: str | None = None
    name: str | None = None  # Case-insensitive substring
    status: VaccinationStatus | None = None


class VaccinateRequest(BaseSchema):
    """Request to record a vaccination against a drive.

    vaccine_name and date are required for compatibility with existing
    clients; the stored values always come from the drive itself.
    """

    drive_id: str = Field(..., min_length=1, max_length=64)
    vaccine_name: str = Field(..., min_length=1, max_length=255)
    date: date


class StudentImportError(BaseSchema):
    """A CSV row that could not be imported."""

    row: int
    student_id: str | None = Field(None, alias="studentID")
    message: str


class StudentImportResult(BaseSchema):
    """Result of a bulk student CSV import."""

    imported_count: int
    skipped_count: int
    skipped_ids: list[str] = Field(default_factory=list, alias="skippedIDs")
    failed_count: int = 0
    errors: list[StudentImportError] = []
    message: str
