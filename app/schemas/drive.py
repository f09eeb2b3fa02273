"""Vaccination drive schemas."""

import datetime

from pydantic import AliasChoices, Field, field_validator

from app.schemas.common import BaseSchema, TimestampSchema


def _not_in_past(value: datetime.date | None) -> datetime.date | None:
    if value is not None and value < datetime.date.today():
        raise ValueError("Drive date cannot be in the past")
    return value


class DriveBase(BaseSchema):
    """Base drive schema."""

    vaccine_name: str = Field(..., min_length=1, max_length=255)
    date: datetime.date
    available_doses: int = Field(..., ge=0)
    grades: str = Field(..., min_length=1, max_length=100)


class DriveCreate(DriveBase):
    """Drive creation schema. The id is generated when omitted."""

    drive_id: str | None = Field(None, alias="id", min_length=1, max_length=64)

    @field_validator("date")
    @classmethod
    def date_not_in_past(cls, value: datetime.date) -> datetime.date:
        return _not_in_past(value)


class DriveUpdate(BaseSchema):
    """Drive update schema."""

    vaccine_name: str | None = Field(None, min_length=1, max_length=255)
    date: datetime.date | None = None
    available_doses: int | None = Field(None, ge=0)
    grades: str | None = Field(None, min_length=1, max_length=100)

    @field_validator("date")
    @classmethod
    def date_not_in_past(cls, value: datetime.date | None) -> datetime.date | None:
        return _not_in_past(value)


class DriveSummary(BaseSchema):
    """Drive projection used on the dashboard."""

    # Business key goes out as "id"; the integer primary key is never exposed
    drive_id: str = Field(
        ...,
        validation_alias=AliasChoices("drive_id", "driveId", "id"),
        serialization_alias="id",
    )
    vaccine_name: str
    date: datetime.date
    available_doses: int
    grades: str


class DriveResponse(DriveSummary, TimestampSchema):
    """Drive response schema."""

    is_expired: bool
