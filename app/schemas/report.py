"""Vaccination report schemas."""

import datetime

from pydantic import Field

from app.schemas.common import BaseSchema


class ReportFilter(BaseSchema):
    """Filters shared by the paginated report and the export."""

    vaccine_name: str | None = None
    from_date: datetime.date | None = None
    to_date: datetime.date | None = None


class ReportRow(BaseSchema):
    """One (student, vaccination record) pair."""

    student_id: str = Field(..., alias="studentID")
    name: str
    class_name: str = Field(..., alias="class")
    vaccine_name: str
    date: datetime.date
    drive_id: str


class ReportPage(BaseSchema):
    """Paginated vaccination report."""

    total_records: int
    current_page: int
    total_pages: int
    records: list[ReportRow]
