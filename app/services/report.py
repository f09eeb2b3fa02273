"""Vaccination report service."""

import logging
import math
from datetime import date, datetime
from typing import NamedTuple

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from app.core.exceptions import BadFormatError
from app.models.student import Student
from app.models.vaccination import VaccinationRecord
from app.schemas.report import ReportFilter, ReportPage, ReportRow
from app.services.exporters import get_exporter

logger = logging.getLogger(__name__)


def parse_date_param(value: str | None, name: str) -> date | None:
    """Parse an ISO date (or datetime) query value."""
    if value is None or not value.strip():
        return None
    value = value.strip()
    try:
        return date.fromisoformat(value)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    except ValueError:
        raise BadFormatError(
            f"Invalid date for '{name}'. Use YYYY-MM-DD.",
            details={name: value},
        )


class ExportedReport(NamedTuple):
    """Rendered report ready to be streamed."""

    content: bytes
    media_type: str
    filename: str


class ReportService:
    """Flattens student vaccination records into filterable report rows."""

    def __init__(self, db: Session):
        self.db = db

    def _report_query(self, filters: ReportFilter | None) -> Select:
        query = select(
            Student.student_id,
            Student.name,
            Student.class_name,
            VaccinationRecord.vaccine_name,
            VaccinationRecord.date,
            VaccinationRecord.drive_id,
        ).join(VaccinationRecord, VaccinationRecord.student_pk == Student.id)

        if filters:
            if filters.vaccine_name:
                query = query.where(VaccinationRecord.vaccine_name == filters.vaccine_name)
            if filters.from_date:
                query = query.where(VaccinationRecord.date >= filters.from_date)
            if filters.to_date:
                query = query.where(VaccinationRecord.date <= filters.to_date)

        return query

    @staticmethod
    def _newest_first(query: Select) -> Select:
        # Record id breaks ties so pages never overlap
        return query.order_by(VaccinationRecord.date.desc(), VaccinationRecord.id.desc())

    def filtered_report(
        self,
        filters: ReportFilter | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> ReportPage:
        """Get one page of report rows, newest vaccination first."""
        if page < 1 or limit < 1:
            raise BadFormatError(
                "page and limit must be positive integers",
                details={"page": page, "limit": limit},
            )
        query = self._report_query(filters)

        count_query = select(func.count()).select_from(query.subquery())
        total = self.db.execute(count_query).scalar() or 0

        offset = (page - 1) * limit
        result = self.db.execute(self._newest_first(query).offset(offset).limit(limit))
        records = [ReportRow.model_validate(dict(row._mapping)) for row in result.all()]

        return ReportPage(
            total_records=total,
            current_page=page,
            total_pages=math.ceil(total / limit),
            records=records,
        )

    def report_rows(self, filters: ReportFilter | None = None) -> list[ReportRow]:
        """All matching report rows, newest vaccination first."""
        result = self.db.execute(self._newest_first(self._report_query(filters)))
        return [ReportRow.model_validate(dict(row._mapping)) for row in result.all()]

    def export_report(
        self,
        export_format: str,
        filters: ReportFilter | None = None,
    ) -> ExportedReport:
        """Render every matching row in the requested format."""
        exporter = get_exporter(export_format)
        rows = self.report_rows(filters)
        logger.info(f"[REPORT] Exporting {len(rows)} rows as {export_format}")
        return ExportedReport(
            content=exporter.render(rows),
            media_type=exporter.media_type,
            filename=f"vaccination_report.{exporter.extension}",
        )
