"""Vaccination report endpoints."""

from io import BytesIO
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.dependencies import CurrentPrincipal
from app.schemas.report import ReportFilter, ReportPage
from app.services.exporters import get_exporter
from app.services.report import ReportService, parse_date_param

router = APIRouter()


def _build_filter(
    vaccine_name: str | None,
    from_date: str | None,
    to_date: str | None,
) -> ReportFilter:
    return ReportFilter(
        vaccine_name=vaccine_name or None,
        from_date=parse_date_param(from_date, "fromDate"),
        to_date=parse_date_param(to_date, "toDate"),
    )


@router.get("", response_model=ReportPage)
def get_filtered_report(
    principal: CurrentPrincipal,
    db: Annotated[Session, Depends(get_db)],
    vaccine_name: str | None = Query(None, alias="vaccineName"),
    from_date: str | None = Query(None, alias="fromDate"),
    to_date: str | None = Query(None, alias="toDate"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.REPORT_DEFAULT_PAGE_SIZE, ge=1, le=500),
):
    """
    Get vaccination records, one row per student vaccination, newest first.

    Filters combine: exact vaccine name and an inclusive date range.
    """
    filters = _build_filter(vaccine_name, from_date, to_date)
    service = ReportService(db)
    return service.filtered_report(filters, page, limit)


@router.get("/export")
def export_report(
    principal: CurrentPrincipal,
    db: Annotated[Session, Depends(get_db)],
    format: str = Query("csv", description="csv, pdf or xls"),
    vaccine_name: str | None = Query(None, alias="vaccineName"),
    from_date: str | None = Query(None, alias="fromDate"),
    to_date: str | None = Query(None, alias="toDate"),
):
    """Download the filtered vaccination report as CSV, PDF or XLS."""
    get_exporter(format)  # Reject unknown formats before touching the database
    filters = _build_filter(vaccine_name, from_date, to_date)
    service = ReportService(db)
    report = service.export_report(format, filters)

    return StreamingResponse(
        BytesIO(report.content),
        media_type=report.media_type,
        headers={"Content-Disposition": f"attachment; filename={report.filename}"},
    )
