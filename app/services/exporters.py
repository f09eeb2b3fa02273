"""Report exporters: render report rows as CSV, XLSX or PDF bytes."""

import csv
import io
from collections.abc import Callable, Sequence
from typing import NamedTuple

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from app.core.exceptions import BadFormatError
from app.schemas.report import ReportRow

# (csv key, display header, column width)
REPORT_COLUMNS = [
    ("studentID", "Student ID", 15),
    ("name", "Name", 25),
    ("class", "Class", 10),
    ("vaccineName", "Vaccine Name", 20),
    ("driveId", "Drive ID", 38),
    ("date", "Date", 12),
]

REPORT_TITLE = "Vaccination Report"


def _row_values(row: ReportRow) -> list[str]:
    """Row values in REPORT_COLUMNS order; dates as YYYY-MM-DD."""
    return [
        row.student_id,
        row.name,
        row.class_name,
        row.vaccine_name,
        row.drive_id,
        row.date.isoformat(),
    ]


def render_csv(rows: Sequence[ReportRow]) -> bytes:
    """Render rows as a UTF-8 CSV with a header line."""
    output = io.StringIO(newline="")
    writer = csv.writer(output)
    writer.writerow([key for key, _, _ in REPORT_COLUMNS])
    for row in rows:
        writer.writerow(_row_values(row))
    return output.getvalue().encode("utf-8")


def render_xlsx(rows: Sequence[ReportRow]) -> bytes:
    """Render rows as an Excel workbook with a styled header."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Report"

    header_font = Font(bold=True, color="FFFFFF")
    header_fill = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
    thin_border = Border(
        left=Side(style='thin'),
        right=Side(style='thin'),
        top=Side(style='thin'),
        bottom=Side(style='thin')
    )

    for col_idx, (_, header, width) in enumerate(REPORT_COLUMNS, start=1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = header_font
        cell.fill = header_fill
        cell.border = thin_border
        cell.alignment = Alignment(horizontal='center', vertical='center')
        ws.column_dimensions[get_column_letter(col_idx)].width = width

    for row_idx, row in enumerate(rows, start=2):
        for col_idx, value in enumerate(_row_values(row), start=1):
            ws.cell(row=row_idx, column=col_idx, value=value).border = thin_border

    ws.freeze_panes = "A2"

    output = io.BytesIO()
    wb.save(output)
    output.seek(0)
    return output.getvalue()


def render_pdf(rows: Sequence[ReportRow]) -> bytes:
    """Render rows as a landscape A4 PDF table."""
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=landscape(A4),
        rightMargin=1*cm,
        leftMargin=1*cm,
        topMargin=1*cm,
        bottomMargin=1*cm,
        title=REPORT_TITLE,
    )
    styles = getSampleStyleSheet()

    content = [
        Paragraph(REPORT_TITLE, styles["Title"]),
        Spacer(1, 0.5*cm),
    ]

    if rows:
        data = [[header for _, header, _ in REPORT_COLUMNS]]
        data.extend(_row_values(row) for row in rows)
        table = Table(data, repeatRows=1)
        table.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#4472C4")),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("FONTSIZE", (0, 0), (-1, -1), 9),
            ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
            ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#EEF2FA")]),
        ]))
        content.append(table)
    else:
        content.append(Paragraph("No vaccination records match the selected filters.", styles["Normal"]))

    doc.build(content)
    return buffer.getvalue()


class ReportExporter(NamedTuple):
    """A renderer plus the HTTP metadata for its output."""

    render: Callable[[Sequence[ReportRow]], bytes]
    media_type: str
    extension: str


EXPORTERS: dict[str, ReportExporter] = {
    "csv": ReportExporter(render_csv, "text/csv", "csv"),
    "xls": ReportExporter(
        render_xlsx,
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "xlsx",
    ),
    "pdf": ReportExporter(render_pdf, "application/pdf", "pdf"),
}


def get_exporter(export_format: str) -> ReportExporter:
    """Look up the exporter for a format name."""
    exporter = EXPORTERS.get((export_format or "").lower())
    if exporter is None:
        raise BadFormatError(
            "Invalid format. Use csv, pdf, or xls.",
            details={"format": export_format},
        )
    return exporter
