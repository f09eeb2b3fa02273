import io
from datetime import date

import pytest
from openpyxl import load_workbook

from app.core.exceptions import BadFormatError
from app.schemas.report import ReportFilter
from app.services.report import ReportService, parse_date_param


@pytest.fixture
def vaccinated_students(make_student):
    make_student("S1", name="Asha Rao", class_name="5A", vaccinations=[("D1", "Polio", date(2025, 1, 10))])
    make_student("S2", name="Ravi Kumar", class_name="6B", vaccinations=[("D2", "Covid", date(2025, 2, 15))])
    make_student("S3", name="Meera Iyer", class_name="5A", vaccinations=[("D3", "Polio", date(2025, 3, 1))])
    make_student("S4", name="Kiran Das", class_name="6B")


def test_report_lists_newest_vaccination_first(db_session, vaccinated_students):
    page = ReportService(db_session).filtered_report()

    assert page.total_records == 3
    assert page.total_pages == 1
    assert [r.student_id for r in page.records] == ["S3", "S2", "S1"]


def test_report_filters_by_vaccine_and_inclusive_date_range(db_session, vaccinated_students):
    service = ReportService(db_session)

    polio = service.filtered_report(ReportFilter(vaccine_name="Polio"))
    assert {r.student_id for r in polio.records} == {"S1", "S3"}

    ranged = service.filtered_report(
        ReportFilter(from_date=date(2025, 2, 15), to_date=date(2025, 3, 1))
    )
    assert [r.student_id for r in ranged.records] == ["S3", "S2"]


def test_report_pagination(db_session, vaccinated_students):
    page = ReportService(db_session).filtered_report(page=2, limit=2)

    assert page.total_records == 3
    assert page.total_pages == 2
    assert page.current_page == 2
    assert [r.student_id for r in page.records] == ["S1"]


def test_empty_report_has_no_pages(db_session):
    page = ReportService(db_session).filtered_report()

    assert page.total_records == 0
    assert page.total_pages == 0
    assert page.records == []


def test_parse_date_param():
    assert parse_date_param(None, "fromDate") is None
    assert parse_date_param("2025-02-15", "fromDate") == date(2025, 2, 15)
    assert parse_date_param("2025-02-15T10:30:00Z", "fromDate") == date(2025, 2, 15)
    with pytest.raises(BadFormatError):
        parse_date_param("15/02/2025", "fromDate")


def test_report_endpoint(client, vaccinated_students):
    response = client.get("/api/v1/reports", params={"vaccineName": "Polio", "page": 1, "limit": 1})

    assert response.status_code == 200
    body = response.json()
    assert body["totalRecords"] == 2
    assert body["totalPages"] == 2
    assert body["records"][0]["studentID"] == "S3"
    assert body["records"][0]["class"] == "5A"


def test_report_endpoint_rejects_bad_date(client):
    response = client.get("/api/v1/reports", params={"fromDate": "yesterday"})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "BAD_FORMAT"


def test_export_csv(client, vaccinated_students):
    response = client.get("/api/v1/reports/export", params={"format": "csv", "vaccineName": "Covid"})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "vaccination_report.csv" in response.headers["content-disposition"]
    lines = response.text.strip().splitlines()
    assert lines[0] == "studentID,name,class,vaccineName,driveId,date"
    assert lines[1] == "S2,Ravi Kumar,6B,Covid,D2,2025-02-15"


def test_export_xls_is_an_xlsx_workbook(client, vaccinated_students):
    response = client.get("/api/v1/reports/export", params={"format": "xls"})

    assert response.status_code == 200
    assert "vaccination_report.xlsx" in response.headers["content-disposition"]
    sheet = load_workbook(io.BytesIO(response.content)).active
    assert sheet.cell(row=1, column=1).value == "Student ID"
    assert sheet.max_row == 4


def test_export_pdf(client, vaccinated_students):
    response = client.get("/api/v1/reports/export", params={"format": "pdf"})

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.content.startswith(b"%PDF")


def test_export_rejects_unknown_format(client):
    response = client.get("/api/v1/reports/export", params={"format": "docx"})

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Invalid format. Use csv, pdf, or xls."


@pytest.mark.parametrize("page, limit", [(1, 0), (0, 10)])
def test_report_rejects_non_positive_paging(db_session, page, limit):
    with pytest.raises(BadFormatError):
        ReportService(db_session).filtered_report(page=page, limit=limit)
