from datetime import date, timedelta

import pytest

from app.core.exceptions import NotFoundError
from app.services.dashboard import DashboardService


def test_overview_counts_and_upcoming_window(db_session, make_student, make_drive):
    today = date.today()
    make_student("S1", vaccinations=[("D0", "Polio", today - timedelta(days=3))])
    make_student("S2")
    make_student("S3", vaccinations=[("D0", "Polio", today - timedelta(days=3))])
    make_student("S4")
    make_drive("D-soon", when=today + timedelta(days=5))
    make_drive("D-today", when=today)
    make_drive("D-later", when=today + timedelta(days=40))
    make_drive("D-disabled", when=today + timedelta(days=10), is_expired=True)
    make_drive("D-past", when=today - timedelta(days=1))

    overview = DashboardService(db_session).get_overview(today=today)

    assert overview.total_students == 4
    assert overview.vaccinated_count == 2
    assert overview.vaccinated_percent == 50.0
    assert overview.upcoming_drives_count == 2
    assert [d.drive_id for d in overview.upcoming_drives] == ["D-today", "D-soon"]


def test_overview_without_students(db_session):
    overview = DashboardService(db_session).get_overview()

    assert overview.total_students == 0
    assert overview.vaccinated_percent == 0
    assert overview.upcoming_drives == []


def test_stats_require_students_and_drives(db_session, make_student):
    make_student("S1")

    with pytest.raises(NotFoundError):
        DashboardService(db_session).get_stats()


def test_stats_per_class_and_vaccine_ordering(db_session, make_student, make_drive):
    make_drive("D1")
    make_student("S1", class_name="6B", vaccinations=[("D1", "Polio", date(2025, 1, 1)), ("D2", "Covid", date(2025, 2, 1))])
    make_student("S2", class_name="5A", vaccinations=[("D1", "Polio", date(2025, 1, 1))])
    make_student("S3", class_name="5A", vaccinations=[("D3", "BCG", date(2025, 3, 1))])
    make_student("S4", class_name="5A")

    stats = DashboardService(db_session).get_stats()

    assert stats.total_students == 4
    assert [(c.class_name, c.total, c.vaccinated) for c in stats.vaccination_by_class] == [
        ("5A", 3, 2),
        ("6B", 1, 1),
    ]
    assert stats.vaccination_by_class[0].vaccinated_percent == 66.67
    assert [(v.name, v.count) for v in stats.most_used_vaccines] == [
        ("Polio", 2),
        ("BCG", 1),
        ("Covid", 1),
    ]


def test_overview_endpoint_exposes_drive_business_key(client, make_drive):
    make_drive("D-soon", when=date.today() + timedelta(days=3), doses=25)

    response = client.get("/api/v1/dashboard/overview")

    assert response.status_code == 200
    drive = response.json()["upcomingDrives"][0]
    assert drive["id"] == "D-soon"
    assert drive["availableDoses"] == 25


def test_stats_endpoint_not_found(client):
    response = client.get("/api/v1/dashboard/stats")

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"
