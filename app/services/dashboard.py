"""Dashboard aggregation service."""

import logging
from datetime import date, timedelta

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import NotFoundError
from app.models.drive import Drive
from app.models.student import Student
from app.schemas.dashboard import (
    ClassVaccinationStat,
    DashboardOverview,
    DashboardStats,
    VaccineUsage,
)
from app.schemas.drive import DriveSummary

logger = logging.getLogger(__name__)


def _percent(part: int, whole: int) -> float:
    return round(part / whole * 100, 2) if whole > 0 else 0


class DashboardService:
    """Dashboard data aggregation service."""

    def __init__(self, db: Session):
        self.db = db

    def get_overview(self, today: date | None = None) -> DashboardOverview:
        """Student coverage and the drives scheduled in the upcoming window."""
        today = today or date.today()
        window_end = today + timedelta(days=settings.UPCOMING_DRIVE_WINDOW_DAYS)

        total_students = self.db.execute(
            select(func.count()).select_from(Student)
        ).scalar() or 0

        vaccinated_count = self.db.execute(
            select(func.count())
            .select_from(Student)
            .where(Student.vaccination_records.any())
        ).scalar() or 0

        result = self.db.execute(
            select(Drive)
            .where(
                Drive.date >= today,
                Drive.date <= window_end,
                Drive.is_expired.is_(False),
            )
            .order_by(Drive.date, Drive.drive_id)
        )
        upcoming = [DriveSummary.model_validate(d) for d in result.scalars().all()]

        return DashboardOverview(
            total_students=total_students,
            vaccinated_count=vaccinated_count,
            vaccinated_percent=_percent(vaccinated_count, total_students),
            upcoming_drives_count=len(upcoming),
            upcoming_drives=upcoming,
        )

    def get_stats(self) -> DashboardStats:
        """Per-class vaccination coverage and vaccine usage counts."""
        students = self.db.execute(select(Student)).scalars().all()
        drive_count = self.db.execute(select(func.count()).select_from(Drive)).scalar() or 0

        if not students or not drive_count:
            logger.warning("No students or drives found for stats")
            raise NotFoundError("Students or drives")

        by_class: dict[str, dict[str, int]] = {}
        vaccine_counts: dict[str, int] = {}

        for student in students:
            counts = by_class.setdefault(student.class_name, {"total": 0, "vaccinated": 0})
            counts["total"] += 1
            if student.vaccination_records:
                counts["vaccinated"] += 1
                for record in student.vaccination_records:
                    if record.vaccine_name:
                        vaccine_counts[record.vaccine_name] = vaccine_counts.get(record.vaccine_name, 0) + 1

        vaccination_by_class = [
            ClassVaccinationStat(
                class_name=class_name,
                total=counts["total"],
                vaccinated=counts["vaccinated"],
                vaccinated_percent=_percent(counts["vaccinated"], counts["total"]),
            )
            for class_name, counts in sorted(by_class.items())
        ]
        most_used_vaccines = [
            VaccineUsage(name=name, count=count)
            for name, count in sorted(vaccine_counts.items(), key=lambda item: (-item[1], item[0]))
        ]

        logger.info("Dashboard stats generated successfully")
        return DashboardStats(
            total_students=len(students),
            vaccination_by_class=vaccination_by_class,
            most_used_vaccines=most_used_vaccines,
        )
