"""Dashboard schemas."""

from pydantic import Field

from app.schemas.common import BaseSchema
from app.schemas.drive import DriveSummary


# ==========================================
# Overview
# ==========================================

class DashboardOverview(BaseSchema):
    """Headline vaccination numbers and drives in the upcoming window."""

    total_students: int = 0
    vaccinated_count: int = 0
    vaccinated_percent: float = Field(
        default=0.0,
        description="Percentage of students with at least one vaccination (0-100)",
    )
    upcoming_drives_count: int = 0
    upcoming_drives: list[DriveSummary] = []


# ==========================================
# Stats
# ==========================================

class ClassVaccinationStat(BaseSchema):
    """Vaccination coverage for one class label."""

    class_name: str = Field(..., alias="class")
    total: int
    vaccinated: int
    vaccinated_percent: float


class VaccineUsage(BaseSchema):
    """Number of recorded doses per vaccine name."""

    name: str
    count: int


class DashboardStats(BaseSchema):
    """Per-class coverage and vaccine usage."""

    total_students: int
    vaccination_by_class: list[ClassVaccinationStat] = []
    most_used_vaccines: list[VaccineUsage] = []
