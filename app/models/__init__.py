"""Database models package."""

from app.models.drive import Drive
from app.models.student import Gender, Student
from app.models.user import User, UserRole
from app.models.vaccination import VaccinationRecord

__all__ = [
    # User
    "User",
    "UserRole",
    # Student
    "Student",
    "Gender",
    "VaccinationRecord",
    # Drive
    "Drive",
]
