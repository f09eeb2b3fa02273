"""Vaccination record model."""

import datetime

from sqlalchemy import BigInteger, Date, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base
from app.models.base import IDMixin, TimestampMixin


class VaccinationRecord(Base, IDMixin, TimestampMixin):
    """A dose received by a student under a vaccination drive.

    Owned by its student; the drive is referenced by business key only so a
    record outlives the drive being disabled.
    """

    __tablename__ = "vaccination_records"

    student_pk: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    drive_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    vaccine_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False, index=True)

    # Relationships
    student: Mapped["Student"] = relationship(
        "Student",
        back_populates="vaccination_records",
    )

    __table_args__ = (
        UniqueConstraint(
            "student_pk", "drive_id",
            name="uq_vaccination_student_drive",
        ),
    )

    def __repr__(self) -> str:
        return f"<VaccinationRecord(student_pk={self.student_pk}, drive_id={self.drive_id})>"
