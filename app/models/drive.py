"""Vaccination drive model."""

import datetime

from sqlalchemy import Boolean, CheckConstraint, Date, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base
from app.models.base import IDMixin, TimestampMixin


class Drive(Base, IDMixin, TimestampMixin):
    """Scheduled vaccination drive with a finite dose inventory."""

    __tablename__ = "vaccination_drives"

    drive_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    vaccine_name: Mapped[str] = mapped_column(String(255), nullable=False)
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False, index=True)
    available_doses: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    grades: Mapped[str] = mapped_column(String(100), nullable=False)
    is_expired: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)

    __table_args__ = (
        CheckConstraint(
            "available_doses >= 0",
            name="ck_drive_available_doses_non_negative",
        ),
    )

    def __repr__(self) -> str:
        return f"<Drive(drive_id={self.drive_id}, vaccine={self.vaccine_name}, doses={self.available_doses})>"
