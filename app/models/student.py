"""Student model."""

import enum
from datetime import date

from sqlalchemy import Date, Enum, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base
from app.models.base import IDMixin, TimestampMixin


class Gender(str, enum.Enum):
    """Student gender values."""

    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


class Student(Base, IDMixin, TimestampMixin):
    """Student model with its embedded vaccination history."""

    __tablename__ = "students"

    student_id: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    class_name: Mapped[str] = mapped_column(String(50), nullable=False, index=True)  # 'class' is reserved keyword
    gender: Mapped[Gender] = mapped_column(
        Enum(Gender, name="gender", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    dob: Mapped[date] = mapped_column(Date, nullable=False)

    # Relationships
    vaccination_records: Mapped[list["VaccinationRecord"]] = relationship(
        "VaccinationRecord",
        back_populates="student",
        order_by="VaccinationRecord.id",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Student(student_id={self.student_id}, name={self.name}, class={self.class_name})>"
