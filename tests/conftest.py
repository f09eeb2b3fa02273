"""Shared fixtures: in-memory SQLite database and API clients."""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SCHEDULER_ENABLED"] = "false"

from datetime import date, timedelta  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.core.config import settings  # noqa: E402
from app.core.database import Base, SessionLocal, engine  # noqa: E402
from app.core.dependencies import Principal, get_current_principal  # noqa: E402
from app.main import app  # noqa: E402
from app.models import Drive, Gender, Student, UserRole, VaccinationRecord  # noqa: E402


@pytest.fixture(autouse=True)
def database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def principal():
    return Principal(user_id=1, username="nurse", role=UserRole.COORDINATOR)


@pytest.fixture
def client(principal, tmp_path, monkeypatch):
    """Client authenticated as a coordinator."""
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path / "uploads"))
    app.dependency_overrides[get_current_principal] = lambda: principal
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def anon_client():
    """Client that goes through real token authentication."""
    app.dependency_overrides.clear()
    return TestClient(app)


@pytest.fixture
def make_student(db_session):
    def _make(
        student_id,
        name="Asha Rao",
        class_name="5A",
        gender=Gender.FEMALE,
        dob=date(2014, 3, 2),
        vaccinations=(),
    ):
        student = Student(
            student_id=student_id,
            name=name,
            class_name=class_name,
            gender=gender,
            dob=dob,
            vaccination_records=[
                VaccinationRecord(drive_id=drive_id, vaccine_name=vaccine, date=when)
                for drive_id, vaccine, when in vaccinations
            ],
        )
        db_session.add(student)
        db_session.commit()
        return student

    return _make


@pytest.fixture
def make_drive(db_session):
    def _make(
        drive_id,
        vaccine_name="Polio",
        when=None,
        doses=10,
        grades="5,6",
        is_expired=False,
    ):
        drive = Drive(
            drive_id=drive_id,
            vaccine_name=vaccine_name,
            date=when or date.today() + timedelta(days=7),
            available_doses=doses,
            grades=grades,
            is_expired=is_expired,
        )
        db_session.add(drive)
        db_session.commit()
        return drive

    return _make
