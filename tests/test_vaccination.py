from datetime import date

import pytest
from sqlalchemy import insert, select, update

from app.core.exceptions import ConflictError, InvalidStateError, NotFoundError
from app.models import Drive, VaccinationRecord
from app.schemas.student import VaccinateRequest
from app.services.vaccination import VaccinationService


def _request(drive, **overrides):
    data = {"drive_id": drive.drive_id, "vaccine_name": drive.vaccine_name, "date": drive.date}
    data.update(overrides)
    return VaccinateRequest(**data)


def _doses(db_session, drive_id):
    db_session.expire_all()
    return db_session.execute(
        select(Drive.available_doses).where(Drive.drive_id == drive_id)
    ).scalar_one()


def test_vaccinate_consumes_one_dose(db_session, make_student, make_drive):
    make_student("S1")
    drive = make_drive("D1", doses=2)

    student = VaccinationService(db_session).vaccinate("S1", _request(drive))
    db_session.commit()

    assert [r.drive_id for r in student.vaccination_records] == ["D1"]
    assert _doses(db_session, "D1") == 1


def test_vaccinate_twice_for_same_drive_is_conflict(db_session, make_student, make_drive):
    make_student("S1")
    drive = make_drive("D1", doses=5)
    service = VaccinationService(db_session)
    service.vaccinate("S1", _request(drive))
    db_session.commit()

    with pytest.raises(ConflictError):
        service.vaccinate("S1", _request(drive))

    assert _doses(db_session, "D1") == 4


def test_vaccinate_without_doses_is_invalid_state(db_session, make_student, make_drive):
    make_student("S1")
    drive = make_drive("D1", doses=0)

    with pytest.raises(InvalidStateError) as exc_info:
        VaccinationService(db_session).vaccinate("S1", _request(drive))

    assert exc_info.value.message == "No available doses left for this drive"
    assert _doses(db_session, "D1") == 0


def test_last_dose_goes_to_one_student(db_session, make_student, make_drive):
    make_student("S1")
    make_student("S2")
    drive = make_drive("D1", doses=1)
    service = VaccinationService(db_session)

    service.vaccinate("S1", _request(drive))
    db_session.commit()
    with pytest.raises(InvalidStateError):
        service.vaccinate("S2", _request(drive))

    assert _doses(db_session, "D1") == 0


def test_dose_taken_after_read_is_invalid_state(db_session, make_student, make_drive):
    make_student("S1")
    drive = make_drive("D1", doses=3)
    # Another transaction spends the last dose; the loaded drive still shows 3
    db_session.execute(
        update(Drive.__table__).where(Drive.__table__.c.drive_id == "D1").values(available_doses=0)
    )
    db_session.commit()

    with pytest.raises(InvalidStateError):
        VaccinationService(db_session).vaccinate("S1", _request(drive))

    assert _doses(db_session, "D1") == 0


def test_record_inserted_after_read_is_conflict_and_keeps_dose(db_session, make_student, make_drive):
    student = make_student("S1")
    drive = make_drive("D1", doses=3)
    # Another transaction records (S1, D1); the loaded student still has no records
    db_session.execute(
        insert(VaccinationRecord.__table__).values(
            student_pk=student.id, drive_id="D1", vaccine_name="Polio", date=drive.date,
        )
    )
    db_session.commit()

    with pytest.raises(ConflictError):
        VaccinationService(db_session).vaccinate("S1", _request(drive))

    assert _doses(db_session, "D1") == 3
    records = db_session.execute(
        select(VaccinationRecord.drive_id).where(VaccinationRecord.student_pk == student.id)
    ).scalars().all()
    assert records == ["D1"]

def test_unknown_student_or_drive(db_session, make_student, make_drive):
    make_student("S1")
    drive = make_drive("D1")
    service = VaccinationService(db_session)

    with pytest.raises(NotFoundError):
        service.vaccinate("missing", _request(drive))
    with pytest.raises(NotFoundError):
        service.vaccinate("S1", _request(drive, drive_id="nope"))


def test_record_takes_vaccine_and_date_from_drive(db_session, make_student, make_drive):
    make_student("S1")
    drive = make_drive("D1", vaccine_name="Measles")

    student = VaccinationService(db_session).vaccinate(
        "S1", _request(drive, vaccine_name="Typo", date=date(2020, 1, 1))
    )

    record = student.vaccination_records[0]
    assert record.vaccine_name == "Measles"
    assert record.date == drive.date


def test_vaccinate_endpoint(client, make_student, make_drive):
    make_student("S1")
    drive = make_drive("D1", doses=3)
    payload = {"driveId": "D1", "vaccineName": "Polio", "date": drive.date.isoformat()}

    response = client.post("/api/v1/students/S1/vaccinate", json=payload)
    assert response.status_code == 200
    body = response.json()
    assert body["studentID"] == "S1"
    assert body["vaccinationRecords"][0]["driveId"] == "D1"

    response = client.post("/api/v1/students/S1/vaccinate", json=payload)
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "CONFLICT"

    drive_response = client.get("/api/v1/drives/D1")
    assert drive_response.json()["availableDoses"] == 2


def test_single_dose_drive_scenario(client, make_student, make_drive):
    make_student("STU001")
    drive = make_drive("drive-1", doses=1)
    payload = {"driveId": "drive-1", "vaccineName": "Polio", "date": drive.date.isoformat()}

    def not_vaccinated():
        response = client.get("/api/v1/students", params={"status": "not_vaccinated"})
        return [s["studentID"] for s in response.json()]

    assert not_vaccinated() == ["STU001"]
    assert client.post("/api/v1/students/STU001/vaccinate", json=payload).status_code == 200
    assert not_vaccinated() == []
    assert client.get("/api/v1/drives/drive-1").json()["availableDoses"] == 0

    response = client.post("/api/v1/students/STU001/vaccinate", json=payload)
    assert response.status_code == 409
