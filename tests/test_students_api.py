from datetime import date, timedelta

from app.core.dependencies import Principal, get_current_principal
from app.main import app
from app.models import UserRole

STUDENT = {
    "studentID": "S1",
    "name": "Asha Rao",
    "class": "5A",
    "gender": "female",
    "dob": "2014-03-02",
}


def test_create_student(client):
    response = client.post("/api/v1/students", json=STUDENT)

    assert response.status_code == 201
    body = response.json()
    assert body["studentID"] == "S1"
    assert body["class"] == "5A"
    assert body["gender"] == "Female"
    assert body["vaccinationRecords"] == []


def test_create_duplicate_student_is_conflict(client):
    client.post("/api/v1/students", json=STUDENT)

    response = client.post("/api/v1/students", json={**STUDENT, "name": "Someone Else"})

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "CONFLICT"


def test_create_student_with_future_dob_fails_validation(client):
    future = (date.today() + timedelta(days=1)).isoformat()

    response = client.post("/api/v1/students", json={**STUDENT, "dob": future})

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_get_unknown_student(client):
    response = client.get("/api/v1/students/nobody")

    assert response.status_code == 404
    assert response.json()["error"]["message"] == "Student not found"


def test_update_student_keeps_business_key(client, make_student):
    make_student("S1", name="Asha Rao", class_name="5A")

    response = client.put("/api/v1/students/S1", json={"name": "Asha R.", "class": "6A"})

    assert response.status_code == 200
    body = response.json()
    assert body["studentID"] == "S1"
    assert body["name"] == "Asha R."
    assert body["class"] == "6A"


def test_update_student_rejects_bad_gender(client, make_student):
    make_student("S1")

    response = client.put("/api/v1/students/S1", json={"gender": "unknown"})

    assert response.status_code == 422


def test_list_students_filters(client, make_student):
    make_student("S1", name="Asha Rao", class_name="5A", vaccinations=[("D1", "Polio", date(2025, 1, 10))])
    make_student("S2", name="Ravi Kumar", class_name="5A")
    make_student("S3", name="Meera Rao", class_name="6B")

    def ids(**params):
        response = client.get("/api/v1/students", params=params)
        assert response.status_code == 200
        return [s["studentID"] for s in response.json()]

    assert ids() == ["S1", "S2", "S3"]
    assert ids(status="vaccinated") == ["S1"]
    assert ids(status="not_vaccinated") == ["S2", "S3"]
    assert ids(name="rao") == ["S1", "S3"]
    assert ids(**{"class": "5A", "status": "not_vaccinated"}) == ["S2"]


def test_list_students_rejects_unknown_status(client):
    response = client.get("/api/v1/students", params={"status": "maybe"})

    assert response.status_code == 422


def test_student_role_cannot_register_students(client):
    app.dependency_overrides[get_current_principal] = lambda: Principal(
        user_id=2, username="pupil", role=UserRole.STUDENT
    )

    response = client.post("/api/v1/students", json=STUDENT)

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "PERMISSION_DENIED"
