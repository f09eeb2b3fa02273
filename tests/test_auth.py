from app.core.security import create_access_token, hash_password, verify_access_token
from app.models import User, UserRole
from app.services.auth import AuthService


def _login(client, username="admin", password="admin"):
    return client.post("/api/v1/auth/login", json={"userName": username, "password": password})


def test_default_user_is_created_once(db_session):
    service = AuthService(db_session)

    assert service.ensure_default_user() is True
    db_session.commit()
    assert service.ensure_default_user() is False


def test_login_and_me(db_session, anon_client):
    AuthService(db_session).ensure_default_user()
    db_session.commit()

    response = _login(anon_client)
    assert response.status_code == 200
    token = response.json()["accessToken"]

    me = anon_client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["userName"] == "admin"
    assert me.json()["role"] == "coordinator"


def test_login_with_wrong_password(db_session, anon_client):
    AuthService(db_session).ensure_default_user()
    db_session.commit()

    response = _login(anon_client, password="wrong")

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "AUTH_FAILED"


def test_invalid_token_is_rejected(anon_client):
    response = anon_client.get("/api/v1/students", headers={"Authorization": "Bearer not-a-token"})

    assert response.status_code == 401


def test_student_account_cannot_create_drives(db_session, anon_client):
    db_session.add(User(username="pupil", password_hash=hash_password("secret"), role=UserRole.STUDENT))
    db_session.commit()
    token = _login(anon_client, "pupil", "secret").json()["accessToken"]

    response = anon_client.post(
        "/api/v1/drives",
        headers={"Authorization": f"Bearer {token}"},
        json={"vaccineName": "Polio", "date": "2099-01-01", "availableDoses": 1, "grades": "5"},
    )

    assert response.status_code == 403


def test_access_token_round_trip():
    token = create_access_token(7, "nurse", UserRole.ADMIN)
    claims = verify_access_token(token)

    assert claims.user_id == 7
    assert claims.role is UserRole.ADMIN
    assert verify_access_token(token + "x") is None
