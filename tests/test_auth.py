from datetime import timedelta

from config.settings import settings
from models.users import User as UserModel
from utils.security import create_session_token, get_password_hash

TEAMLEAD_PASSWORD = "lead-pass-123"


def test_login_sets_cookie_and_returns_token(client, users):
    response = client.post("/api/auth/login", json={"email": "Lead@Example.com", "password": TEAMLEAD_PASSWORD})
    assert response.status_code == 200
    body = response.json()
    assert body["token"]
    assert body["user"] == {"user_id": users["lead"].id, "name": "Lena Lead",
                            "email": "lead@example.com", "role": "TeamLead"}
    assert settings.SESSION_COOKIE_NAME in response.cookies

    session = client.get("/api/auth/session", cookies={settings.SESSION_COOKIE_NAME: body["token"]})
    assert session.status_code == 200
    assert session.json()["role"] == "TeamLead"


def test_wrong_password_is_401(client, users):
    response = client.post("/api/auth/login", json={"email": "lead@example.com", "password": "nope"})
    assert response.status_code == 401
    assert response.json()["error"]["message"] == "Invalid email or password"
    assert response.headers["www-authenticate"] == "Bearer"


def test_student_without_password_cannot_log_in(client, users):
    response = client.post("/api/auth/login", json={"email": "alice@example.com", "password": ""})
    assert response.status_code == 401


def test_session_requires_token(client, users):
    assert client.get("/api/auth/session").status_code == 401
    bad = client.get("/api/auth/session", headers={"Authorization": "Basic abc"})
    assert bad.status_code == 401


def test_expired_token_is_rejected(client, users):
    token = create_session_token({"sub": str(users["lead"].id), "role": "TeamLead"},
                                 expires_delta=timedelta(minutes=-5))
    response = client.get("/api/auth/session", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHORIZED"


def test_logout_clears_cookie(client, users):
    response = client.post("/api/auth/logout")
    assert response.status_code == 200
    assert settings.SESSION_COOKIE_NAME in response.headers.get("set-cookie", "")


def test_token_with_non_numeric_subject_is_401(client, users):
    token = create_session_token({"sub": "lead@example.com", "role": "TeamLead"})
    response = client.get("/api/auth/session", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json()["error"]["message"] == "Invalid session"


def test_login_matches_stored_email_case_insensitively(client, db):
    db.add(UserModel(name="Mixed Case", email="Mixed.Case@Example.com", role="TeamLead",
                     password_hash=get_password_hash("mixed-pass-1")))
    db.commit()
    response = client.post("/api/auth/login", json={"email": "mixed.case@example.com", "password": "mixed-pass-1"})
    assert response.status_code == 200
