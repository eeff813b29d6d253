"""
Test configuration and fixtures: in-memory SQLite shared through a StaticPool,
get_db overridden for the app, a small seeded roster.
"""
import os
from datetime import datetime

# settings are read at import time
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["JWT_SECRET_KEY"] = "test-jwt-secret-key"
os.environ.pop("DB_HOST", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from database.db import Base, get_db
from models.od_requests import ODRequest as ODRequestModel
from models.users import ROLE_ADMIN, ROLE_STUDENT, ROLE_TEAMLEAD, User as UserModel
from utils.security import create_session_token, get_password_hash

test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

TEAMLEAD_PASSWORD = "lead-pass-123"


@pytest.fixture
def engine():
    """The in-memory engine behind the db fixture"""
    return test_engine


@pytest.fixture
def db():
    """Fresh schema per test"""
    Base.metadata.create_all(bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


def _client(db, **kwargs):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app, **kwargs)


@pytest.fixture
def client(db):
    yield _client(db)
    app.dependency_overrides.clear()


@pytest.fixture
def unsafe_client(db):
    """Client that returns 500 responses instead of re-raising server errors"""
    yield _client(db, raise_server_exceptions=False)
    app.dependency_overrides.clear()


@pytest.fixture
def users(db):
    lead = UserModel(name="Lena Lead", email="lead@example.com", role=ROLE_TEAMLEAD,
                     password_hash=get_password_hash(TEAMLEAD_PASSWORD))
    admin = UserModel(name="Adam Admin", email="admin@example.com", role=ROLE_ADMIN,
                      password_hash=get_password_hash("admin-pass-123"))
    alice = UserModel(name="Alice Kumar", email="alice@example.com", sec="A", year=2026, role=ROLE_STUDENT)
    bob = UserModel(name="Bob Raj", email="bob@example.com", sec="B", year=2027, role=ROLE_STUDENT)
    carol = UserModel(name="Carol Singh", email="carol@example.com", sec="A", year=2026, role=ROLE_STUDENT)
    db.add_all([lead, admin, alice, bob, carol])
    db.commit()
    return {"lead": lead, "admin": admin, "alice": alice, "bob": bob, "carol": carol}


def auth_headers_for(user) -> dict:
    token = create_session_token({"sub": str(user.id), "role": user.role, "name": user.name, "email": user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def lead_headers(users):
    return auth_headers_for(users["lead"])


@pytest.fixture
def student_headers(users):
    return auth_headers_for(users["alice"])


@pytest.fixture
def make_request(db, users):
    """Insert an OD request directly into the store"""
    def _make(student="alice", status=0, reason="Development", date=None,
              from_time=datetime(2024, 1, 1, 9, 0), to_time=datetime(2024, 1, 1, 12, 0),
              description="Build the registration page"):
        record = ODRequestModel(
            user_id=users[student].id,
            teamlead_id=users["lead"].id,
            reason=reason,
            description=description,
            from_time=from_time,
            to_time=to_time,
            status=status,
            request_type="OD Request",
            date=date or datetime(2024, 1, 1, 8, 0),
        )
        db.add(record)
        db.commit()
        return record
    return _make
