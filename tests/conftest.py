import os

# Must be set before the app modules read their configuration
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ADMIN_EMAIL"] = "admin@example.com"
os.environ["ADMIN_PASSWORD"] = "admin-password-123"
os.environ["AUTH_REQUIRED"] = "true"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["DB_LOG_SLOW_QUERIES"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.auth import ROLE_ADMIN, ROLE_PATIENT, ROLE_PSYCHIATRIST, create_access_token
from app.database import Base, get_db
from app.main import app
from app.models import Psychiatrist

engine = create_engine(
    "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_psychiatrist(db_session):
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        fields = {
            "name": f"Dr. Example {counter['n']}",
            "specialty": "Adult psychiatry",
            "location": "Boston, MA",
            "bio": "Board-certified psychiatrist.",
            "email": f"doctor{counter['n']}@example.com",
        }
        fields.update(overrides)
        psychiatrist = Psychiatrist(**fields)
        db_session.add(psychiatrist)
        db_session.commit()
        db_session.refresh(psychiatrist)
        return psychiatrist

    return _make


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def psychiatrist_headers():
    def _headers(psychiatrist):
        return bearer(create_access_token(psychiatrist.id, psychiatrist.email, ROLE_PSYCHIATRIST))

    return _headers


@pytest.fixture
def patient_headers():
    def _headers(email, patient_id="patient-1"):
        return bearer(create_access_token(patient_id, email, ROLE_PATIENT))

    return _headers


@pytest.fixture
def admin_headers():
    return bearer(create_access_token("admin", "admin@example.com", ROLE_ADMIN))
