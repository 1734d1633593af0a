# backend/tests/conftest.py

import os
import tempfile
import uuid

# settings are read at import time, so the test database has to be
# configured before anything from healthmate is imported
_TEST_DB_DIR = tempfile.mkdtemp(prefix="healthmate-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TEST_DB_DIR, 'test.db')}"
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["LLM_API_KEY"] = ""

import pytest
from fastapi.testclient import TestClient

from healthmate.api.v1.chat import chat_rate_limiter
from healthmate.db.base import Base
from healthmate.db.session import SessionLocal, engine
from healthmate.main import app
from healthmate.models.doctor import Doctor
from healthmate.services.llm_gateway import UnverifiedReply, get_llm_gateway

Base.metadata.create_all(bind=engine)


class FakeGateway:
    """
    Stands in for the LLM gateway; records every call it receives.
    """

    def __init__(self):
        self.calls = []
        self.reply = UnverifiedReply(text="Drink plenty of fluids and rest.")
        self.error = None

    async def answer(self, message, history, language="en"):
        self.calls.append({"message": message, "history": list(history), "language": language})
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def fake_gateway():
    gateway = FakeGateway()
    app.dependency_overrides[get_llm_gateway] = lambda: gateway
    yield gateway
    app.dependency_overrides.pop(get_llm_gateway, None)


@pytest.fixture
def client(fake_gateway):
    return TestClient(app)


def register_and_login(client, email=None, password="testpassword"):
    email = email or f"user-{uuid.uuid4().hex[:10]}@example.com"

    client.post(
        "/api/v1/auth/register",
        json={
            "email": email,
            "password": password,
        },
    )

    response = client.post(
        "/api/v1/auth/login",
        data={
            "username": email,
            "password": password,
        },
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )

    token = response.json()["access_token"]

    return {
        "Authorization": f"Bearer {token}"
    }


@pytest.fixture
def auth_headers(client):
    # a fresh user per test keeps appointments and contacts isolated
    return register_and_login(client)


@pytest.fixture(autouse=True)
def reset_rate_limits():
    chat_rate_limiter.reset()
    yield
    chat_rate_limiter.reset()


@pytest.fixture
def db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def make_doctor(db_session):
    def _make(**overrides):
        values = {
            "name": f"Dr. {uuid.uuid4().hex[:8]}",
            "specialty": "General Physician",
            "address": "12 MG Road, Bengaluru",
            "latitude": 12.9716,
            "longitude": 77.5946,
            "rating": 4.5,
            "experience_years": 10,
            "consultation_fee": 500,
            "availability_hours": "Mon-Fri 09:00-17:00",
            "phone": "+91-98450-00000",
            "email": "clinic@example.com",
        }
        values.update(overrides)
        doctor = Doctor(**values)
        db_session.add(doctor)
        db_session.commit()
        db_session.refresh(doctor)
        return doctor

    return _make


@pytest.fixture
def other_auth_headers(client):
    return register_and_login(client)
