import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from backoffice.core.config import Settings
from backoffice.database import get_session
from backoffice.db import models  # noqa: F401


class FakeNotifier:
    def __init__(self):
        self.sent = []

    async def send(self, notification) -> None:
        self.sent.append(notification)

    def last(self, kind: str = None):
        matching = [n for n in self.sent if kind is None or n.kind == kind]
        return matching[-1] if matching else None


@pytest.fixture
def settings():
    return Settings(
        JWT_SECRET_KEY="test-secret",
        BCRYPT_ROUNDS=4,
        RATE_LIMIT_PER_MINUTE=10000,
        NOTIFICATION_BACKENDS="log",
        REDIS_URL=None,
        FRONTEND_URL="http://frontend.test",
    )


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def app(settings, engine, notifier):
    from backoffice.main import create_app

    app = create_app(settings)
    app.state.notification_sender = notifier

    def _session_override():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _session_override
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def register_and_verify(client, notifier):
    """Create a verified admin through the API and return its bearer token."""
    def _register(email="admin@example.com", password="secret123", first_name="Ada", last_name="Admin"):
        resp = client.post("/auth/register", json={
            "firstName": first_name,
            "lastName": last_name,
            "email": email,
            "password": password,
        })
        assert resp.status_code == 201, resp.text
        code = notifier.last("otp").body.split("code is: ")[1].split("\n")[0]
        resp = client.post("/auth/verify-otp", json={"email": email, "otpCode": code})
        assert resp.status_code == 200, resp.text
        return resp.json()["token"]
    return _register


@pytest.fixture
def auth_headers(register_and_verify):
    return {"Authorization": f"Bearer {register_and_verify()}"}
