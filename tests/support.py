"""Shared fixtures: a controllable clock and an API test case wired to in-memory SQLite."""

import unittest
from datetime import UTC, datetime, timedelta

from fastapi.testclient import TestClient

from hacktrack.api.deps import get_login_throttle, get_session_registry
from hacktrack.core.database import SessionLocal, engine
from hacktrack.main import app
from hacktrack.models import Base
from hacktrack.services.auth import LoginThrottle
from hacktrack.services.sessions import SessionRegistry
from hacktrack.services.users import UserStore

T0 = datetime(2026, 1, 1, 9, 0, tzinfo=UTC)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime = T0) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class DatabaseTestCase(unittest.TestCase):
    """Fresh schema per test."""

    def setUp(self) -> None:
        Base.metadata.create_all(bind=engine)
        self.db = SessionLocal()

    def tearDown(self) -> None:
        self.db.close()
        Base.metadata.drop_all(bind=engine)

    def user_store(self) -> UserStore:
        """Store over the test session, with cached rows expired so API writes are visible."""
        self.db.expire_all()
        return UserStore(self.db)


class ApiTestCase(DatabaseTestCase):
    """TestClient with a fresh session registry and throttle on a fake clock."""

    def setUp(self) -> None:
        super().setUp()
        self.clock = FakeClock()
        self.registry = SessionRegistry(clock=self.clock)
        self.throttle = LoginThrottle(
            max_attempts=3, lockout=timedelta(seconds=30), clock=self.clock
        )
        app.dependency_overrides[get_session_registry] = lambda: self.registry
        app.dependency_overrides[get_login_throttle] = lambda: self.throttle
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        super().tearDown()

    def add_user(self, username: str, password: str, role: str) -> None:
        UserStore(self.db).create(username=username, password=password, role=role, created_by="test")

    def login(self, username: str, password: str, remember: bool = False) -> str:
        response = self.client.post(
            "/api/login",
            json={"username": username, "password": password, "remember": remember},
        )
        self.assertEqual(response.status_code, 200, response.text)
        return response.json()["token"]

    def bearer(self, token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    def token_for(self, username: str, role: str, password: str = "secret-pw") -> str:
        self.add_user(username, password, role)
        return self.login(username, password)
