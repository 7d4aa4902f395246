from __future__ import annotations

import os
from contextlib import asynccontextmanager
from typing import Any, Iterable
from unittest.mock import AsyncMock, MagicMock

import jwt
import pytest
from fastapi.testclient import TestClient

# No database or Firebase project in tests: tokens go through the
# unverified-decode fallback and services are replaced per test.
os.environ["DATABASE_URL"] = ""
os.environ.pop("FIREBASE_SERVICE_ACCOUNT_JSON", None)
os.environ.pop("FIREBASE_STORAGE_BUCKET", None)

from recovery_companion.main import app  # noqa: E402
from recovery_companion.routes import dependencies  # noqa: E402
from recovery_companion.services.photo_service import PhotoService  # noqa: E402
from recovery_companion.services.profile_store import ProfileStore  # noqa: E402
from recovery_companion.services.reminder_service import ReminderService  # noqa: E402
from recovery_companion.services.tracking_service import TrackingService  # noqa: E402

TEST_UID = "firebase-user-0001"
TEST_EMAIL = "patient@recovery.test"


def build_id_token(*, uid: str = TEST_UID, email: str = TEST_EMAIL) -> str:
    return jwt.encode({"sub": uid, "email": email}, "recovery-companion-test-signing-secret", algorithm="HS256")


class FakeResult:
    """Stands in for a SQLAlchemy Result: rows are tuples or dicts."""

    def __init__(self, rows: Iterable[Any] = (), rowcount: int = 0):
        self._rows = list(rows)
        self.rowcount = rowcount

    def mappings(self) -> "FakeResult":
        return self

    def first(self) -> Any:
        return self._rows[0] if self._rows else None

    def all(self) -> list[Any]:
        return list(self._rows)


class FakeSession:
    def __init__(self, results: Iterable[Any]):
        self.execute = AsyncMock(side_effect=list(results))

    @asynccontextmanager
    async def begin(self):
        yield self


class FakeSessionMaker:
    """Callable like an async sessionmaker; every session shares one result queue."""

    def __init__(self, *results: Any):
        self.session = FakeSession(results)

    @asynccontextmanager
    async def _open(self):
        yield self.session

    def __call__(self):
        return self._open()

    def statements(self) -> list[str]:
        return [str(call.args[0]) for call in self.session.execute.await_args_list]

    def params(self, index: int) -> dict[str, Any]:
        statement = self.session.execute.await_args_list[index].args[0]
        return statement.compile().params


@pytest.fixture(autouse=True)
def reset_overrides():
    app.dependency_overrides.clear()
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client() -> TestClient:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {build_id_token()}"}


@pytest.fixture
def profile_store_mock() -> AsyncMock:
    store = AsyncMock(spec=ProfileStore)
    app.dependency_overrides[dependencies.get_profile_store] = lambda: store
    app.dependency_overrides[dependencies.get_optional_profile_store] = lambda: store
    return store


@pytest.fixture
def tracking_mock() -> AsyncMock:
    tracking = AsyncMock(spec=TrackingService)
    app.dependency_overrides[dependencies.get_tracking_service] = lambda: tracking
    return tracking


@pytest.fixture
def reminders_mock() -> AsyncMock:
    reminders = AsyncMock(spec=ReminderService)
    app.dependency_overrides[dependencies.get_reminder_service] = lambda: reminders
    return reminders


@pytest.fixture
def photo_bucket():
    bucket = MagicMock()
    bucket.name = "recovery-test.appspot.com"
    app.dependency_overrides[dependencies.get_photo_service] = lambda: PhotoService(bucket)
    return bucket
