"""Shared fixtures; the environment is configured before the package is imported."""

from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

TEST_DB_PATH = Path(tempfile.gettempdir()) / "anonyma_test.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["PASSWORD_HASH_ROUNDS"] = "1000"
os.environ["MAINTENANCE_INTERVAL_SECONDS"] = "3600"
os.environ["TYPING_LIVENESS_SECONDS"] = "5"
os.environ["TYPING_STALENESS_SECONDS"] = "10"

from anonyma.config import get_settings  # noqa: E402

get_settings.cache_clear()

from anonyma.application.use_cases.users import register_user  # noqa: E402
from anonyma.domain.entities import Identity  # noqa: E402
from anonyma.infrastructure.database import (  # noqa: E402
    Base,
    SessionLocal,
    engine,
    initialize_database,
)
from anonyma.infrastructure.notifications import (  # noqa: E402
    NotificationHub,
    RealtimeEventPublisher,
)

DEFAULT_PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def reset_database():
    """Ensure the test database starts from a clean state for each test."""

    Base.metadata.drop_all(bind=engine)
    initialize_database()
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def hub() -> NotificationHub:
    return NotificationHub(capacity=32)


@pytest.fixture()
def publisher(hub: NotificationHub) -> RealtimeEventPublisher:
    return RealtimeEventPublisher(hub)


@pytest.fixture()
def make_user(session):
    """Register a user and return its :class:`Identity`."""

    def _make(username: str) -> Identity:
        return register_user(
            session, username=username, password=DEFAULT_PASSWORD
        ).to_identity()

    return _make


@pytest.fixture()
def anyio_backend() -> str:
    return "asyncio"
