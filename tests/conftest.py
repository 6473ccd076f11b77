"""
Shared fixtures.

Configuration is read at import time, so the environment is pointed at a
throwaway SQLite file before anything from homestay is imported.
"""

from __future__ import annotations

import os
import tempfile
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Generator

_TEST_DB_DIR = tempfile.mkdtemp(prefix="homestay-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TEST_DB_DIR, 'test.db')}"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["PUSH_ENABLED"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.engine import Engine  # noqa: E402

import homestay.models.bookings  # noqa: E402,F401
import homestay.models.kyc  # noqa: E402,F401
import homestay.models.listings  # noqa: E402,F401
import homestay.models.messages  # noqa: E402,F401
import homestay.models.notifications  # noqa: E402,F401
import homestay.models.reviews  # noqa: E402,F401
import homestay.models.tax  # noqa: E402,F401
import homestay.models.users  # noqa: E402,F401
from homestay.auth import create_access_token  # noqa: E402
from homestay.db.engine import engine as app_engine  # noqa: E402
from homestay.db.writers.listings import insert_listing, update_listing  # noqa: E402
from homestay.db.writers.users import insert_user  # noqa: E402
from homestay.models.base import Base  # noqa: E402

# Fixed reference time for booking scenarios so dates never fall into the past
NOW = datetime(2025, 2, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """Fresh schema per test on the application's engine."""
    Base.metadata.drop_all(app_engine)
    Base.metadata.create_all(app_engine)
    yield app_engine
    Base.metadata.drop_all(app_engine)


@pytest.fixture
def make_user(engine: Engine) -> Callable[..., str]:
    """Insert a user and return its id."""
    counter = {"n": 0}

    def _make(**overrides: Any) -> str:
        counter["n"] += 1
        values = {
            "email": f"user{counter['n']}@example.com",
            "first_name": f"User{counter['n']}",
            "last_name": "Test",
            **overrides,
        }
        with engine.begin() as conn:
            return insert_user(conn, values)

    return _make


@pytest.fixture
def host_id(make_user: Callable[..., str]) -> str:
    return make_user(first_name="Hana", is_host=True, role="host", host_since=NOW)


@pytest.fixture
def guest_id(make_user: Callable[..., str]) -> str:
    return make_user(first_name="Omar")


@pytest.fixture
def make_listing(engine: Engine) -> Callable[..., str]:
    """Insert a published listing and return its id."""

    def _make(host: str, active: bool = True, **overrides: Any) -> str:
        values = {
            "title": "Nile view apartment",
            "property_type": "apartment",
            "city": "Cairo",
            "area": "Zamalek",
            "max_guests": 4,
            "monthly_price": 100.0,
            "cleaning_fee": 50.0,
            "min_nights": 1,
            "max_nights": 30,
            **overrides,
        }
        with engine.begin() as conn:
            listing_id = insert_listing(conn, host, values)
            if active:
                update_listing(conn, listing_id, {"status": "active", "is_active": True})
        return listing_id

    return _make


@pytest.fixture
def listing_id(make_listing: Callable[..., str], host_id: str) -> str:
    return make_listing(host_id)


def auth_headers(user_id: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


def future(days: int, hours: int = 0) -> datetime:
    """Midnight UTC ``days`` from today, plus ``hours``."""
    today = datetime.now(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
    return today + timedelta(days=days, hours=hours)


@pytest.fixture
def client(engine: Engine) -> TestClient:
    """FastAPI test client backed by the per-test database."""
    from homestay.main import app

    return TestClient(app)
