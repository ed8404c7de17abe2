"""
Shared fixtures.

Environment variables are set before any project import because ``main``
builds its module-level app from ``Settings()`` at import time.
"""

import os

os.environ.setdefault("JWT_SECRET", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from datetime import datetime, timedelta, timezone

import httpx
import pytest

from api.dependencies import get_clock
from config.settings import Settings
from database.session import Database
from main import create_app


class FixedClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def settings():
    return Settings(
        jwt_secret="test-secret-key",
        database_url="sqlite+aiosqlite:///:memory:",
        bcrypt_rounds=4,
    )


@pytest.fixture
async def db(settings):
    database = Database(settings)
    await database.create_all()
    yield database
    await database.dispose()


@pytest.fixture
async def session(db):
    async with db.session_factory() as s:
        yield s


@pytest.fixture
def clock():
    return FixedClock(datetime.now(timezone.utc).replace(microsecond=0))


@pytest.fixture
async def app(settings, clock):
    application = create_app(settings)
    application.dependency_overrides[get_clock] = lambda: clock
    await application.state.db.create_all()
    yield application
    await application.state.db.dispose()


@pytest.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


async def register(client, username="alice", email="alice@example.com", password="secret123"):
    """Register a user through the API and return its bearer headers."""
    resp = await client.post(
        "/api/auth/register",
        json={"username": username, "email": email, "password": password},
    )
    assert resp.status_code == 201, resp.text
    return {"Authorization": f"Bearer {resp.json()['token']}"}
