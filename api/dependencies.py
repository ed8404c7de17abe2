"""
FastAPI dependencies (shared across routes).

Everything is resolved from ``app.state``, which ``create_app`` fills from
the ``Settings`` it was given.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import AsyncGenerator, Callable

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from auth.jwt import TokenService
from auth.password import PasswordHasher

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


async def db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Per-request session; commits on success, rolls back on error."""
    async with request.app.state.db.session() as session:
        yield session


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_clock() -> Clock:
    """Source of "now" for due-date checks; overridden in tests."""
    return _utcnow
