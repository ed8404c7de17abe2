"""
Credential store: user records and password checks.

Emails are lower-cased before they are stored or looked up, so uniqueness
is case-insensitive.  Usernames are compared as given.
"""

from __future__ import annotations

import logging
import uuid
from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from api.errors import DuplicateIdentity
from auth.password import PasswordHasher
from database.models import User

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


async def create_user(
    session: AsyncSession,
    username: str,
    email: str,
    password: str,
    hasher: PasswordHasher,
) -> User:
    """Insert a user; raises ``DuplicateIdentity`` if username or email is taken."""
    email = normalize_email(email)
    result = await session.execute(
        select(User.user_id).where(or_(User.email == email, User.username == username))
    )
    if result.first() is not None:
        raise DuplicateIdentity()

    user = User(
        user_id=uuid.uuid4(),
        username=username,
        email=email,
        password_hash=hasher.hash(password),
    )
    session.add(user)
    # The pre-check is not atomic; a concurrent registration surfaces here.
    try:
        await session.flush()
    except IntegrityError as exc:
        logger.warning("Duplicate registration raced for %s / %s", username, email)
        raise DuplicateIdentity() from exc
    return user


async def find_by_email(session: AsyncSession, email: str) -> Optional[User]:
    result = await session.execute(
        select(User).where(User.email == normalize_email(email))
    )
    return result.scalar_one_or_none()


async def find_by_id(session: AsyncSession, user_id: uuid.UUID) -> Optional[User]:
    return await session.get(User, user_id)


def verify_password(hasher: PasswordHasher, user: User, candidate: str) -> bool:
    return hasher.verify(candidate, user.password_hash)
