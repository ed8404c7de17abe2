"""
SQLAlchemy ORM models for users and tasks.

Column types are dialect-neutral so the same models run on PostgreSQL
(asyncpg) in production and SQLite (aiosqlite) in tests.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    TypeDecorator,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """Timezone-aware ``DateTime`` that always round-trips as UTC.

    SQLite drops tzinfo on the way back; values read without it are
    assumed to be UTC.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        if value is not None:
            value = value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    user_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    username = Column(String(30), unique=True, nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)
    updated_at = Column(UTCDateTime, nullable=False, default=utcnow, onupdate=utcnow)


class Task(Base):
    __tablename__ = "tasks"

    # Insertion sequence; tie-breaker for ordering, never exposed.
    seq = Column(Integer, primary_key=True, autoincrement=True)
    task_id = Column(Uuid, unique=True, nullable=False, default=uuid.uuid4)
    user_id = Column(
        Uuid, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False
    )
    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    due_date = Column(UTCDateTime, nullable=False)
    status = Column(String(16), nullable=False, default="Pending")
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)
    updated_at = Column(UTCDateTime, nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index("ix_tasks_user_status", "user_id", "status"),
        Index("ix_tasks_due_date", "due_date"),
        Index("ix_tasks_created_at", "created_at"),
    )
