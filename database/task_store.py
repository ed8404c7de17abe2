"""
Owner-scoped task persistence.

Every read and write filters on the owning user's id.  A task that exists
but belongs to somebody else is reported exactly like a missing one, so
callers cannot tell whether another user's id exists.
"""

from __future__ import annotations

import logging
import uuid
from typing import Optional

from sqlalchemy import Select, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import Task, User, utcnow
from utils.schemas import OwnerOut, TaskCreate, TaskRecord, TaskUpdate

logger = logging.getLogger(__name__)

# Fields that may not be cleared to null by an update.
_REQUIRED_FIELDS = {"title", "due_date", "status"}


def owned_tasks_query(owner_id: uuid.UUID) -> Select:
    """Tasks of ``owner_id`` joined with their owner's public fields."""
    return (
        select(Task, User.username, User.email)
        .join(User, Task.user_id == User.user_id)
        .where(Task.user_id == owner_id)
    )


def to_record(task: Task, username: str, email: str) -> TaskRecord:
    return TaskRecord(
        id=task.task_id,
        title=task.title,
        description=task.description,
        due_date=task.due_date,
        status=task.status,
        owner=OwnerOut(id=task.user_id, username=username, email=email),
        created_at=task.created_at,
        updated_at=task.updated_at,
    )


async def _load_owned(
    session: AsyncSession, task_id: uuid.UUID, owner_id: uuid.UUID
) -> Optional[Task]:
    result = await session.execute(
        select(Task).where(Task.task_id == task_id, Task.user_id == owner_id)
    )
    return result.scalar_one_or_none()


async def find_task(
    session: AsyncSession, task_id: uuid.UUID, owner_id: uuid.UUID
) -> Optional[TaskRecord]:
    """Return the owner's task, or ``None`` if it is absent or not theirs."""
    result = await session.execute(
        owned_tasks_query(owner_id).where(Task.task_id == task_id)
    )
    row = result.one_or_none()
    if row is None:
        return None
    return to_record(*row)


async def create_task(
    session: AsyncSession, owner_id: uuid.UUID, data: TaskCreate
) -> TaskRecord:
    now = utcnow()
    task = Task(
        task_id=uuid.uuid4(),
        user_id=owner_id,
        title=data.title,
        description=data.description,
        due_date=data.due_date,
        status=data.status.value,
        created_at=now,
        updated_at=now,
    )
    session.add(task)
    await session.flush()
    logger.info("Created task %s for user %s", task.task_id, owner_id)
    return await find_task(session, task.task_id, owner_id)


async def update_task(
    session: AsyncSession,
    task_id: uuid.UUID,
    owner_id: uuid.UUID,
    patch: TaskUpdate,
) -> Optional[TaskRecord]:
    """Apply the fields set on ``patch``; ``None`` if the task is not the owner's."""
    task = await _load_owned(session, task_id, owner_id)
    if task is None:
        return None

    for field, value in patch.model_dump(exclude_unset=True).items():
        if value is None and field in _REQUIRED_FIELDS:
            continue
        if field == "status":
            value = value.value
        setattr(task, field, value)
    task.updated_at = utcnow()

    await session.flush()
    logger.info("Updated task %s for user %s", task_id, owner_id)
    return await find_task(session, task_id, owner_id)


async def delete_task(
    session: AsyncSession, task_id: uuid.UUID, owner_id: uuid.UUID
) -> Optional[TaskRecord]:
    """Delete the owner's task and return it as it was, or ``None``."""
    record = await find_task(session, task_id, owner_id)
    if record is None:
        return None

    await session.execute(
        delete(Task).where(Task.task_id == task_id, Task.user_id == owner_id)
    )
    await session.flush()
    logger.info("Deleted task %s for user %s", task_id, owner_id)
    return record
