"""
Task routes, all of them behind ``get_current_user``.

Route prefix: /api/tasks
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import Clock, db_session, get_clock
from api.errors import InvalidIdentifier, NotFound, ValidationError
from auth.dependencies import get_current_user
from database.models import User
from database.task_query import list_tasks
from database.task_store import create_task, delete_task, find_task, update_task
from utils.schemas import (
    TaskCreate,
    TaskDeletedOut,
    TaskDetailOut,
    TaskListOut,
    TaskMessageOut,
    TaskOut,
    TaskStatusUpdate,
    TaskUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["tasks"], dependencies=[Depends(get_current_user)])


def _parse_task_id(task_id: str) -> uuid.UUID:
    try:
        return uuid.UUID(task_id)
    except ValueError:
        raise InvalidIdentifier()


@router.get("", response_model=TaskListOut)
async def get_tasks(
    task_status: Optional[str] = Query(None, alias="status"),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[str] = Query(None, alias="sortOrder"),
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
    clock: Clock = Depends(get_clock),
) -> Dict[str, Any]:
    """List the caller's tasks; ``page``/``limit`` are not supported."""
    records = await list_tasks(session, user.user_id, task_status, sort_by, sort_order)
    now = clock()
    return {"tasks": [TaskOut.from_record(r, now) for r in records]}


@router.post("", response_model=TaskMessageOut, status_code=status.HTTP_201_CREATED)
async def create_task_endpoint(
    data: TaskCreate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
    clock: Clock = Depends(get_clock),
) -> Dict[str, Any]:
    now = clock()
    if data.due_date < now:
        raise ValidationError(
            errors=[{"field": "dueDate", "msg": "Due date cannot be in the past"}]
        )
    record = await create_task(session, user.user_id, data)
    return {
        "message": "Task created successfully",
        "task": TaskOut.from_record(record, now),
    }


@router.get("/{task_id}", response_model=TaskDetailOut)
async def get_task(
    task_id: str,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
    clock: Clock = Depends(get_clock),
) -> Dict[str, Any]:
    record = await find_task(session, _parse_task_id(task_id), user.user_id)
    if record is None:
        raise NotFound()
    return {"task": TaskOut.from_record(record, clock())}


@router.put("/{task_id}", response_model=TaskMessageOut)
async def update_task_endpoint(
    task_id: str,
    patch: TaskUpdate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
    clock: Clock = Depends(get_clock),
) -> Dict[str, Any]:
    record = await update_task(session, _parse_task_id(task_id), user.user_id, patch)
    if record is None:
        raise NotFound()
    return {
        "message": "Task updated successfully",
        "task": TaskOut.from_record(record, clock()),
    }


@router.patch("/{task_id}/status", response_model=TaskMessageOut)
async def update_task_status(
    task_id: str,
    body: TaskStatusUpdate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
    clock: Clock = Depends(get_clock),
) -> Dict[str, Any]:
    patch = TaskUpdate(status=body.status)
    record = await update_task(session, _parse_task_id(task_id), user.user_id, patch)
    if record is None:
        raise NotFound()
    return {
        "message": "Task status updated successfully",
        "task": TaskOut.from_record(record, clock()),
    }


@router.delete("/{task_id}", response_model=TaskDeletedOut)
async def delete_task_endpoint(
    task_id: str,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
    clock: Clock = Depends(get_clock),
) -> Dict[str, Any]:
    record = await delete_task(session, _parse_task_id(task_id), user.user_id)
    if record is None:
        raise NotFound()
    return {
        "message": "Task deleted successfully",
        "deleted_task": TaskOut.from_record(record, clock()),
    }
