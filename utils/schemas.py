"""
Pydantic schemas shared by the task routes and the task store.

Wire format is camelCase (``dueDate``, ``isOverdue``); snake_case is also
accepted on input.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class TaskStatus(str, Enum):
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"


class SortField(str, Enum):
    CREATED_AT = "createdAt"
    DUE_DATE = "dueDate"
    TITLE = "title"
    STATUS = "status"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# ═══════════════════════════════════════════════════════════════════════════════
# Requests
# ═══════════════════════════════════════════════════════════════════════════════


class TaskCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    due_date: datetime
    status: TaskStatus = TaskStatus.PENDING

    @field_validator("title", "description", mode="before")
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("due_date")
    @classmethod
    def _utc(cls, value: datetime) -> datetime:
        return _as_utc(value)


class TaskUpdate(CamelModel):
    """Partial update; fields left out are not touched."""

    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    due_date: Optional[datetime] = None
    status: Optional[TaskStatus] = None

    @field_validator("title", "description", mode="before")
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("due_date")
    @classmethod
    def _utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(value) if value is not None else None


class TaskStatusUpdate(CamelModel):
    status: TaskStatus


# ═══════════════════════════════════════════════════════════════════════════════
# Records / responses
# ═══════════════════════════════════════════════════════════════════════════════


class OwnerOut(CamelModel):
    id: uuid.UUID
    username: str
    email: str


class UserOut(CamelModel):
    id: uuid.UUID
    username: str
    email: str
    created_at: datetime
    updated_at: datetime


class TaskRecord(CamelModel):
    """A task as read from the store, with its owner joined in."""

    id: uuid.UUID
    title: str
    description: Optional[str] = None
    due_date: datetime
    status: TaskStatus
    owner: OwnerOut
    created_at: datetime
    updated_at: datetime

    def is_overdue(self, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now(timezone.utc)
        return self.due_date < now and self.status != TaskStatus.COMPLETED


class TaskOut(TaskRecord):
    overdue: bool = Field(..., alias="isOverdue")

    @classmethod
    def from_record(cls, record: TaskRecord, now: datetime) -> "TaskOut":
        return cls(**record.model_dump(), overdue=record.is_overdue(now))


class TaskListOut(CamelModel):
    tasks: List[TaskOut]


class TaskDetailOut(CamelModel):
    task: TaskOut


class TaskMessageOut(CamelModel):
    message: str
    task: TaskOut


class TaskDeletedOut(CamelModel):
    message: str
    deleted_task: TaskOut
