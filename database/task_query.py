"""
Task listing: status filter plus a single-field sort.

Parameters are validated before any SQL is issued.  Ordering is total:
ties on the sort field fall back to insertion order, taken in the same
direction as the sort, so an ascending listing is always the exact reverse
of the descending one.

There is no pagination; the owner's full filtered set is returned.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Dict, List, Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession

from api.errors import ValidationError
from database.models import Task
from database.task_store import owned_tasks_query, to_record
from utils.schemas import SortField, SortOrder, TaskRecord, TaskStatus

logger = logging.getLogger(__name__)

_SORT_COLUMNS = {
    SortField.CREATED_AT: Task.created_at,
    SortField.DUE_DATE: Task.due_date,
    SortField.TITLE: Task.title,
    SortField.STATUS: Task.status,
}


@dataclass(frozen=True)
class TaskQuery:
    status: Optional[TaskStatus] = None
    sort_by: SortField = SortField.CREATED_AT
    sort_order: SortOrder = SortOrder.DESC


def _choice(enum_cls, value, field: str, errors: List[Dict[str, str]]):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        errors.append({"field": field, "msg": f"must be one of: {allowed}"})
        return None


def build_query(
    status: Union[TaskStatus, str, None] = None,
    sort_by: Union[SortField, str, None] = None,
    sort_order: Union[SortOrder, str, None] = None,
) -> TaskQuery:
    """Validate raw listing parameters; raises ``ValidationError``."""
    errors: List[Dict[str, str]] = []
    parsed_status = _choice(TaskStatus, status, "status", errors) if status is not None else None
    parsed_sort = _choice(SortField, sort_by, "sortBy", errors) if sort_by is not None else SortField.CREATED_AT
    parsed_order = _choice(SortOrder, sort_order, "sortOrder", errors) if sort_order is not None else SortOrder.DESC
    if errors:
        raise ValidationError(errors=errors)
    return TaskQuery(status=parsed_status, sort_by=parsed_sort, sort_order=parsed_order)


async def list_tasks(
    session: AsyncSession,
    owner_id: uuid.UUID,
    status: Union[TaskStatus, str, None] = None,
    sort_by: Union[SortField, str, None] = None,
    sort_order: Union[SortOrder, str, None] = None,
) -> List[TaskRecord]:
    """Return every task of ``owner_id`` matching the filter, sorted."""
    query = build_query(status, sort_by, sort_order)

    stmt = owned_tasks_query(owner_id)
    if query.status is not None:
        stmt = stmt.where(Task.status == query.status.value)

    column = _SORT_COLUMNS[query.sort_by]
    if query.sort_order is SortOrder.ASC:
        stmt = stmt.order_by(column.asc(), Task.seq.asc())
    else:
        stmt = stmt.order_by(column.desc(), Task.seq.desc())

    result = await session.execute(stmt)
    records = [to_record(*row) for row in result.all()]
    logger.debug(
        "Listed %d tasks for user %s (status=%s, sort=%s %s)",
        len(records), owner_id, query.status, query.sort_by.value, query.sort_order.value,
    )
    return records
