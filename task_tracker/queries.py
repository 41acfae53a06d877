"""
Task listing query.

Every filter becomes a single SQLAlchemy comparison, which carries its own
bound parameter, so predicate order and parameter order can never diverge.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy import Select, case, false, select
from sqlalchemy.engine import Row
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from task_tracker.models import PRIORITY_HIGH, PRIORITY_LOW, PRIORITY_MEDIUM, Task, User
from task_tracker.utils import active_filter, parse_id

PRIORITY_RANK = {PRIORITY_HIGH: 1, PRIORITY_MEDIUM: 2, PRIORITY_LOW: 3}
UNRANKED = 4

priority_rank = case(PRIORITY_RANK, value=Task.priority, else_=UNRANKED)


@dataclass(frozen=True)
class TaskFilters:
    user_id: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None

    def predicates(self) -> list[ColumnElement[bool]]:
        preds: list[ColumnElement[bool]] = []

        user_id = active_filter(self.user_id)
        if user_id is not None:
            parsed = parse_id(user_id)
            preds.append(Task.assigned_user_id == parsed if parsed is not None else false())

        status = active_filter(self.status)
        if status is not None:
            preds.append(Task.status == status)

        priority = active_filter(self.priority)
        if priority is not None:
            preds.append(Task.priority == priority)

        return preds


def task_columns() -> Select:
    return select(
        Task.id,
        Task.title,
        Task.status,
        Task.priority,
        Task.created_at,
        Task.assigned_user_id,
        User.username,
    ).join(User, Task.assigned_user_id == User.id)


def build_task_listing(filters: Optional[TaskFilters] = None) -> Select:
    stmt = task_columns()
    preds = (filters or TaskFilters()).predicates()
    if preds:
        stmt = stmt.where(*preds)
    return stmt.order_by(priority_rank.asc(), Task.id.desc())


def list_tasks(db: Session, filters: Optional[TaskFilters] = None) -> list[Row]:
    return list(db.execute(build_task_listing(filters)).all())
