"""
Task and user operations.

Each function takes the request's Session explicitly and commits its own
write. Expected failures come back as an Outcome; store errors
(SQLAlchemyError) propagate to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from task_tracker.errors import NotFound, Outcome, ReferentialViolation, ValidationError
from task_tracker.models import PRIORITIES, STATUS_COMPLETE, STATUS_OPEN, Task, User
from task_tracker.queries import task_columns
from task_tracker.utils import is_blank, parse_id

logger = logging.getLogger(__name__)

USER_ORDERINGS = {"username": User.username, "id": User.id}


@contextmanager
def _write(db: Session) -> Iterator[None]:
    """Commit on success; roll back and re-raise on a store error."""
    try:
        yield
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise


def _validate_task_fields(title, assigned_user_id, priority) -> tuple[Optional[tuple[str, int, str]], Optional[ValidationError]]:
    if is_blank(title) or is_blank(assigned_user_id) or is_blank(priority):
        return None, ValidationError("title, user and priority are required")
    if not isinstance(title, str):
        return None, ValidationError(f"invalid title: {title!r}")
    user_id = parse_id(assigned_user_id)
    if user_id is None:
        return None, ValidationError(f"invalid user id: {assigned_user_id!r}")
    if priority not in PRIORITIES:
        return None, ValidationError(f"invalid priority: {priority!r}")
    return (title.strip(), user_id, priority), None


# -------------------------
# TASKS
# -------------------------
def create_task(db: Session, title, assigned_user_id, priority) -> Outcome:
    fields, error = _validate_task_fields(title, assigned_user_id, priority)
    if error:
        return Outcome.failure(error)
    title, user_id, priority = fields

    task = Task(title=title, assigned_user_id=user_id, priority=priority, status=STATUS_OPEN)
    with _write(db):
        db.add(task)
    logger.debug("Task created id=%s user=%s priority=%s", task.id, user_id, priority)
    return Outcome.success(task.id)


def complete_task(db: Session, task_id: int) -> Outcome:
    with _write(db):
        result = db.execute(update(Task).where(Task.id == task_id).values(status=STATUS_COMPLETE))
    logger.debug("Task completed id=%s rows=%s", task_id, result.rowcount)
    return Outcome.success(result.rowcount)


def delete_task(db: Session, task_id: int) -> Outcome:
    with _write(db):
        result = db.execute(delete(Task).where(Task.id == task_id))
    logger.debug("Task deleted id=%s rows=%s", task_id, result.rowcount)
    return Outcome.success(result.rowcount)


def get_task_for_edit(db: Session, task_id: int) -> Outcome:
    row = db.execute(task_columns().where(Task.id == task_id)).first()
    if row is None:
        return Outcome.failure(NotFound(f"task {task_id} not found"))
    return Outcome.success(row)


def update_task(db: Session, task_id: int, title, assigned_user_id, priority) -> Outcome:
    fields, error = _validate_task_fields(title, assigned_user_id, priority)
    if error:
        return Outcome.failure(error)
    title, user_id, priority = fields

    with _write(db):
        result = db.execute(
            update(Task)
            .where(Task.id == task_id)
            .values(title=title, assigned_user_id=user_id, priority=priority)
        )
    logger.debug("Task updated id=%s rows=%s", task_id, result.rowcount)
    return Outcome.success(result.rowcount)


def count_tasks(db: Session) -> int:
    return db.scalar(select(func.count()).select_from(Task)) or 0


# -------------------------
# USERS
# -------------------------
def list_users(db: Session, order_by: str = "username") -> list[User]:
    column = USER_ORDERINGS.get(order_by)
    if column is None:
        raise ValueError(f"unknown user ordering: {order_by!r}")
    return list(db.scalars(select(User).order_by(column.asc())).all())


def create_user(db: Session, username) -> Outcome:
    if is_blank(username):
        return Outcome.failure(ValidationError("username is required"))
    if not isinstance(username, str):
        return Outcome.failure(ValidationError(f"invalid username: {username!r}"))
    username = username.strip()

    stmt = sqlite_insert(User).values(username=username).on_conflict_do_nothing(index_elements=["username"])
    with _write(db):
        result = db.execute(stmt)
    created = bool(result.rowcount)
    logger.debug("User create username=%r created=%s", username, created)
    return Outcome.success(created)


def delete_user(db: Session, user_id: int) -> Outcome:
    try:
        with _write(db):
            result = db.execute(delete(User).where(User.id == user_id))
    except IntegrityError as exc:
        logger.warning("User deletion refused id=%s: %s", user_id, exc.orig)
        return Outcome.failure(
            ReferentialViolation("This user still has assigned tasks; reassign or delete them first.")
        )
    logger.debug("User deleted id=%s rows=%s", user_id, result.rowcount)
    return Outcome.success(result.rowcount)


def count_users(db: Session) -> int:
    return db.scalar(select(func.count()).select_from(User)) or 0
