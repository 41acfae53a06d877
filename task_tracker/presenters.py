"""Map query rows and ORM objects to the plain dicts the templates render."""

from task_tracker.models import PRIORITIES, STATUSES
from task_tracker.queries import TaskFilters


def _fmt_ts(value):
    return value.strftime("%Y-%m-%d %H:%M") if value else ""


def task_view(row) -> dict:
    return {
        "id": row.id,
        "title": row.title,
        "status": row.status,
        "priority": row.priority,
        "username": row.username,
        "assigned_user_id": row.assigned_user_id,
        "created_at": _fmt_ts(row.created_at),
    }


def user_view(user) -> dict:
    return {"id": user.id, "username": user.username}


def listing_context(tasks, users, filters: TaskFilters) -> dict:
    return {
        "tasks": [task_view(t) for t in tasks],
        "users": [user_view(u) for u in users],
        "statuses": STATUSES,
        "priorities": PRIORITIES,
        "current_user_id": filters.user_id or "all",
        "current_status": filters.status or "all",
        "current_priority": filters.priority or "all",
    }


def edit_context(task, users) -> dict:
    return {
        "task": task_view(task),
        "users": [user_view(u) for u in users],
        "priorities": PRIORITIES,
    }


def users_context(users, error=None) -> dict:
    return {"users": [user_view(u) for u in users], "error": error}
