from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String
from datetime import datetime
from task_tracker.database import Base

STATUS_OPEN = "Open"
STATUS_COMPLETE = "Complete"
STATUSES = (STATUS_OPEN, STATUS_COMPLETE)

PRIORITY_HIGH = "High"
PRIORITY_MEDIUM = "Medium"
PRIORITY_LOW = "Low"
PRIORITIES = (PRIORITY_HIGH, PRIORITY_MEDIUM, PRIORITY_LOW)


def _in_list(column: str, values) -> str:
    quoted = ", ".join(f"'{v}'" for v in values)
    return f"{column} IN ({quoted})"


class User(Base):
    __tablename__ = "user"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String, unique=True, nullable=False)


class Task(Base):
    __tablename__ = "task"
    __table_args__ = (
        CheckConstraint(_in_list("status", STATUSES), name="ck_task_status"),
        CheckConstraint(_in_list("priority", PRIORITIES), name="ck_task_priority"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String, nullable=False)
    # no ON DELETE action: a user with tasks cannot be removed
    assigned_user_id = Column(Integer, ForeignKey("user.id"), nullable=False)
    status = Column(String, nullable=False, default=STATUS_OPEN, server_default=STATUS_OPEN)
    priority = Column(String, nullable=False, default=PRIORITY_MEDIUM, server_default=PRIORITY_MEDIUM)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
