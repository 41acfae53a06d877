"""Error taxonomy and the typed result returned by store operations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


class TaskTrackerError(Exception):
    """Base class for expected operation failures."""


class ValidationError(TaskTrackerError):
    """A required form field is missing or holds an unusable value."""


class NotFound(TaskTrackerError):
    """The requested row does not exist."""


class ReferentialViolation(TaskTrackerError):
    """The store refused a write because other rows still reference the target."""


@dataclass(frozen=True)
class Outcome:
    value: Any = None
    error: Optional[TaskTrackerError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Any = None) -> "Outcome":
        return cls(value=value)

    @classmethod
    def failure(cls, error: TaskTrackerError) -> "Outcome":
        return cls(error=error)
