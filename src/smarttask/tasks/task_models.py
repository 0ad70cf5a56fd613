# src/smarttask/tasks/task_models.py

from __future__ import annotations

import secrets
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum


def new_id() -> str:
    """Opaque unique token used for tasks, subtasks, notifications and messages."""
    return secrets.token_hex(12)


def utc_now_iso() -> str:
    return datetime.now(UTC).isoformat()


class TaskStatus(StrEnum):
    """
    Task column.

    Notes:
    - TODAY / UPCOMING are decided once, at creation, from the deadline.
    - COMPLETED is terminal.
    """

    TODAY = "today"
    UPCOMING = "upcoming"
    COMPLETED = "completed"


class Priority(StrEnum):
    URGENT = "urgent"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def parse(cls, raw: object) -> Priority | None:
        """Case-insensitive parse; None for anything that is not one of the four levels."""
        if not isinstance(raw, str):
            return None
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None


PRIORITY_FILTER_ALL = "all"


@dataclass(slots=True)
class SubTask:
    id: str
    title: str
    completed: bool = False


@dataclass(slots=True)
class Task:
    id: str
    title: str
    description: str
    deadline: str | None
    priority: Priority
    status: TaskStatus
    estimated_time: str
    subtasks: list[SubTask]
    tags: list[str]
    created_at: str
    completed_at: str | None = None

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    def subtask_progress(self) -> tuple[int, int, int]:
        """(done, total, percent) for the subtask list; percent is 0 with no subtasks."""
        total = len(self.subtasks)
        done = sum(1 for s in self.subtasks if s.completed)
        percent = round(done / total * 100) if total else 0
        return done, total, percent


@dataclass(slots=True)
class TaskDraft:
    """User-entered fields for a new task. Tags arrive as one comma-separated string."""

    title: str
    description: str = ""
    deadline: str | None = None
    priority: Priority = Priority.MEDIUM
    tags: str = ""

    def tag_list(self) -> list[str]:
        return [t.strip() for t in (self.tags or "").split(",") if t.strip()]


@dataclass(slots=True, frozen=True)
class TaskColumns:
    """Filtered partition of the task collection, one list per status."""

    today: list[Task] = field(default_factory=list)
    upcoming: list[Task] = field(default_factory=list)
    completed: list[Task] = field(default_factory=list)

    def counts(self) -> dict[TaskStatus, int]:
        return {
            TaskStatus.TODAY: len(self.today),
            TaskStatus.UPCOMING: len(self.upcoming),
            TaskStatus.COMPLETED: len(self.completed),
        }


@dataclass(slots=True, frozen=True)
class TaskInsights:
    active_by_priority: dict[Priority, int]
    total_active: int
    completed: int
    total: int
    completion_rate: int
    productivity_score: int
