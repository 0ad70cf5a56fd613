# src/smarttask/tasks/task_store.py

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import date

from ..core.observable import Observable
from .task_models import (
    PRIORITY_FILTER_ALL,
    Priority,
    SubTask,
    Task,
    TaskColumns,
    TaskDraft,
    TaskInsights,
    TaskStatus,
    new_id,
    utc_now_iso,
)

logger = logging.getLogger(__name__)


def _local_today() -> date:
    """The user's calendar date; deadlines are entered as local dates."""
    return date.today()


class TaskStore(Observable):
    """
    In-memory task collection.

    Ordering:
    - tasks are kept in insertion order; every derived view preserves it

    Invariants:
    - completed_at is set iff status == COMPLETED
    - COMPLETED is terminal (no operation moves a task out of it)
    """

    def __init__(
        self,
        tasks: Iterable[Task] | None = None,
        *,
        today: Callable[[], date] = _local_today,
        clock: Callable[[], str] = utc_now_iso,
    ) -> None:
        super().__init__()
        self._tasks: list[Task] = list(tasks or [])
        self._today = today
        self._clock = clock
        logger.info("TaskStore ready total=%s", len(self._tasks))

    # ---- low-level helpers ----

    def _find(self, task_id: str) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def _status_for_deadline(self, deadline: str | None) -> TaskStatus:
        if not deadline:
            return TaskStatus.TODAY
        # ISO calendar dates compare correctly as strings.
        return TaskStatus.TODAY if deadline <= self._today().isoformat() else TaskStatus.UPCOMING

    # ---- reads ----

    def __len__(self) -> int:
        return len(self._tasks)

    def all(self) -> list[Task]:
        return list(self._tasks)

    def get(self, task_id: str) -> Task | None:
        return self._find(task_id)

    def active(self) -> list[Task]:
        return [t for t in self._tasks if not t.is_completed]

    def resolve_id(self, prefix: str) -> str | None:
        """Return the id of the only task whose id starts with prefix (exact match wins)."""
        prefix = (prefix or "").strip()
        if not prefix:
            return None
        if self._find(prefix) is not None:
            return prefix
        hits = [t.id for t in self._tasks if t.id.startswith(prefix)]
        return hits[0] if len(hits) == 1 else None

    def columns(self, priority_filter: str | Priority = PRIORITY_FILTER_ALL) -> TaskColumns:
        """
        Partition by status, then apply the priority filter to each partition.

        priority_filter is "all" or one of the four levels; anything else is treated as "all".
        """
        wanted = None if priority_filter == PRIORITY_FILTER_ALL else Priority.parse(priority_filter)

        def keep(t: Task) -> bool:
            return wanted is None or t.priority == wanted

        return TaskColumns(
            today=[t for t in self._tasks if t.status == TaskStatus.TODAY and keep(t)],
            upcoming=[t for t in self._tasks if t.status == TaskStatus.UPCOMING and keep(t)],
            completed=[t for t in self._tasks if t.status == TaskStatus.COMPLETED and keep(t)],
        )

    def insights(self) -> TaskInsights:
        active = self.active()
        by_priority = {p: sum(1 for t in active if t.priority == p) for p in Priority}
        total = len(self._tasks)
        completed = total - len(active)
        rate = round(completed / total * 100) if total else 0
        score = min(100, rate + (20 if total else 0))
        return TaskInsights(
            active_by_priority=by_priority,
            total_active=len(active),
            completed=completed,
            total=total,
            completion_rate=rate,
            productivity_score=score,
        )

    # ---- mutations ----

    def add_task(self, draft: TaskDraft) -> Task | None:
        """Create a task from a draft. Returns None (and changes nothing) for a blank title."""
        title = (draft.title or "").strip()
        if not title:
            logger.debug("add_task rejected: blank title")
            return None

        deadline = (draft.deadline or "").strip() or None
        task = Task(
            id=new_id(),
            title=title,
            description=(draft.description or "").strip(),
            deadline=deadline,
            priority=draft.priority,
            status=self._status_for_deadline(deadline),
            estimated_time="",
            subtasks=[],
            tags=draft.tag_list(),
            created_at=self._clock(),
            completed_at=None,
        )
        self._tasks.append(task)
        logger.debug("Task added id=%s status=%s deadline=%s", task.id, task.status.value, deadline)
        self._changed()
        return task

    def complete_task(self, task_id: str) -> bool:
        task = self._find(task_id)
        if task is None or task.is_completed:
            return False
        task.status = TaskStatus.COMPLETED
        task.completed_at = self._clock()
        logger.info("Task %s -> completed", task_id)
        self._changed()
        return True

    def delete_task(self, task_id: str) -> bool:
        task = self._find(task_id)
        if task is None:
            return False
        self._tasks.remove(task)
        logger.info("Task %s deleted (subtasks=%d)", task_id, len(task.subtasks))
        self._changed()
        return True

    def toggle_subtask(self, task_id: str, subtask_id: str) -> bool:
        task = self._find(task_id)
        if task is None:
            return False
        for sub in task.subtasks:
            if sub.id == subtask_id:
                sub.completed = not sub.completed
                self._changed()
                return True
        return False

    def merge_suggestion(
        self,
        task_id: str,
        *,
        priority: object = None,
        estimated_time: str | None = None,
        subtasks: Iterable[str] | None = None,
    ) -> bool:
        """
        Non-destructive merge of agent-suggested attributes.

        - priority: applied only if it parses to one of the four levels
        - estimated_time: applied whenever non-empty
        - subtasks: applied only if the task has none yet
        Returns True if anything changed.
        """
        task = self._find(task_id)
        if task is None:
            return False

        changed = False

        parsed = Priority.parse(priority)
        if parsed is not None and parsed != task.priority:
            task.priority = parsed
            changed = True

        if estimated_time and estimated_time != task.estimated_time:
            task.estimated_time = estimated_time
            changed = True

        titles = [s for s in (subtasks or []) if isinstance(s, str) and s.strip()]
        if titles and not task.subtasks:
            task.subtasks = [SubTask(id=new_id(), title=s.strip()) for s in titles]
            changed = True

        if changed:
            logger.debug("Task %s merged suggestion", task_id)
            self._changed()
        return changed

    def replace_all(self, tasks: Iterable[Task]) -> None:
        self._tasks = list(tasks)
        self._changed()

    def clear(self) -> None:
        self.replace_all([])
