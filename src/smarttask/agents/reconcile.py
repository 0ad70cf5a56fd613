# src/smarttask/agents/reconcile.py

"""
Merge agent output into the authoritative stores.

Task suggestions:
- matched to existing tasks by case-insensitive substring containment (either direction)
- first match in store order wins; no scoring
- unmatched suggestions never create tasks

Reminders:
- one unread Notification per reminder entry, all sharing one batch id
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Final

from ..notifications.models import Notification
from ..tasks.task_models import Priority, Task, new_id, utc_now_iso
from ..tasks.task_store import TaskStore
from .payloads import ReminderReport, TaskSuggestion

logger = logging.getLogger(__name__)

DEFAULT_REMINDER_MESSAGE: Final[str] = "You have a task that needs attention."
DEFAULT_REMINDER_TASK_NAME: Final[str] = "Unknown Task"


@dataclass(slots=True, frozen=True)
class MergeOutcome:
    suggestion: TaskSuggestion
    task_id: str | None
    changed: bool

    @property
    def matched(self) -> bool:
        return self.task_id is not None


def titles_match(suggested_name: str, title: str) -> bool:
    a = suggested_name.strip().lower()
    b = title.strip().lower()
    if not a or not b:
        return False
    return a in b or b in a


def find_match(tasks: Sequence[Task], suggested_name: str | None) -> Task | None:
    if not suggested_name:
        return None
    for task in tasks:
        if titles_match(suggested_name, task.title):
            return task
    return None


def reconcile_suggestions(store: TaskStore, suggestions: Iterable[TaskSuggestion]) -> list[MergeOutcome]:
    """Apply each suggestion to its matching task (if any). Returns one outcome per suggestion."""
    outcomes: list[MergeOutcome] = []
    with store.batch():
        for s in suggestions:
            match = find_match(store.all(), s.task_name)
            if match is None:
                logger.debug("Suggestion %r matched no task", s.task_name)
                outcomes.append(MergeOutcome(suggestion=s, task_id=None, changed=False))
                continue
            changed = store.merge_suggestion(
                match.id,
                priority=s.priority,
                estimated_time=s.estimated_time,
                subtasks=s.subtasks,
            )
            outcomes.append(MergeOutcome(suggestion=s, task_id=match.id, changed=changed))

    matched = sum(1 for o in outcomes if o.matched)
    logger.info("Reconciled %d suggestion(s): matched=%d changed=%d",
                len(outcomes), matched, sum(1 for o in outcomes if o.changed))
    return outcomes


def build_notifications(
    report: ReminderReport,
    *,
    batch_id: str | None = None,
    clock: Callable[[], str] = utc_now_iso,
) -> list[Notification]:
    batch_id = batch_id or new_id()
    out: list[Notification] = []
    for r in report.reminders:
        out.append(
            Notification(
                id=new_id(),
                message=r.reminder_message or DEFAULT_REMINDER_MESSAGE,
                task_name=r.task_name or DEFAULT_REMINDER_TASK_NAME,
                priority=Priority.parse(r.priority) or Priority.MEDIUM,
                timestamp=clock(),
                read=False,
                suggested_action=r.suggested_action,
                batch_id=batch_id,
            )
        )
    return out
