# src/smarttask/notifications/models.py

from __future__ import annotations

from dataclasses import dataclass

from ..tasks.task_models import Priority


@dataclass(slots=True)
class Notification:
    """
    A reminder shown in the notification panel.

    task_name is free text copied from the reminder agent; it is not guaranteed
    to match a live task.
    """

    id: str
    message: str
    task_name: str
    priority: Priority
    timestamp: str
    read: bool = False
    suggested_action: str | None = None
    batch_id: str | None = None
