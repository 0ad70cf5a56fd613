# src/smarttask/notifications/store.py

from __future__ import annotations

import logging
from collections.abc import Iterable

from ..core.observable import Observable
from .models import Notification

logger = logging.getLogger(__name__)


class NotificationStore(Observable):
    """
    Reminder notifications, most recent first.

    Notifications are never deleted by normal operation; `read` only goes False -> True.
    """

    def __init__(self, notifications: Iterable[Notification] | None = None) -> None:
        super().__init__()
        self._items: list[Notification] = list(notifications or [])

    def __len__(self) -> int:
        return len(self._items)

    def all(self) -> list[Notification]:
        return list(self._items)

    def get(self, notification_id: str) -> Notification | None:
        for n in self._items:
            if n.id == notification_id:
                return n
        return None

    def push_reminder(self, notification: Notification) -> None:
        self._items.insert(0, notification)
        logger.debug("Notification pushed id=%s task=%r", notification.id, notification.task_name)
        self._changed()

    def mark_read(self, notification_id: str) -> bool:
        n = self.get(notification_id)
        if n is None or n.read:
            return False
        n.read = True
        self._changed()
        return True

    def mark_all_read(self) -> int:
        """Mark every notification read; returns how many changed."""
        changed = 0
        for n in self._items:
            if not n.read:
                n.read = True
                changed += 1
        if changed:
            logger.debug("Marked %d notification(s) read", changed)
            self._changed()
        return changed

    def unread_count(self) -> int:
        return sum(1 for n in self._items if not n.read)

    def replace_all(self, notifications: Iterable[Notification]) -> None:
        self._items = list(notifications)
        self._changed()

    def clear(self) -> None:
        self.replace_all([])
