# tests/test_notification_store.py

from __future__ import annotations

from smarttask.notifications.models import Notification
from smarttask.notifications.store import NotificationStore
from smarttask.tasks.task_models import Priority


def _note(nid: str, *, read: bool = False) -> Notification:
    return Notification(
        id=nid,
        message=f"message {nid}",
        task_name=f"task {nid}",
        priority=Priority.HIGH,
        timestamp="2025-03-01T09:00:00+00:00",
        read=read,
    )


def test_push_reminder_is_most_recent_first() -> None:
    store = NotificationStore()
    store.push_reminder(_note("a"))
    store.push_reminder(_note("b"))
    store.push_reminder(_note("c"))
    assert [n.id for n in store.all()] == ["c", "b", "a"]
    assert store.unread_count() == 3


def test_mark_read_is_monotonic() -> None:
    store = NotificationStore([_note("a"), _note("b")])
    assert store.mark_read("a") is True
    assert store.mark_read("a") is False
    assert store.mark_read("missing") is False
    assert store.get("a").read is True
    assert store.unread_count() == 1


def test_mark_all_read_is_stable() -> None:
    store = NotificationStore([_note("a"), _note("b", read=True), _note("c")])
    notified = []
    store.subscribe(lambda: notified.append(store.unread_count()))

    assert store.mark_all_read() == 2
    assert store.unread_count() == 0
    assert store.mark_all_read() == 0
    assert store.unread_count() == 0
    # second call changed nothing, so it did not notify
    assert notified == [0]
