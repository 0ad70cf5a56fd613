# src/smarttask/core/state.py

from __future__ import annotations

import contextlib
import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from ..agents.controller import AgentSessionController
from ..notifications.store import NotificationStore
from ..schedules.sync import ScheduleSyncController
from ..tasks.task_models import PRIORITY_FILTER_ALL, utc_now_iso
from ..tasks.task_store import TaskStore
from .ports import AgentInvoker, SchedulerClient
from .status import StatusKind, StatusMessage
from .transcript import ChatTranscript

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    """
    The orchestrating layer: owns exactly one instance of each store/controller.

    Readers get snapshots through the stores' read methods; flows in core/chat.py mutate.
    """

    settings: Any

    tasks: TaskStore
    notifications: NotificationStore
    transcript: ChatTranscript
    agents: AgentSessionController
    schedules: ScheduleSyncController

    status: StatusMessage | None = None
    priority_filter: str = PRIORITY_FILTER_ALL
    status_history: list[StatusMessage] = field(default_factory=list)

    @property
    def task_agent_id(self) -> str:
        return str(self.settings.task_agent_id)

    @property
    def reminder_agent_id(self) -> str:
        return str(self.settings.reminder_agent_id)

    def post_status(self, kind: StatusKind, text: str) -> StatusMessage:
        msg = StatusMessage(kind=kind, text=text, timestamp=utc_now_iso())
        self.status = msg
        self.status_history.append(msg)
        logger.info("Status [%s] %s", kind.value, text)
        return msg

    def batch(self) -> contextlib.AbstractContextManager[None]:
        """Group task/notification/transcript mutations into one change notification per store."""
        return _batch_all(self.tasks, self.notifications, self.transcript)


@contextlib.contextmanager
def _batch_all(tasks: TaskStore, notifications: NotificationStore, transcript: ChatTranscript) -> Iterator[None]:
    with tasks.batch(), notifications.batch(), transcript.batch():
        yield


def create_state(
    settings: Any,
    *,
    invoker: AgentInvoker,
    scheduler: SchedulerClient,
    tasks: TaskStore | None = None,
) -> AppState:
    """Wire stores, controllers and agent routes into one AppState."""
    from .chat import register_agent_routes

    task_store = tasks if tasks is not None else TaskStore()
    notifications = NotificationStore()
    transcript = ChatTranscript()

    agents = AgentSessionController(
        invoker,
        transcript,
        batch=lambda: _batch_all(task_store, notifications, transcript),
    )
    schedules = ScheduleSyncController(
        scheduler,
        schedule_id=getattr(settings, "schedule_id", None),
        log_limit=int(getattr(settings, "schedule_log_limit", 10)),
        trigger_refresh_delay=float(getattr(settings, "trigger_refresh_delay_seconds", 3.0)),
    )

    state = AppState(
        settings=settings,
        tasks=task_store,
        notifications=notifications,
        transcript=transcript,
        agents=agents,
        schedules=schedules,
    )
    schedules.on_status = lambda text: state.post_status(StatusKind.SUCCESS, text)
    register_agent_routes(state)
    return state
