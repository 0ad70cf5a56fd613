# tests/conftest.py

from __future__ import annotations

from datetime import date
from pathlib import Path
from types import SimpleNamespace

import pytest

from smarttask.core.state import AppState, create_state
from smarttask.tasks.task_store import TaskStore

from .fakes import FakeAgentInvoker, FakeScheduler

TODAY = date(2025, 3, 1)
SCHEDULE_ID = "sched-1"


def fixed_clock() -> str:
    return "2025-03-01T09:00:00+00:00"


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and core modules.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="smarttask-test",
        data_dir=tmp_path,
        sample_data=False,
        task_agent_id="task-agent",
        reminder_agent_id="reminder-agent",
        agent_models=["test/model"],
        schedule_id=SCHEDULE_ID,
        schedule_log_limit=10,
        # deferred log refresh runs on the next loop iteration
        trigger_refresh_delay_seconds=0.0,
        schedule_poll_seconds=60.0,
    )


@pytest.fixture()
def invoker() -> FakeAgentInvoker:
    return FakeAgentInvoker()


@pytest.fixture()
def scheduler() -> FakeScheduler:
    s = FakeScheduler()
    s.add_schedule(SCHEDULE_ID, active=True)
    return s


@pytest.fixture()
def task_store() -> TaskStore:
    return TaskStore(today=lambda: TODAY, clock=fixed_clock)


@pytest.fixture()
def state(
    settings: SimpleNamespace,
    invoker: FakeAgentInvoker,
    scheduler: FakeScheduler,
    task_store: TaskStore,
) -> AppState:
    """AppState wired with deterministic fakes. The stores themselves are real."""
    return create_state(settings, invoker=invoker, scheduler=scheduler, tasks=task_store)
