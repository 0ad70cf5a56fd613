# tests/test_schedule_sync.py

from __future__ import annotations

import httpx
import pytest

from smarttask.schedules.sync import ScheduleSyncController

from .conftest import SCHEDULE_ID
from .fakes import FakeScheduler


def _controller(scheduler: FakeScheduler, **kw) -> ScheduleSyncController:
    kw.setdefault("trigger_refresh_delay", 0.0)
    return ScheduleSyncController(scheduler, schedule_id=SCHEDULE_ID, **kw)


@pytest.mark.asyncio
async def test_initial_load_fetches_schedules_and_logs(scheduler: FakeScheduler) -> None:
    ctl = _controller(scheduler)
    await ctl.initial_load()

    assert sorted(scheduler.names()) == ["get_schedule_logs", "list_schedules"]
    assert ctl.current is not None and ctl.current.is_active
    assert ctl.error is None
    assert not ctl.loading


@pytest.mark.asyncio
async def test_refresh_failure_keeps_previous_list(scheduler: FakeScheduler) -> None:
    ctl = _controller(scheduler)
    assert await ctl.refresh_schedules()

    scheduler.failures["list_schedules"] = "backend down"
    assert not await ctl.refresh_schedules()
    assert ctl.error == "backend down"
    assert [s.id for s in ctl.schedules] == [SCHEDULE_ID]

    scheduler.failures["list_schedules"] = httpx.ConnectError("refused")
    assert not await ctl.refresh_schedules()
    assert ctl.error == "Failed to load schedules"
    assert not ctl.loading

    scheduler.failures.clear()
    assert await ctl.refresh_schedules()
    assert ctl.error is None


@pytest.mark.asyncio
async def test_toggle_pauses_then_refetches(scheduler: FakeScheduler) -> None:
    ctl = _controller(scheduler)
    await ctl.refresh_schedules()
    scheduler.calls.clear()

    assert await ctl.toggle()

    assert scheduler.names() == ["pause_schedule", "list_schedules"]
    assert ctl.current is not None and ctl.current.is_active is False


@pytest.mark.asyncio
async def test_toggle_reflects_server_value_not_local_assumption(scheduler: FakeScheduler) -> None:
    ctl = _controller(scheduler)
    await ctl.refresh_schedules()

    # The server accepts the pause but the schedule stays active (e.g. a pinned schedule).
    original_pause = scheduler.pause_schedule

    async def _pause_ignored(schedule_id: str):
        result = await original_pause(schedule_id)
        scheduler.server[schedule_id]["is_active"] = True
        return result

    scheduler.pause_schedule = _pause_ignored  # type: ignore[method-assign]

    await ctl.toggle()
    assert ctl.current is not None and ctl.current.is_active is True


@pytest.mark.asyncio
async def test_toggle_resumes_paused_schedule(scheduler: FakeScheduler) -> None:
    scheduler.server[SCHEDULE_ID]["is_active"] = False
    ctl = _controller(scheduler)
    await ctl.refresh_schedules()
    scheduler.calls.clear()

    await ctl.toggle()

    assert scheduler.names() == ["resume_schedule", "list_schedules"]
    assert ctl.current is not None and ctl.current.is_active is True


@pytest.mark.asyncio
async def test_toggle_unknown_schedule_calls_nothing(scheduler: FakeScheduler) -> None:
    ctl = _controller(scheduler)

    assert not await ctl.toggle()
    assert ctl.error == "Schedule not found"
    assert scheduler.calls == []


@pytest.mark.asyncio
async def test_toggle_failure_still_refetches(scheduler: FakeScheduler) -> None:
    ctl = _controller(scheduler)
    await ctl.refresh_schedules()
    scheduler.calls.clear()
    scheduler.failures["pause_schedule"] = httpx.ReadTimeout("slow")

    assert not await ctl.toggle()
    assert scheduler.names() == ["pause_schedule", "list_schedules"]
    assert ctl.error == "Failed to toggle schedule"
    assert ctl.current is not None and ctl.current.is_active is True


@pytest.mark.asyncio
async def test_trigger_reports_status_and_refreshes_logs_once(scheduler: FakeScheduler) -> None:
    statuses: list[str] = []
    ctl = _controller(scheduler, on_status=statuses.append)
    await ctl.refresh_schedules()
    scheduler.calls.clear()

    assert await ctl.trigger_now()
    assert statuses == ["Schedule triggered manually"]

    await ctl.wait_pending()
    assert scheduler.names() == ["trigger_schedule_now", "get_schedule_logs"]
    assert [log.success for log in ctl.logs] == [True]


@pytest.mark.asyncio
async def test_trigger_failures(scheduler: FakeScheduler) -> None:
    ctl = _controller(scheduler)

    scheduler.failures["trigger_schedule_now"] = "Schedule is paused"
    assert not await ctl.trigger_now()
    assert ctl.error == "Schedule is paused"

    scheduler.failures["trigger_schedule_now"] = ""
    assert not await ctl.trigger_now()
    assert ctl.error == "Failed to trigger"

    scheduler.failures["trigger_schedule_now"] = httpx.ConnectError("refused")
    assert not await ctl.trigger_now()
    assert ctl.error == "Failed to trigger schedule"

    await ctl.wait_pending()
    assert "get_schedule_logs" not in scheduler.names()


@pytest.mark.asyncio
async def test_log_refresh_failure_is_silent(scheduler: FakeScheduler) -> None:
    ctl = _controller(scheduler)
    await ctl.trigger_now()
    await ctl.wait_pending()
    assert len(ctl.logs) == 1

    scheduler.failures["get_schedule_logs"] = httpx.ConnectError("refused")
    outcome = await ctl.refresh_logs()

    assert not outcome.ok
    assert ctl.error is None
    assert len(ctl.logs) == 1


@pytest.mark.asyncio
async def test_log_refresh_without_selection_is_skipped(scheduler: FakeScheduler) -> None:
    ctl = ScheduleSyncController(scheduler, schedule_id=None)
    outcome = await ctl.refresh_logs()
    assert outcome.skipped
    assert scheduler.calls == []


@pytest.mark.asyncio
async def test_describe_defaults_and_cached(scheduler: FakeScheduler) -> None:
    ctl = _controller(scheduler)
    empty = ctl.describe()
    assert empty.schedule_text == "Every 2 hours"
    assert empty.next_run == "Not scheduled"
    assert empty.last_run == "Never"
    assert empty.active is None

    scheduler.server[SCHEDULE_ID]["cron_expression"] = "0 9 * * *"
    await ctl.refresh_schedules()
    view = ctl.describe()
    assert view.schedule_text == "Daily at 09:00"
    assert view.active is True
    assert view.last_run == "Never"
    assert view.next_run != "Not scheduled"


@pytest.mark.asyncio
async def test_successful_trigger_clears_previous_error(scheduler: FakeScheduler) -> None:
    ctl = _controller(scheduler)

    scheduler.failures["trigger_schedule_now"] = ""
    assert not await ctl.trigger_now()
    assert ctl.error == "Failed to trigger"

    scheduler.failures.clear()
    assert await ctl.trigger_now()
    assert ctl.error is None
    await ctl.wait_pending()
