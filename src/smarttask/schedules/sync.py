# src/smarttask/schedules/sync.py

"""
Schedule sync controller.

Keeps a local view model of the remote scheduler:
- schedule list (mirror, replaced on every successful fetch)
- selected schedule id
- most recent execution logs
- loading flag and last user-facing error

The remote side is the source of truth. Mutations (pause/resume) are never
applied locally; they are always followed by a re-fetch. Log refreshes are
best-effort and report their outcome as a value instead of raising.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from datetime import datetime

from ..core.observable import Observable
from ..core.ports import SchedulerClient
from .cron import cron_to_human
from .models import ExecutionLog, Schedule

logger = logging.getLogger(__name__)

StatusSink = Callable[[str], None]

DEFAULT_SCHEDULE_TEXT = "Every 2 hours"


@dataclass(slots=True, frozen=True)
class LogRefresh:
    """Outcome of a log refresh. Callers are free to ignore it."""

    ok: bool
    skipped: bool = False
    error: str | None = None


@dataclass(slots=True, frozen=True)
class ScheduleView:
    schedule_id: str | None
    active: bool | None
    schedule_text: str
    timezone: str | None
    next_run: str
    last_run: str
    last_run_success: bool | None


def _fmt_ts(raw: str | None, fallback: str) -> str:
    if not raw:
        return fallback
    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00")).astimezone().strftime("%Y-%m-%d %H:%M")
    except ValueError:
        return raw


class ScheduleSyncController(Observable):
    def __init__(
        self,
        client: SchedulerClient,
        *,
        schedule_id: str | None,
        log_limit: int = 10,
        trigger_refresh_delay: float = 3.0,
        on_status: StatusSink | None = None,
    ) -> None:
        super().__init__()
        self._client = client
        self.selected_id: str | None = schedule_id or None
        self.schedules: list[Schedule] = []
        self.logs: list[ExecutionLog] = []
        self.error: str | None = None
        self._log_limit = max(1, int(log_limit))
        self._trigger_refresh_delay = max(0.0, float(trigger_refresh_delay))
        self.on_status = on_status
        self._in_flight = 0
        self._pending: set[asyncio.Task[LogRefresh]] = set()

    # ---- view ----

    @property
    def client(self) -> SchedulerClient:
        return self._client

    @property
    def loading(self) -> bool:
        return self._in_flight > 0

    @property
    def current(self) -> Schedule | None:
        return self._find(self.selected_id)

    def _find(self, schedule_id: str | None) -> Schedule | None:
        if not schedule_id:
            return None
        for s in self.schedules:
            if s.id == schedule_id:
                return s
        return None

    def describe(self) -> ScheduleView:
        s = self.current
        return ScheduleView(
            schedule_id=self.selected_id,
            active=s.is_active if s else None,
            schedule_text=cron_to_human(s.cron_expression) if s and s.cron_expression else DEFAULT_SCHEDULE_TEXT,
            timezone=s.timezone if s else None,
            next_run=_fmt_ts(s.next_run_time if s else None, "Not scheduled"),
            last_run=_fmt_ts(s.last_run_at if s else None, "Never"),
            last_run_success=s.last_run_success if s else None,
        )

    # ---- helpers ----

    @contextlib.contextmanager
    def _busy(self) -> Iterator[None]:
        self._in_flight += 1
        self._changed()
        try:
            yield
        finally:
            self._in_flight -= 1
            self._changed()

    def _set_error(self, text: str | None) -> None:
        self.error = text
        if text:
            logger.info("Schedule error: %s", text)
        self._changed()

    # ---- operations ----

    async def initial_load(self) -> None:
        """First mount: schedules and logs are fetched independently (not sequenced)."""
        await asyncio.gather(self.refresh_schedules(), self.refresh_logs())

    async def refresh_schedules(self) -> bool:
        with self._busy():
            self._set_error(None)
            try:
                result = await self._client.list_schedules()
            except Exception:
                logger.exception("list_schedules failed")
                self._set_error("Failed to load schedules")
                return False

            if not result.success:
                self._set_error(result.error or "Failed to load schedules")
                return False

            self.schedules = [Schedule.from_dict(raw) for raw in result.schedules if isinstance(raw, dict)]
            found = self._find(self.selected_id)
            if found is not None:
                self.selected_id = found.id
            logger.debug("Schedules refreshed: %d (selected=%s)", len(self.schedules), self.selected_id)
            self._changed()
            return True

    async def refresh_logs(self, schedule_id: str | None = None) -> LogRefresh:
        schedule_id = schedule_id or self.selected_id
        if not schedule_id:
            return LogRefresh(ok=False, skipped=True)

        try:
            result = await self._client.get_schedule_logs(schedule_id, limit=self._log_limit)
        except Exception as e:
            logger.debug("get_schedule_logs failed schedule=%s", schedule_id, exc_info=True)
            return LogRefresh(ok=False, error=e.__class__.__name__)

        if not result.success:
            logger.debug("get_schedule_logs refused schedule=%s error=%s", schedule_id, result.error)
            return LogRefresh(ok=False, error=result.error)

        logs = [ExecutionLog.from_dict(raw) for raw in result.executions if isinstance(raw, dict)]
        self.logs = logs[: self._log_limit]
        self._changed()
        return LogRefresh(ok=True)

    async def toggle(self, schedule_id: str | None = None) -> bool:
        """
        Pause an active schedule or resume a paused one, then re-fetch.

        The local is_active is never flipped here; the re-fetch decides.
        """
        schedule_id = schedule_id or self.selected_id
        current = self._find(schedule_id)
        if current is None:
            self._set_error("Schedule not found")
            return False

        with self._busy():
            self._set_error(None)
            action_error: str | None = None
            try:
                if current.is_active:
                    result = await self._client.pause_schedule(current.id)
                else:
                    result = await self._client.resume_schedule(current.id)
                if not result.success:
                    action_error = result.error or "Failed to toggle schedule"
            except Exception:
                logger.exception("toggle failed schedule=%s", current.id)
                action_error = "Failed to toggle schedule"

            await self.refresh_schedules()
            if action_error:
                self._set_error(action_error)
            return action_error is None

    async def trigger_now(self, schedule_id: str | None = None) -> bool:
        schedule_id = schedule_id or self.selected_id
        if not schedule_id:
            self._set_error("Schedule not found")
            return False

        with self._busy():
            self._set_error(None)
            try:
                result = await self._client.trigger_schedule_now(schedule_id)
            except Exception:
                logger.exception("trigger failed schedule=%s", schedule_id)
                self._set_error("Failed to trigger schedule")
                return False

            if not result.success:
                self._set_error(result.error or "Failed to trigger")
                return False

            if self.on_status is not None:
                self.on_status("Schedule triggered manually")
            self._schedule_log_refresh(schedule_id)
            return True

    def _schedule_log_refresh(self, schedule_id: str) -> None:
        """One deferred log refresh, giving the remote executor time to record the run."""

        async def _later() -> LogRefresh:
            await asyncio.sleep(self._trigger_refresh_delay)
            return await self.refresh_logs(schedule_id)

        task = asyncio.create_task(_later())
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def wait_pending(self) -> None:
        """Wait for deferred refreshes (tests, orderly shutdown)."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def cancel_pending(self) -> None:
        for task in list(self._pending):
            task.cancel()


async def run_schedule_poller(
    controller: ScheduleSyncController,
    *,
    interval_seconds: float = 60.0,
) -> None:
    """
    Simple polling loop keeping the mirror fresh.

    Every interval_seconds: refresh schedules, then logs for the selected schedule.
    To stop the poller, cancel the coroutine/task.
    """
    sleep_s = max(1.0, float(interval_seconds))
    while True:
        await asyncio.sleep(sleep_s)
        await controller.refresh_schedules()
        await controller.refresh_logs()
