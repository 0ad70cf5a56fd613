# src/smarttask/schedules/client.py

"""
Scheduler backends.

- HttpSchedulerClient: REST client for the remote scheduler (httpx).
- InMemorySchedulerClient: local stand-in used when no remote scheduler is configured.

Both return result objects for remote-reported failures. The HTTP client lets
transport errors (httpx.TransportError) propagate so callers can tell them apart.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

import httpx

from ..core.ports import ScheduleActionResult, ScheduleListResult, ScheduleLogsResult
from ..tasks.task_models import new_id

logger = logging.getLogger(__name__)


def _error_from_response(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("error", "detail", "message"):
            val = body.get(key)
            if isinstance(val, str) and val.strip():
                return val.strip()
    return f"Scheduler returned HTTP {resp.status_code}"


class HttpSchedulerClient:
    """
    Client for the remote scheduler REST API.

    Endpoints:
    - GET  /schedules                      -> {"schedules": [...]}
    - GET  /schedules/{id}/logs?limit=N    -> {"executions": [...]}
    - POST /schedules/{id}/pause|resume|trigger -> {"success": bool, "error"?: str}
    """

    def __init__(
        self,
        base_url: str,
        *,
        api_key: str | None = None,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not base_url or not base_url.strip():
            raise RuntimeError("Scheduler base URL is not set. Set SMARTTASK_SCHEDULER_BASE_URL in your .env.")
        self.base_url = base_url.rstrip("/")
        headers = {"Accept": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        self._client = httpx.AsyncClient(
            base_url=self.base_url, headers=headers, timeout=timeout, transport=transport
        )

    async def __aenter__(self) -> HttpSchedulerClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def list_schedules(self) -> ScheduleListResult:
        resp = await self._client.get("/schedules")
        if resp.is_error:
            return ScheduleListResult(success=False, error=_error_from_response(resp))
        body = resp.json()
        items = body.get("schedules") if isinstance(body, dict) else body
        schedules = [s for s in items if isinstance(s, dict)] if isinstance(items, list) else []
        logger.debug("Fetched %d schedule(s)", len(schedules))
        return ScheduleListResult(success=True, schedules=schedules)

    async def get_schedule_logs(self, schedule_id: str, *, limit: int = 10) -> ScheduleLogsResult:
        resp = await self._client.get(f"/schedules/{schedule_id}/logs", params={"limit": int(limit)})
        if resp.is_error:
            return ScheduleLogsResult(success=False, error=_error_from_response(resp))
        body = resp.json()
        items = body.get("executions") if isinstance(body, dict) else body
        executions = [e for e in items if isinstance(e, dict)] if isinstance(items, list) else []
        return ScheduleLogsResult(success=True, executions=executions)

    async def _action(self, schedule_id: str, action: str) -> ScheduleActionResult:
        resp = await self._client.post(f"/schedules/{schedule_id}/{action}")
        if resp.is_error:
            return ScheduleActionResult(success=False, error=_error_from_response(resp))
        try:
            body = resp.json()
        except ValueError:
            body = {}
        if isinstance(body, dict) and body.get("success") is False:
            err = body.get("error")
            return ScheduleActionResult(success=False, error=err if isinstance(err, str) else None)
        logger.info("Schedule %s: %s ok", schedule_id, action)
        return ScheduleActionResult(success=True)

    async def pause_schedule(self, schedule_id: str) -> ScheduleActionResult:
        return await self._action(schedule_id, "pause")

    async def resume_schedule(self, schedule_id: str) -> ScheduleActionResult:
        return await self._action(schedule_id, "resume")

    async def trigger_schedule_now(self, schedule_id: str) -> ScheduleActionResult:
        return await self._action(schedule_id, "trigger")


class InMemorySchedulerClient:
    """
    Local scheduler with one schedule and an execution history.

    Triggering records a successful execution immediately; nothing fires on its own.
    """

    def __init__(self, schedule_id: str, *, cron_expression: str = "0 */2 * * *", timezone: str = "UTC") -> None:
        self._schedules: dict[str, dict[str, Any]] = {
            schedule_id: {
                "id": schedule_id,
                "is_active": True,
                "cron_expression": cron_expression,
                "timezone": timezone,
                "next_run_time": None,
                "last_run_at": None,
                "last_run_success": None,
            }
        }
        self._executions: dict[str, list[dict[str, Any]]] = {schedule_id: []}

    async def list_schedules(self) -> ScheduleListResult:
        return ScheduleListResult(success=True, schedules=[dict(s) for s in self._schedules.values()])

    async def get_schedule_logs(self, schedule_id: str, *, limit: int = 10) -> ScheduleLogsResult:
        if schedule_id not in self._schedules:
            return ScheduleLogsResult(success=False, error="Schedule not found")
        runs = self._executions.get(schedule_id, [])
        return ScheduleLogsResult(success=True, executions=[dict(e) for e in runs[: max(0, int(limit))]])

    def _set_active(self, schedule_id: str, active: bool) -> ScheduleActionResult:
        sched = self._schedules.get(schedule_id)
        if sched is None:
            return ScheduleActionResult(success=False, error="Schedule not found")
        sched["is_active"] = active
        return ScheduleActionResult(success=True)

    async def pause_schedule(self, schedule_id: str) -> ScheduleActionResult:
        return self._set_active(schedule_id, False)

    async def resume_schedule(self, schedule_id: str) -> ScheduleActionResult:
        return self._set_active(schedule_id, True)

    async def trigger_schedule_now(self, schedule_id: str) -> ScheduleActionResult:
        sched = self._schedules.get(schedule_id)
        if sched is None:
            return ScheduleActionResult(success=False, error="Schedule not found")
        now = datetime.now(UTC).isoformat()
        self._executions.setdefault(schedule_id, []).insert(
            0, {"id": new_id(), "success": True, "error_message": None, "executed_at": now}
        )
        sched["last_run_at"] = now
        sched["last_run_success"] = True
        return ScheduleActionResult(success=True)
