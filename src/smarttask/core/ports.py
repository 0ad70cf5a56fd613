# src/smarttask/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps the agent backend and the remote scheduler swappable and makes testing easier.
"""

from dataclasses import dataclass, field
from typing import Any, Protocol


@dataclass(slots=True, frozen=True)
class AgentResult:
    """
    Outcome of one agent call: {success, response?: {result}, error?}.

    `result` is the structured payload (already JSON-decoded).
    Transport failures are NOT represented here; clients raise instead.
    """

    success: bool
    result: dict[str, Any] | None = None
    error: str | None = None


@dataclass(slots=True, frozen=True)
class ScheduleListResult:
    success: bool
    schedules: list[dict[str, Any]] = field(default_factory=list)
    error: str | None = None


@dataclass(slots=True, frozen=True)
class ScheduleLogsResult:
    success: bool
    executions: list[dict[str, Any]] = field(default_factory=list)
    error: str | None = None


@dataclass(slots=True, frozen=True)
class ScheduleActionResult:
    success: bool
    error: str | None = None


class AgentInvoker(Protocol):
    """Single-shot request/response agent call (no streaming)."""

    async def invoke_agent(self, prompt_text: str, agent_id: str) -> AgentResult: ...


class SchedulerClient(Protocol):
    """Remote scheduler that periodically fires the reminder agent."""

    async def list_schedules(self) -> ScheduleListResult: ...

    async def get_schedule_logs(self, schedule_id: str, *, limit: int = 10) -> ScheduleLogsResult: ...

    async def pause_schedule(self, schedule_id: str) -> ScheduleActionResult: ...

    async def resume_schedule(self, schedule_id: str) -> ScheduleActionResult: ...

    async def trigger_schedule_now(self, schedule_id: str) -> ScheduleActionResult: ...
