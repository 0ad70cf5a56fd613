# src/smarttask/schedules/models.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


def _opt_str(raw: Any) -> str | None:
    if raw is None:
        return None
    s = str(raw).strip()
    return s or None


@dataclass(slots=True, frozen=True)
class Schedule:
    """Local mirror of a remote schedule. Always overwritten by the next successful fetch."""

    id: str
    is_active: bool
    cron_expression: str
    timezone: str
    next_run_time: str | None
    last_run_at: str | None
    last_run_success: bool | None

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Schedule:
        success = raw.get("last_run_success")
        return cls(
            id=str(raw.get("id") or ""),
            is_active=bool(raw.get("is_active", False)),
            cron_expression=str(raw.get("cron_expression") or ""),
            timezone=str(raw.get("timezone") or "UTC"),
            next_run_time=_opt_str(raw.get("next_run_time")),
            last_run_at=_opt_str(raw.get("last_run_at")),
            last_run_success=success if isinstance(success, bool) else None,
        )


@dataclass(slots=True, frozen=True)
class ExecutionLog:
    id: str
    success: bool
    error_message: str | None
    executed_at: str

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> ExecutionLog:
        return cls(
            id=str(raw.get("id") or ""),
            success=bool(raw.get("success", False)),
            error_message=_opt_str(raw.get("error_message")),
            executed_at=str(raw.get("executed_at") or ""),
        )
