# src/smarttask/agents/payloads.py

"""
Tolerant parsing of agent payloads.

Agents return loosely-structured JSON. Every field is optional; wrong types are
treated as missing. Nothing here raises on bad input.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


def _str(raw: Any) -> str | None:
    if isinstance(raw, str):
        s = raw.strip()
        return s or None
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return str(raw)
    return None


def _int(raw: Any) -> int | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw)
    if isinstance(raw, str):
        try:
            return int(raw.strip())
        except ValueError:
            return None
    return None


def _str_list(raw: Any) -> list[str]:
    if not isinstance(raw, list):
        return []
    out: list[str] = []
    for item in raw:
        s = _str(item)
        if s:
            out.append(s)
    return out


def _dict_list(raw: Any) -> list[dict[str, Any]]:
    if not isinstance(raw, list):
        return []
    return [item for item in raw if isinstance(item, dict)]


@dataclass(slots=True, frozen=True)
class TaskSuggestion:
    task_name: str | None
    priority: str | None
    estimated_time: str | None
    subtasks: list[str] = field(default_factory=list)
    notes: str | None = None

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> TaskSuggestion:
        return cls(
            task_name=_str(raw.get("task_name")),
            priority=_str(raw.get("priority")),
            estimated_time=_str(raw.get("estimated_time")),
            subtasks=_str_list(raw.get("subtasks")),
            notes=_str(raw.get("notes")),
        )


@dataclass(slots=True, frozen=True)
class WorkloadSummary:
    total_tasks: int | None = None
    urgent_count: int | None = None
    high_count: int | None = None
    medium_count: int | None = None
    low_count: int | None = None
    estimated_total_time: str | None = None
    balance_status: str | None = None

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> WorkloadSummary:
        return cls(
            total_tasks=_int(raw.get("total_tasks")),
            urgent_count=_int(raw.get("urgent_count")),
            high_count=_int(raw.get("high_count")),
            medium_count=_int(raw.get("medium_count")),
            low_count=_int(raw.get("low_count")),
            estimated_total_time=_str(raw.get("estimated_total_time")),
            balance_status=_str(raw.get("balance_status")),
        )


@dataclass(slots=True, frozen=True)
class TaskAnalysis:
    message: str | None
    tasks: list[TaskSuggestion]
    productivity_tips: list[str]
    workload: WorkloadSummary | None
    analysis_type: str | None = None

    @classmethod
    def from_payload(cls, payload: Any) -> TaskAnalysis:
        raw = payload if isinstance(payload, dict) else {}
        workload_raw = raw.get("workload_summary")
        return cls(
            message=_str(raw.get("message")),
            tasks=[TaskSuggestion.from_dict(t) for t in _dict_list(raw.get("tasks"))],
            productivity_tips=_str_list(raw.get("productivity_tips")),
            workload=WorkloadSummary.from_dict(workload_raw) if isinstance(workload_raw, dict) else None,
            analysis_type=_str(raw.get("analysis_type")),
        )


@dataclass(slots=True, frozen=True)
class Reminder:
    task_name: str | None
    priority: str | None
    deadline: str | None
    reminder_message: str | None
    urgency_reason: str | None
    suggested_action: str | None

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Reminder:
        return cls(
            task_name=_str(raw.get("task_name")),
            priority=_str(raw.get("priority")),
            deadline=_str(raw.get("deadline")),
            reminder_message=_str(raw.get("reminder_message")),
            urgency_reason=_str(raw.get("urgency_reason")),
            suggested_action=_str(raw.get("suggested_action")),
        )


@dataclass(slots=True, frozen=True)
class ReminderReport:
    reminders: list[Reminder]
    summary: str | None
    next_check_recommendation: str | None

    @classmethod
    def from_payload(cls, payload: Any) -> ReminderReport:
        raw = payload if isinstance(payload, dict) else {}
        return cls(
            reminders=[Reminder.from_dict(r) for r in _dict_list(raw.get("reminders"))],
            summary=_str(raw.get("summary")),
            next_check_recommendation=_str(raw.get("next_check_recommendation")),
        )
