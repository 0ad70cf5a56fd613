# src/smarttask/core/chat.py

"""
Dashboard flows.

This module is transport-agnostic:
- front-ends (console, tests) call these flows with plain values,
- the flows talk to agents through the AgentSessionController,
- agent output is merged into the stores in one batch per completed call.

Key invariants:
- agent calls only happen from a user trigger (chat send, analyze, check reminders),
- agent suggestions never create tasks, only update matching ones,
- raw agent errors never reach the transcript.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ..agents.controller import InvokeOutcome, InvokeResult
from ..agents.formatting import format_reminder_summary, format_task_analysis, reminder_status_text
from ..agents.payloads import ReminderReport, TaskAnalysis
from ..agents.reconcile import build_notifications, reconcile_suggestions
from ..tasks.samples import sample_chat, sample_notifications, sample_tasks
from ..tasks.task_api import build_analysis_prompt, build_reminder_prompt
from ..tasks.task_models import Task, TaskDraft
from .status import StatusKind

if TYPE_CHECKING:
    from .state import AppState

logger = logging.getLogger(__name__)

REMINDER_FAILURE_TEXT = "Failed to generate reminders"
REMINDER_ERROR_TEXT = "Error contacting reminder agent"
NO_TASKS_TO_ANALYZE = "No active tasks to analyze. Add some tasks first."
NO_TASKS_FOR_REMINDERS = "No active tasks for reminders."


# ---- agent response handlers ----


def _handle_task_analysis(state: AppState, payload: dict[str, Any]) -> str:
    analysis = TaskAnalysis.from_payload(payload)
    content = format_task_analysis(analysis)
    if analysis.tasks:
        reconcile_suggestions(state.tasks, analysis.tasks)
    return content


def _handle_reminders(state: AppState, payload: dict[str, Any]) -> str | None:
    report = ReminderReport.from_payload(payload)
    for notification in build_notifications(report):
        state.notifications.push_reminder(notification)
    state.post_status(StatusKind.SUCCESS, reminder_status_text(len(report.reminders)))
    return format_reminder_summary(report)


def _reminder_failed(state: AppState, outcome: InvokeOutcome, text: str) -> None:
    state.post_status(StatusKind.ERROR, text)


def register_agent_routes(state: AppState) -> None:
    state.agents.register(
        state.task_agent_id,
        lambda payload: _handle_task_analysis(state, payload),
    )
    state.agents.register(
        state.reminder_agent_id,
        lambda payload: _handle_reminders(state, payload),
        failure_text=REMINDER_FAILURE_TEXT,
        error_text=REMINDER_ERROR_TEXT,
        on_failure=lambda outcome, text: _reminder_failed(state, outcome, text),
    )


# ---- task management ----


def add_task(state: AppState, draft: TaskDraft) -> Task | None:
    task = state.tasks.add_task(draft)
    if task is not None:
        state.post_status(StatusKind.SUCCESS, "Task added successfully")
    return task


def set_sample_data(state: AppState, enabled: bool) -> None:
    """Replace all contents with the sample dataset, or clear everything."""
    with state.batch():
        if enabled:
            state.tasks.replace_all(sample_tasks())
            state.notifications.replace_all(sample_notifications())
            state.transcript.reset(sample_chat())
        else:
            state.tasks.clear()
            state.notifications.clear()
            state.transcript.reset()
    logger.info("Sample data %s", "on" if enabled else "off")


# ---- agent flows ----


async def send_chat_message(state: AppState, text: str) -> InvokeResult | None:
    """Append the user's message and ask the task agent. Blank text is ignored."""
    text = (text or "").strip()
    if not text:
        return None
    state.transcript.add_user(text)
    return await state.agents.invoke(state.task_agent_id, text)


async def analyze_tasks(state: AppState) -> InvokeResult | None:
    active = state.tasks.active()
    if not active:
        state.post_status(StatusKind.INFO, NO_TASKS_TO_ANALYZE)
        return None
    return await send_chat_message(state, build_analysis_prompt(active))


async def check_reminders(state: AppState) -> InvokeResult | None:
    active = state.tasks.active()
    if not active:
        state.post_status(StatusKind.INFO, NO_TASKS_FOR_REMINDERS)
        return None
    return await state.agents.invoke(state.reminder_agent_id, build_reminder_prompt(active))
