# src/smarttask/tasks/task_api.py

from __future__ import annotations

from collections.abc import Sequence

from .task_models import Task

ANALYSIS_PROMPT_HEADER = "Analyze these tasks and suggest priorities, time estimates, and subtask breakdowns:"
REMINDER_PROMPT_HEADER = "Check these tasks and generate reminders: "


def build_analysis_prompt(tasks: Sequence[Task]) -> str:
    """One line per active task: `- title: description (deadline: ...)`."""
    lines = [
        f"- {t.title}: {t.description or 'No description'} (deadline: {t.deadline or 'none'})"
        for t in tasks
    ]
    return ANALYSIS_PROMPT_HEADER + "\n" + "\n".join(lines)


def build_reminder_prompt(tasks: Sequence[Task]) -> str:
    summary = "; ".join(
        f"{t.title} (priority: {t.priority.value}, deadline: {t.deadline or 'none'})" for t in tasks
    )
    return REMINDER_PROMPT_HEADER + summary
