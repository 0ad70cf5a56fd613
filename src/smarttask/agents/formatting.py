# src/smarttask/agents/formatting.py

"""
Render agent payloads as transcript text (markdown subset: ###, -, **bold**).

Missing values are rendered as placeholders instead of being dropped, so the
shape of the output only depends on which sections are present.
"""

from __future__ import annotations

from typing import Final

from .payloads import ReminderReport, TaskAnalysis, TaskSuggestion, WorkloadSummary

NA: Final[str] = "N/A"
DEFAULT_ANALYSIS_MESSAGE: Final[str] = "Analysis complete."
DEFAULT_SUGGESTION_NAME: Final[str] = "Task"


def _suggestion_lines(s: TaskSuggestion) -> list[str]:
    line = (
        f"- **{s.task_name or DEFAULT_SUGGESTION_NAME}** - "
        f"Priority: {s.priority or NA}, Est: {s.estimated_time or NA}"
    )
    if s.notes:
        line += f" -- {s.notes}"
    return [line, *(f"  - {sub}" for sub in s.subtasks)]


def _workload_block(w: WorkloadSummary) -> str:
    return (
        f"Total: {w.total_tasks or 0} tasks | Urgent: {w.urgent_count or 0} | "
        f"High: {w.high_count or 0} | Medium: {w.medium_count or 0} | Low: {w.low_count or 0}\n"
        f"Estimated time: {w.estimated_total_time or NA} | Balance: {w.balance_status or NA}"
    )


def format_task_analysis(analysis: TaskAnalysis) -> str:
    out = analysis.message or DEFAULT_ANALYSIS_MESSAGE

    if analysis.tasks:
        out += "\n\n### Task Suggestions\n"
        for s in analysis.tasks:
            out += "\n" + "\n".join(_suggestion_lines(s))

    if analysis.productivity_tips:
        out += "\n\n### Productivity Tips\n"
        for tip in analysis.productivity_tips:
            out += f"\n- {tip}"

    if analysis.workload is not None:
        out += "\n\n### Workload Summary\n" + _workload_block(analysis.workload)

    return out


def format_reminder_summary(report: ReminderReport) -> str | None:
    """Transcript text for a reminder check, or None when the agent sent no summary."""
    if not report.summary:
        return None
    out = f"### Reminder Check\n\n{report.summary}"
    if report.next_check_recommendation:
        out += f"\n\n**Next check:** {report.next_check_recommendation}"
    return out


def reminder_status_text(count: int) -> str:
    return f"{count} reminder(s) generated"
