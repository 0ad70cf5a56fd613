# src/smarttask/agents/offline.py

from __future__ import annotations

import re

from ..core.ports import AgentResult

_ANALYSIS_LINE = re.compile(r"^- (?P<title>.+?): .*\(deadline: (?P<deadline>[^)]*)\)\s*$")
_REMINDER_ITEM = re.compile(r"(?P<title>.+?) \(priority: (?P<priority>\w+), deadline: (?P<deadline>[^)]*)\)")


class OfflineAgentClient:
    """
    Offline deterministic agent backend used for demos when no external API is configured.

    Behavior:
    - Task agent with an "Analyze these tasks" prompt -> one suggestion per listed task
    - Task agent with anything else -> a friendly offline answer, no suggestions
    - Reminder agent -> a reminder for each urgent/high task in the prompt
    """

    def __init__(self, *, task_agent_id: str, reminder_agent_id: str) -> None:
        self._task_agent_id = task_agent_id
        self._reminder_agent_id = reminder_agent_id

    async def invoke_agent(self, prompt_text: str, agent_id: str) -> AgentResult:
        if agent_id == self._task_agent_id:
            return AgentResult(success=True, result=self._analyze(prompt_text))
        if agent_id == self._reminder_agent_id:
            return AgentResult(success=True, result=self._remind(prompt_text))
        return AgentResult(success=False, error=f"Unknown agent: {agent_id}")

    @staticmethod
    def _analyze(prompt_text: str) -> dict:
        titles = []
        for line in prompt_text.splitlines():
            m = _ANALYSIS_LINE.match(line.strip())
            if m:
                titles.append(m.group("title").strip())

        if not titles:
            return {
                "analysis_type": "question",
                "message": (
                    "Offline demo mode: no agent backend is configured.\n"
                    "Set SMARTTASK_AGENT_API_KEY (and SMARTTASK_AGENT_MODELS) to enable real analysis.\n\n"
                    f"You said: {prompt_text}"
                ),
            }

        return {
            "analysis_type": "prioritization",
            "message": f"Offline analysis of {len(titles)} task(s).",
            "tasks": [
                {
                    "task_name": title,
                    "priority": "medium",
                    "estimated_time": "1 hour",
                    "subtasks": ["Outline the work", "Do the work", "Review the result"],
                    "notes": "Offline placeholder estimate.",
                }
                for title in titles
            ],
            "productivity_tips": ["Start with the task that unblocks others."],
            "workload_summary": {
                "total_tasks": len(titles),
                "medium_count": len(titles),
                "estimated_total_time": f"{len(titles)} hour(s)",
                "balance_status": "balanced",
            },
        }

    @staticmethod
    def _remind(prompt_text: str) -> dict:
        _, _, body = prompt_text.partition(":")
        reminders = []
        for piece in body.split(";"):
            m = _REMINDER_ITEM.search(piece.strip())
            if not m or m.group("priority").lower() not in ("urgent", "high"):
                continue
            deadline = m.group("deadline").strip()
            reminders.append(
                {
                    "task_name": m.group("title").strip(),
                    "priority": m.group("priority").lower(),
                    "deadline": None if deadline == "none" else deadline,
                    "reminder_message": f"{m.group('title').strip()} is {m.group('priority').lower()} priority.",
                    "suggested_action": "Block time for it today.",
                }
            )
        return {
            "reminders": reminders,
            "summary": f"Offline check: {len(reminders)} task(s) need attention.",
            "next_check_recommendation": "In 2 hours",
        }
