# src/smarttask/tasks/samples.py

from __future__ import annotations

from ..core.transcript import ChatMessage, Role
from ..notifications.models import Notification
from .task_models import Priority, SubTask, Task, TaskStatus, new_id


def _subs(*items: tuple[str, bool]) -> list[SubTask]:
    return [SubTask(id=new_id(), title=title, completed=done) for title, done in items]


def sample_tasks() -> list[Task]:
    return [
        Task(
            id=new_id(),
            title="Finalize quarterly report",
            description="Complete and submit Q4 financial summary to management",
            deadline="2026-02-27",
            priority=Priority.URGENT,
            status=TaskStatus.TODAY,
            estimated_time="3 hours",
            subtasks=_subs(
                ("Gather financial data", True),
                ("Create charts and graphs", False),
                ("Write executive summary", False),
            ),
            tags=["finance", "report"],
            created_at="2026-02-24T09:00:00Z",
        ),
        Task(
            id=new_id(),
            title="Review pull requests",
            description="Review and merge pending PRs for the sprint",
            deadline="2026-02-26",
            priority=Priority.HIGH,
            status=TaskStatus.TODAY,
            estimated_time="1.5 hours",
            subtasks=_subs(("PR #142 - Auth module", False), ("PR #145 - Dashboard UI", False)),
            tags=["development"],
            created_at="2026-02-25T10:00:00Z",
        ),
        Task(
            id=new_id(),
            title="Prepare presentation slides",
            description="Create slides for Friday team meeting on project roadmap",
            deadline="2026-02-28",
            priority=Priority.MEDIUM,
            status=TaskStatus.UPCOMING,
            estimated_time="2 hours",
            subtasks=[],
            tags=["meeting", "planning"],
            created_at="2026-02-25T14:00:00Z",
        ),
        Task(
            id=new_id(),
            title="Update documentation",
            description="Update API docs with new endpoints from v2.1 release",
            deadline="2026-03-01",
            priority=Priority.LOW,
            status=TaskStatus.UPCOMING,
            estimated_time="1 hour",
            subtasks=[],
            tags=["docs"],
            created_at="2026-02-26T08:00:00Z",
        ),
        Task(
            id=new_id(),
            title="Fix login page bug",
            description="Resolve the redirect issue on login timeout",
            deadline="2026-02-25",
            priority=Priority.HIGH,
            status=TaskStatus.COMPLETED,
            estimated_time="45 min",
            subtasks=_subs(
                ("Reproduce the issue", True),
                ("Fix redirect logic", True),
                ("Add unit tests", True),
            ),
            tags=["bugfix"],
            created_at="2026-02-23T11:00:00Z",
            completed_at="2026-02-25T16:00:00Z",
        ),
    ]


def sample_notifications() -> list[Notification]:
    return [
        Notification(
            id=new_id(),
            message="Quarterly report deadline is tomorrow. Start now to avoid rushing.",
            task_name="Finalize quarterly report",
            priority=Priority.URGENT,
            timestamp="2026-02-26T10:00:00Z",
            suggested_action="Begin gathering financial data immediately",
        ),
        Notification(
            id=new_id(),
            message="You have 2 pending pull requests that need attention.",
            task_name="Review pull requests",
            priority=Priority.HIGH,
            timestamp="2026-02-26T08:30:00Z",
            suggested_action="Allocate 90 minutes for thorough code review",
        ),
    ]


def sample_chat() -> list[ChatMessage]:
    return [
        ChatMessage(
            id=new_id(),
            role=Role.USER,
            content="What tasks should I focus on today?",
            timestamp="2026-02-26T09:00:00Z",
        ),
        ChatMessage(
            id=new_id(),
            role=Role.ASSISTANT,
            content=(
                "Based on your current workload, I recommend prioritizing:\n\n"
                "1. **Finalize quarterly report** - This is urgent with a deadline tomorrow. "
                "Start with gathering the financial data.\n"
                "2. **Review pull requests** - These are blocking other team members.\n\n"
                "Your workload is slightly heavy today with approximately 4.5 hours of focused work needed."
            ),
            timestamp="2026-02-26T09:01:00Z",
        ),
    ]
