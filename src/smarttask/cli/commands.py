# src/smarttask/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from datetime import date

from ..core.chat import add_task, analyze_tasks, check_reminders, set_sample_data
from ..core.state import AppState
from ..notifications.models import Notification
from ..tasks.task_models import PRIORITY_FILTER_ALL, Priority, Task, TaskDraft

CommandHandler = Callable[[AppState, list[str], str], str | Awaitable[str]]

logger = logging.getLogger(__name__)

ID_WIDTH = 8


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /tasks, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Handlers get the whitespace-split args plus the raw text after the command
        name (for commands with free-form input such as /add).
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split(maxsplit=1)
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        rest = parts[1].strip() if len(parts) > 1 else ""
        args = rest.split()

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        logger.debug("Command /%s args=%r", name, args)
        reply = handler(state, args, rest)
        if inspect.isawaitable(reply):
            reply = await reply
        return reply

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  /exit - Quit.")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- rendering helpers ----


def _short(item_id: str) -> str:
    return item_id[:ID_WIDTH]


def _render_task(t: Task) -> str:
    parts = [f"[{_short(t.id)}] ({t.priority.value}) {t.title}"]
    if t.deadline:
        parts.append(f"due {t.deadline}")
    if t.estimated_time:
        parts.append(f"est {t.estimated_time}")
    done, total, percent = t.subtask_progress()
    if total:
        parts.append(f"subtasks {done}/{total} ({percent}%)")
    if t.tags:
        parts.append(" ".join(f"#{tag}" for tag in t.tags))
    line = "  ".join(parts)
    if t.description:
        line += f"\n      {t.description}"
    for s in t.subtasks:
        mark = "x" if s.completed else " "
        line += f"\n      [{mark}] {_short(s.id)} {s.title}"
    return line


def _render_column(title: str, tasks: list[Task]) -> list[str]:
    lines = [f"{title} ({len(tasks)}):"]
    if not tasks:
        lines.append("  (empty)")
    lines.extend(f"  {_render_task(t)}" for t in tasks)
    return lines


def _render_notification(n: Notification) -> str:
    mark = " " if n.read else "*"
    line = f"{mark} [{_short(n.id)}] ({n.priority.value}) {n.task_name}: {n.message}"
    if n.suggested_action:
        line += f"\n      -> {n.suggested_action}"
    return line


def _status_line(state: AppState) -> str:
    if state.status is None:
        return ""
    return f"[{state.status.kind.value}] {state.status.text}"


def _resolve_task(state: AppState, raw: str) -> Task | None:
    task_id = state.tasks.resolve_id(raw)
    return state.tasks.get(task_id) if task_id else None


def _resolve_notification(state: AppState, raw: str) -> Notification | None:
    matches = [n for n in state.notifications.all() if n.id.startswith(raw)]
    return matches[0] if len(matches) == 1 else None


# ---- commands ----


def cmd_help(state: AppState, args: list[str], rest: str) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str], rest: str) -> str:
    models = ", ".join(list(getattr(state.settings, "agent_models", []) or []))
    agent = state.agents.active_agent_id
    lines = [
        "Status:",
        f"  Agent backend: {type(state.agents.invoker).__name__}",
        f"  Models (priority -> fallback): {models or 'n/a'}",
        f"  Agent session: {state.agents.session.state.value}" + (f" ({agent})" if agent else ""),
        f"  Scheduler: {type(state.schedules.client).__name__} (schedule {state.schedules.selected_id or 'none'})",
        f"  Tasks: {len(state.tasks)} | Unread notifications: {state.notifications.unread_count()}",
    ]
    last = _status_line(state)
    if last:
        lines.append(f"  Last status: {last}")
    return "\n".join(lines)


def cmd_tasks(state: AppState, args: list[str], rest: str) -> str:
    """
    /tasks             -> board with the current priority filter
    /tasks <priority>  -> set filter (urgent|high|medium|low|all) and show
    """
    if args:
        wanted = args[0].lower()
        if wanted != PRIORITY_FILTER_ALL and Priority.parse(wanted) is None:
            return "Usage: /tasks [all|urgent|high|medium|low]"
        state.priority_filter = wanted

    columns = state.tasks.columns(state.priority_filter)
    lines = [f"Tasks (filter: {state.priority_filter}):"]
    lines += _render_column("Today", columns.today)
    lines += _render_column("Upcoming", columns.upcoming)
    lines += _render_column("Completed", columns.completed)
    return "\n".join(lines)


def cmd_add(state: AppState, args: list[str], rest: str) -> str:
    """/add title | deadline | priority | tags | description (all but title optional)."""
    fields = [f.strip() for f in rest.split("|")]
    fields += [""] * (5 - len(fields))
    title, deadline, priority_raw, tags, description = fields[:5]

    if not title:
        return "Usage: /add <title> [| YYYY-MM-DD | priority | tag1, tag2 | description]"

    if deadline:
        try:
            date.fromisoformat(deadline)
        except ValueError:
            return f"Invalid deadline: {deadline!r}. Use YYYY-MM-DD."

    priority = Priority.MEDIUM
    if priority_raw:
        parsed = Priority.parse(priority_raw)
        if parsed is None:
            return f"Unknown priority: {priority_raw}. Use urgent, high, medium or low."
        priority = parsed

    task = add_task(
        state,
        TaskDraft(title=title, description=description, deadline=deadline or None, priority=priority, tags=tags),
    )
    if task is None:
        return "Task title is required."
    return f"{_status_line(state)}\n  {_render_task(task)}"


def cmd_done(state: AppState, args: list[str], rest: str) -> str:
    if not args:
        return "Usage: /done <task_id>"
    task = _resolve_task(state, args[0])
    if task is None:
        return f"No task matches id {args[0]!r}."
    if not state.tasks.complete_task(task.id):
        return f"Task already completed: {task.title}"
    return f"Completed: {task.title}"


def cmd_del(state: AppState, args: list[str], rest: str) -> str:
    if not args:
        return "Usage: /del <task_id>"
    task = _resolve_task(state, args[0])
    if task is None:
        return f"No task matches id {args[0]!r}."
    state.tasks.delete_task(task.id)
    return f"Deleted: {task.title}"


def cmd_sub(state: AppState, args: list[str], rest: str) -> str:
    if len(args) < 2:
        return "Usage: /sub <task_id> <subtask_id>"
    task = _resolve_task(state, args[0])
    if task is None:
        return f"No task matches id {args[0]!r}."
    matches = [s for s in task.subtasks if s.id.startswith(args[1])]
    if len(matches) != 1:
        return f"No subtask matches id {args[1]!r}."
    state.tasks.toggle_subtask(task.id, matches[0].id)
    done, total, percent = task.subtask_progress()
    return f"{matches[0].title}: {'done' if matches[0].completed else 'open'} ({done}/{total}, {percent}%)"


async def cmd_analyze(state: AppState, args: list[str], rest: str) -> str:
    result = await analyze_tasks(state)
    if result is None or result.message is None:
        return _status_line(state)
    return result.message.content


async def cmd_remind(state: AppState, args: list[str], rest: str) -> str:
    result = await check_reminders(state)
    lines = [_status_line(state)]
    if result is not None and result.message is not None:
        lines.append(result.message.content)
    if result is not None and result.ok:
        unread = [n for n in state.notifications.all() if not n.read]
        lines += [_render_notification(n) for n in unread]
    return "\n".join(line for line in lines if line)


def cmd_notes(state: AppState, args: list[str], rest: str) -> str:
    items = state.notifications.all()
    if not items:
        return "No notifications."
    lines = [f"Notifications ({state.notifications.unread_count()} unread):"]
    lines += [_render_notification(n) for n in items]
    return "\n".join(lines)


def cmd_read(state: AppState, args: list[str], rest: str) -> str:
    if not args:
        return "Usage: /read <notification_id|all>"
    if args[0].lower() == "all":
        changed = state.notifications.mark_all_read()
        return f"Marked {changed} notification(s) read."
    n = _resolve_notification(state, args[0])
    if n is None:
        return f"No notification matches id {args[0]!r}."
    state.notifications.mark_read(n.id)
    return f"Read: {n.task_name}"


def cmd_insights(state: AppState, args: list[str], rest: str) -> str:
    ins = state.tasks.insights()
    by_priority = " | ".join(f"{p.value.capitalize()}: {ins.active_by_priority[p]}" for p in Priority)
    return (
        "Insights:\n"
        f"  Active: {ins.total_active} ({by_priority})\n"
        f"  Completed: {ins.completed}/{ins.total} ({ins.completion_rate}%)\n"
        f"  Productivity score: {ins.productivity_score}"
    )


def _render_schedule(state: AppState) -> str:
    view = state.schedules.describe()
    if view.active is None:
        active = "unknown"
    else:
        active = "active" if view.active else "paused"
    lines = [
        f"Schedule {view.schedule_id or 'none'}: {active}",
        f"  Runs: {view.schedule_text}" + (f" ({view.timezone})" if view.timezone else ""),
        f"  Next run: {view.next_run}",
        f"  Last run: {view.last_run}",
    ]
    if view.last_run_success is not None:
        lines[-1] += " (ok)" if view.last_run_success else " (failed)"
    if state.schedules.error:
        lines.append(f"  Error: {state.schedules.error}")
    return "\n".join(lines)


async def cmd_schedule(state: AppState, args: list[str], rest: str) -> str:
    await state.schedules.refresh_schedules()
    return _render_schedule(state)


async def cmd_toggle(state: AppState, args: list[str], rest: str) -> str:
    await state.schedules.toggle()
    return _render_schedule(state)


async def cmd_trigger(state: AppState, args: list[str], rest: str) -> str:
    if not await state.schedules.trigger_now():
        return f"Trigger failed: {state.schedules.error}"
    return _status_line(state)


async def cmd_logs(state: AppState, args: list[str], rest: str) -> str:
    refresh = await state.schedules.refresh_logs()
    lines: list[str] = []
    if refresh.skipped:
        lines.append("No schedule selected.")
    elif not refresh.ok:
        lines.append(f"Could not refresh logs ({refresh.error or 'unknown error'}); showing cached.")
    logs = state.schedules.logs
    if not logs:
        lines.append("No executions yet.")
    for log in logs:
        outcome = "ok" if log.success else f"failed: {log.error_message or 'unknown error'}"
        lines.append(f"  {log.executed_at}  {outcome}")
    return "\n".join(lines)


def cmd_sample(state: AppState, args: list[str], rest: str) -> str:
    if not args or args[0].lower() not in ("on", "off"):
        return "Usage: /sample on | /sample off"
    enabled = args[0].lower() == "on"
    set_sample_data(state, enabled)
    return "Sample data loaded." if enabled else "All data cleared."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show backends, session and last status.")
registry.register("tasks", cmd_tasks, help_text="Show the board: /tasks [all|urgent|high|medium|low].", aliases=["ls"])
registry.register(
    "add", cmd_add, help_text="Add a task: /add title | YYYY-MM-DD | priority | tags | description."
)
registry.register("done", cmd_done, help_text="Complete a task: /done <id>.")
registry.register("del", cmd_del, help_text="Delete a task: /del <id>.", aliases=["rm"])
registry.register("sub", cmd_sub, help_text="Toggle a subtask: /sub <task_id> <subtask_id>.")
registry.register("analyze", cmd_analyze, help_text="Ask the task agent to analyze active tasks.")
registry.register("remind", cmd_remind, help_text="Ask the reminder agent to check active tasks.")
registry.register("notes", cmd_notes, help_text="List notifications.")
registry.register("read", cmd_read, help_text="Mark read: /read <id> | /read all.")
registry.register("insights", cmd_insights, help_text="Show completion rate and productivity score.")
registry.register("schedule", cmd_schedule, help_text="Show the reminder schedule.")
registry.register("toggle", cmd_toggle, help_text="Pause or resume the reminder schedule.")
registry.register("trigger", cmd_trigger, help_text="Run the reminder schedule now.")
registry.register("logs", cmd_logs, help_text="Show recent schedule executions.")
registry.register("sample", cmd_sample, help_text="Load or clear sample data: /sample on | /sample off.")
