# tests/test_commands.py

from __future__ import annotations

import pytest

from smarttask.cli.commands import CommandRegistry, registry
from smarttask.core.state import AppState
from smarttask.tasks.task_models import Priority, TaskStatus

from .fakes import FakeAgentInvoker, FakeScheduler, ok


@pytest.mark.asyncio
async def test_command_registry_routes_sync_and_async(state: AppState) -> None:
    reg = CommandRegistry()
    called = {"sync": 0, "async": 0}

    def h_sync(state, args, rest):
        called["sync"] += 1
        return f"sync {args}"

    async def h_async(state, args, rest):
        called["async"] += 1
        return f"async {rest}"

    reg.register("a", h_sync, "a", aliases=["aa"])
    reg.register("b", h_async, "b")

    assert await reg.handle(state, "/a x y") == "sync ['x', 'y']"
    assert await reg.handle(state, "/AA") == "sync []"
    assert await reg.handle(state, "/b one | two") == "async one | two"
    assert called == {"sync": 2, "async": 1}


@pytest.mark.asyncio
async def test_command_registry_unknown_and_non_command(state: AppState) -> None:
    reg = CommandRegistry()
    assert await reg.handle(state, "hello") is None
    assert "Unknown command" in (await reg.handle(state, "/nope") or "")
    assert "Empty command" in (await reg.handle(state, "/") or "")


@pytest.mark.asyncio
async def test_help_lists_commands(state: AppState) -> None:
    text = await registry.handle(state, "/help") or ""
    for name in ("/tasks", "/add", "/analyze", "/remind", "/toggle", "/trigger", "/logs", "/exit"):
        assert name in text


@pytest.mark.asyncio
async def test_add_and_board(state: AppState) -> None:
    reply = await registry.handle(state, "/add Write report | 2025-03-05 | high | work, q1 | Quarterly numbers")
    assert reply is not None and "Task added successfully" in reply

    task = state.tasks.all()[0]
    assert task.title == "Write report"
    assert task.priority == Priority.HIGH
    assert task.status == TaskStatus.UPCOMING
    assert task.tags == ["work", "q1"]
    assert task.description == "Quarterly numbers"

    board = await registry.handle(state, "/tasks high") or ""
    assert "Upcoming (1):" in board and "Write report" in board
    assert state.priority_filter == "high"

    board = await registry.handle(state, "/tasks low") or ""
    assert "Write report" not in board


@pytest.mark.asyncio
async def test_add_validation(state: AppState) -> None:
    assert "Usage" in (await registry.handle(state, "/add") or "")
    assert "Invalid deadline" in (await registry.handle(state, "/add X | tomorrow") or "")
    assert "Unknown priority" in (await registry.handle(state, "/add X | | critical") or "")
    assert "Usage" in (await registry.handle(state, "/tasks someday") or "")
    assert len(state.tasks) == 0


@pytest.mark.asyncio
async def test_done_del_by_prefix(state: AppState) -> None:
    await registry.handle(state, "/add First")
    await registry.handle(state, "/add Second")
    first, second = state.tasks.all()

    assert "Completed: First" in (await registry.handle(state, f"/done {first.id[:10]}") or "")
    assert first.status == TaskStatus.COMPLETED
    assert "already completed" in (await registry.handle(state, f"/done {first.id}") or "")

    assert "Deleted: Second" in (await registry.handle(state, f"/del {second.id}") or "")
    assert "No task matches" in (await registry.handle(state, "/del zzzz") or "")
    assert len(state.tasks) == 1


@pytest.mark.asyncio
async def test_analyze_and_sub(state: AppState, invoker: FakeAgentInvoker) -> None:
    await registry.handle(state, "/add Plan sprint")
    invoker.push(ok({"message": "Done.", "tasks": [{"task_name": "plan sprint", "subtasks": ["Pick stories"]}]}))

    reply = await registry.handle(state, "/analyze") or ""
    assert reply.startswith("Done.")

    task = state.tasks.all()[0]
    sub = task.subtasks[0]
    reply = await registry.handle(state, f"/sub {task.id} {sub.id[:10]}") or ""
    assert "Pick stories: done (1/1, 100%)" == reply


@pytest.mark.asyncio
async def test_remind_notes_and_read(state: AppState, invoker: FakeAgentInvoker) -> None:
    await registry.handle(state, "/add Pay rent | | urgent")
    invoker.push(
        ok({"reminders": [{"task_name": "Pay rent", "priority": "urgent", "reminder_message": "Due"}], "summary": "One due."})
    )

    reply = await registry.handle(state, "/remind") or ""
    assert "1 reminder(s) generated" in reply
    assert "### Reminder Check" in reply
    assert "Pay rent: Due" in reply

    notes = await registry.handle(state, "/notes") or ""
    assert "(1 unread)" in notes

    assert "Marked 1 notification(s) read." == await registry.handle(state, "/read all")
    assert state.notifications.unread_count() == 0


@pytest.mark.asyncio
async def test_schedule_commands(state: AppState, scheduler: FakeScheduler) -> None:
    text = await registry.handle(state, "/schedule") or ""
    assert "active" in text and "Every 2 hours" in text

    text = await registry.handle(state, "/toggle") or ""
    assert "paused" in text
    assert scheduler.names()[-2:] == ["pause_schedule", "list_schedules"]

    assert "Schedule triggered manually" in (await registry.handle(state, "/trigger") or "")
    await state.schedules.wait_pending()

    logs = await registry.handle(state, "/logs") or ""
    assert "ok" in logs

    scheduler.failures["trigger_schedule_now"] = "Schedule is paused"
    assert "Trigger failed: Schedule is paused" == await registry.handle(state, "/trigger")


@pytest.mark.asyncio
async def test_insights_sample_and_status(state: AppState) -> None:
    assert "Sample data loaded." == await registry.handle(state, "/sample on")
    insights = await registry.handle(state, "/insights") or ""
    assert "Completed: 1/5 (20%)" in insights
    assert "Productivity score: 40" in insights

    status = await registry.handle(state, "/status") or ""
    assert "FakeAgentInvoker" in status and "FakeScheduler" in status

    assert "All data cleared." == await registry.handle(state, "/sample off")
    assert len(state.tasks) == 0
