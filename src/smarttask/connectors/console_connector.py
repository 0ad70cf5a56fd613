# src/smarttask/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
import sys
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.chat import send_chat_message
from ..core.state import AppState
from ..core.status import StatusKind

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _rewrite_prev_line(line: str) -> None:
    """
    Replace the last terminal line with `line`.
    Best-effort: if not a TTY, just print a new line.
    """
    if sys.stdout.isatty():
        sys.stdout.write("\033[1A\033[2K\r")
        sys.stdout.write(line + "\n")
        sys.stdout.flush()
    else:
        print(line)


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


def _watch_agent_session(state: AppState):
    """Print a one-line notice whenever an agent starts working. Returns the unsubscribe hook."""
    names = {
        state.task_agent_id: "Task agent",
        state.reminder_agent_id: "Reminder agent",
    }
    last_seen: list[str | None] = [None]

    def _on_change() -> None:
        active = state.agents.active_agent_id
        if active and active != last_seen[0]:
            _print_ts(f"[AGENT] {names.get(active, active)} is working...")
        last_seen[0] = active

    return state.agents.session.subscribe(_on_change)


def _watch_schedule_errors(state: AppState):
    last_error: list[str | None] = [None]

    def _on_change() -> None:
        err = state.schedules.error
        if err and err != last_error[0]:
            _print_ts(f"[SCHEDULE] {err}")
        last_error[0] = err

    return state.schedules.subscribe(_on_change)


async def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Type a message for the task agent. Use /help for commands. Use /exit to quit.\n")

    app_name = str(getattr(getattr(state, "settings", None), "app_name", "smarttask"))
    unsubscribers = [_watch_agent_session(state), _watch_schedule_errors(state)]

    try:
        while True:
            try:
                user_input = (await asyncio.to_thread(input, ">>> You: ")).strip()
                _rewrite_prev_line(f"[{_ts_local()}] >>> You: {user_input}")
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break
            except KeyboardInterrupt:
                logger.info("Console KeyboardInterrupt, exiting.")
                print()
                break

            if not user_input:
                continue

            if user_input.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            # Commands (/help, /tasks, ...)
            try:
                cmd_response = await command_registry.handle(state, user_input)
            except Exception:
                logger.exception("Command handler crashed.")
                cmd_response = "Internal error while handling a command."

            if cmd_response is not None:
                _print_ts(cmd_response)
                continue

            # Normal chat: one request/response turn with the task agent.
            try:
                result = await send_chat_message(state, user_input)
            except Exception:
                logger.exception("Console chat handler crashed.")
                _print_ts("Internal error while generating a reply.")
                continue

            if result is None or result.message is None:
                _print_ts("[AGENT] No reply.")
                continue

            _print_ts(f"<<< {app_name}:\n{result.message.content}\n")
            if state.status is not None and state.status.kind == StatusKind.ERROR:
                _print_ts(f"[{state.status.kind.value}] {state.status.text}")
    finally:
        for unsubscribe in unsubscribers:
            unsubscribe()

    logger.info("Console connector finished.")
