# src/smarttask/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, loads the schedule mirror, then runs:
- the schedule poller as a background task,
- the console REPL (optional; otherwise waits for a signal).
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal

from ..cli.bootstrap import close_clients, create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.state import AppState
from ..logging_setup import setup_logging
from ..schedules.sync import run_schedule_poller

logger = logging.getLogger(__name__)


async def _shutdown(state: AppState, poller: asyncio.Task[None]) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    poller.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await poller

    state.schedules.cancel_pending()
    await close_clients(state)


async def _wait_for_signal() -> None:
    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for signum in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(signum, stop.set)
        except (NotImplementedError, RuntimeError):
            # Some platforms do not support signal handlers on the loop.
            logger.debug("Signal handler unavailable for %s", signum)
    await stop.wait()
    logger.info("Signal received, shutting down...")


async def run(settings) -> None:
    # IMPORTANT: reuse same settings object
    state = create_initial_state(settings=settings)

    await state.schedules.initial_load()
    poller = asyncio.create_task(
        run_schedule_poller(state.schedules, interval_seconds=settings.schedule_poll_seconds)
    )

    try:
        if settings.console_enabled:
            await run_console_loop(state)
        else:
            logger.info("Console disabled. Running schedule poller only. Press Ctrl+C to stop.")
            await _wait_for_signal()
    finally:
        await _shutdown(state, poller)
        logger.info("Bye.")


def main() -> None:
    settings = get_settings()

    # choose console log level from settings.log_level
    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(run(settings))


if __name__ == "__main__":
    main()
