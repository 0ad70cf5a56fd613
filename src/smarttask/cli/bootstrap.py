# src/smarttask/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete agent/scheduler clients into AppState,
- optionally seeds the sample dataset.
"""

from __future__ import annotations

import logging

from ..agents.client import OpenAIAgentClient
from ..agents.offline import OfflineAgentClient
from ..agents.prompts import REMINDER_AGENT_PROMPT, TASK_AGENT_PROMPT
from ..config import get_settings
from ..core.chat import set_sample_data
from ..core.ports import AgentInvoker, SchedulerClient
from ..core.state import AppState, create_state
from ..schedules.client import HttpSchedulerClient, InMemorySchedulerClient

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)


def build_agent_invoker(settings) -> AgentInvoker:
    prompts = {
        settings.task_agent_id: TASK_AGENT_PROMPT,
        settings.reminder_agent_id: REMINDER_AGENT_PROMPT,
    }
    try:
        return OpenAIAgentClient(settings, prompts)
    except RuntimeError as e:
        # Demos / local runs without an agent backend.
        logger.info("Agent backend unavailable (%s); using offline agents.", e)
        return OfflineAgentClient(
            task_agent_id=settings.task_agent_id,
            reminder_agent_id=settings.reminder_agent_id,
        )


def build_scheduler_client(settings) -> SchedulerClient:
    if settings.scheduler_base_url:
        return HttpSchedulerClient(
            settings.scheduler_base_url,
            api_key=settings.scheduler_api_key,
        )
    logger.info("No scheduler URL configured; using in-memory scheduler.")
    return InMemorySchedulerClient(settings.schedule_id)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    state = create_state(
        settings,
        invoker=build_agent_invoker(settings),
        scheduler=build_scheduler_client(settings),
    )
    if settings.sample_data:
        set_sample_data(state, True)
    return state


async def close_clients(state: AppState) -> None:
    """Close network clients held by the controllers. Offline stand-ins have nothing to close."""
    for client in (state.agents.invoker, state.schedules.client):
        aclose = getattr(client, "aclose", None)
        if aclose is None:
            continue
        try:
            await aclose()
        except Exception:
            logger.debug("Client close failed: %r", client, exc_info=True)
