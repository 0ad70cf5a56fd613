# src/smarttask/agents/session.py

from __future__ import annotations

import contextlib
import logging
from collections.abc import Iterator
from enum import StrEnum

from ..core.observable import Observable

logger = logging.getLogger(__name__)


class SessionState(StrEnum):
    IDLE = "idle"
    ACTIVE = "active"


class AgentSession(Observable):
    """
    Which agent (if any) the UI is currently waiting on.

    Idle -> Active(agent_id) -> Idle.

    Overlapping activations are not refused here (the front-end disables its
    triggers instead). The most recent outstanding activation is reported as the
    active agent, and the session is Idle once every activation has exited.
    """

    def __init__(self) -> None:
        super().__init__()
        self._outstanding: list[tuple[object, str]] = []

    @property
    def active_agent_id(self) -> str | None:
        return self._outstanding[-1][1] if self._outstanding else None

    @property
    def state(self) -> SessionState:
        return SessionState.ACTIVE if self._outstanding else SessionState.IDLE

    @property
    def is_idle(self) -> bool:
        return not self._outstanding

    @contextlib.contextmanager
    def activate(self, agent_id: str) -> Iterator[None]:
        token = object()
        self._outstanding.append((token, agent_id))
        logger.debug("Agent session -> active(%s)", agent_id)
        self._changed()
        try:
            yield
        finally:
            self._outstanding = [(t, a) for (t, a) in self._outstanding if t is not token]
            logger.debug("Agent session %s released (now %s)", agent_id, self.state.value)
            self._changed()
