# src/smarttask/agents/controller.py

"""
Agent session controller.

One `invoke()` is one logical request:
- enter Active(agent_id)
- call the agent backend once
- success -> the agent's registered handler turns the payload into transcript text
  (and applies its side effects to the stores)
- success=false / transport failure -> one generic assistant message, no raw error text
- always back to Idle before returning
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, ContextManager

from ..core.ports import AgentInvoker
from ..core.transcript import ChatMessage, ChatTranscript
from .session import AgentSession

logger = logging.getLogger(__name__)

ResponseHandler = Callable[[dict[str, Any]], str | None]
FailureHook = Callable[["InvokeOutcome", str], None]
BatchScope = Callable[[], ContextManager[Any]]

GENERIC_FAILURE_TEXT = "I encountered an error processing your request. Please try again."
GENERIC_ERROR_TEXT = "Network error. Please check your connection and try again."


class InvokeOutcome(StrEnum):
    OK = "ok"
    AGENT_FAILED = "agent_failed"
    TRANSPORT_FAILED = "transport_failed"


@dataclass(slots=True, frozen=True)
class InvokeResult:
    outcome: InvokeOutcome
    payload: dict[str, Any] | None = None
    message: ChatMessage | None = None

    @property
    def ok(self) -> bool:
        return self.outcome == InvokeOutcome.OK


@dataclass(slots=True, frozen=True)
class AgentRoute:
    handler: ResponseHandler
    failure_text: str = GENERIC_FAILURE_TEXT
    error_text: str = GENERIC_ERROR_TEXT
    on_failure: FailureHook | None = None


class AgentSessionController:
    def __init__(
        self,
        invoker: AgentInvoker,
        transcript: ChatTranscript,
        *,
        session: AgentSession | None = None,
        batch: BatchScope | None = None,
    ) -> None:
        self._invoker = invoker
        self._transcript = transcript
        self.session = session or AgentSession()
        self._batch: BatchScope = batch or contextlib.nullcontext
        self._routes: dict[str, AgentRoute] = {}

    def register(
        self,
        agent_id: str,
        handler: ResponseHandler,
        *,
        failure_text: str = GENERIC_FAILURE_TEXT,
        error_text: str = GENERIC_ERROR_TEXT,
        on_failure: FailureHook | None = None,
    ) -> None:
        self._routes[agent_id] = AgentRoute(
            handler=handler,
            failure_text=failure_text,
            error_text=error_text,
            on_failure=on_failure,
        )

    @property
    def invoker(self) -> AgentInvoker:
        return self._invoker

    @property
    def active_agent_id(self) -> str | None:
        return self.session.active_agent_id

    @property
    def is_busy(self) -> bool:
        return not self.session.is_idle

    async def invoke(self, agent_id: str, prompt_text: str) -> InvokeResult:
        route = self._routes.get(agent_id)
        if route is None:
            logger.warning("No response handler registered for agent_id=%s", agent_id)
            route = AgentRoute(handler=lambda _payload: None)

        with self.session.activate(agent_id):
            try:
                result = await self._invoker.invoke_agent(prompt_text, agent_id)
            except Exception:
                logger.exception("Agent call failed agent_id=%s", agent_id)
                return self._fail(route, InvokeOutcome.TRANSPORT_FAILED)

            if not result.success:
                logger.info("Agent reported failure agent_id=%s error=%s", agent_id, result.error)
                return self._fail(route, InvokeOutcome.AGENT_FAILED)

            payload = result.result if isinstance(result.result, dict) else {}
            try:
                with self._batch():
                    content = route.handler(payload)
                    message = (
                        self._transcript.add_assistant(content, data=payload)
                        if content is not None
                        else None
                    )
            except Exception:
                logger.exception("Response handler failed agent_id=%s", agent_id)
                return self._fail(route, InvokeOutcome.AGENT_FAILED)

            logger.info("Agent call ok agent_id=%s", agent_id)
            return InvokeResult(outcome=InvokeOutcome.OK, payload=payload, message=message)

    def _fail(self, route: AgentRoute, outcome: InvokeOutcome) -> InvokeResult:
        text = route.error_text if outcome == InvokeOutcome.TRANSPORT_FAILED else route.failure_text
        with self._batch():
            message = self._transcript.add_assistant(text)
            if route.on_failure is not None:
                try:
                    route.on_failure(outcome, text)
                except Exception:
                    logger.exception("Failure hook crashed")
        return InvokeResult(outcome=outcome, message=message)
