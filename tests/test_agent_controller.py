# tests/test_agent_controller.py

from __future__ import annotations

import asyncio

import pytest

from smarttask.agents.controller import (
    GENERIC_ERROR_TEXT,
    GENERIC_FAILURE_TEXT,
    AgentSessionController,
    InvokeOutcome,
)
from smarttask.agents.session import AgentSession, SessionState
from smarttask.core.transcript import ChatTranscript, Role

from .fakes import FakeAgentInvoker, ok, refused


def _controller(invoker: FakeAgentInvoker) -> tuple[AgentSessionController, ChatTranscript]:
    transcript = ChatTranscript()
    ctl = AgentSessionController(invoker, transcript)
    ctl.register("agent", lambda payload: f"got {payload.get('x')}")
    return ctl, transcript


def test_session_activate_releases_on_error() -> None:
    session = AgentSession()
    states = []
    session.subscribe(lambda: states.append((session.state, session.active_agent_id)))

    with pytest.raises(RuntimeError), session.activate("a"):
        assert session.active_agent_id == "a"
        raise RuntimeError("boom")

    assert session.is_idle
    assert states == [(SessionState.ACTIVE, "a"), (SessionState.IDLE, None)]


def test_session_overlapping_activations() -> None:
    session = AgentSession()
    with session.activate("a"):
        with session.activate("b"):
            assert session.active_agent_id == "b"
        assert session.active_agent_id == "a"
    assert session.state == SessionState.IDLE


@pytest.mark.asyncio
async def test_invoke_success_appends_formatted_message() -> None:
    invoker = FakeAgentInvoker(ok({"x": 1}))
    ctl, transcript = _controller(invoker)

    result = await ctl.invoke("agent", "hello")

    assert result.ok
    assert result.outcome == InvokeOutcome.OK
    assert invoker.calls == [("hello", "agent")]
    assert [(m.role, m.content) for m in transcript.all()] == [(Role.ASSISTANT, "got 1")]
    assert transcript.last().data == {"x": 1}
    assert ctl.session.is_idle


@pytest.mark.asyncio
async def test_invoke_agent_failure_uses_generic_text() -> None:
    ctl, transcript = _controller(FakeAgentInvoker(refused("quota exceeded: key sk-123")))

    result = await ctl.invoke("agent", "hello")

    assert result.outcome == InvokeOutcome.AGENT_FAILED
    assert [m.content for m in transcript.all()] == [GENERIC_FAILURE_TEXT]
    assert "sk-123" not in transcript.last().content
    assert ctl.session.state == SessionState.IDLE


@pytest.mark.asyncio
async def test_invoke_transport_failure_uses_network_text() -> None:
    ctl, transcript = _controller(FakeAgentInvoker(ConnectionError("dns failure")))

    result = await ctl.invoke("agent", "hello")

    assert result.outcome == InvokeOutcome.TRANSPORT_FAILED
    assert [m.content for m in transcript.all()] == [GENERIC_ERROR_TEXT]
    assert ctl.session.is_idle
    assert ctl.session.state == SessionState.IDLE
    assert not ctl.is_busy


@pytest.mark.asyncio
async def test_handler_crash_counts_as_agent_failure() -> None:
    transcript = ChatTranscript()
    ctl = AgentSessionController(FakeAgentInvoker(ok({})), transcript)

    def _boom(payload):
        raise ValueError("bad payload")

    ctl.register("agent", _boom)
    result = await ctl.invoke("agent", "x")

    assert result.outcome == InvokeOutcome.AGENT_FAILED
    assert transcript.last().content == GENERIC_FAILURE_TEXT
    assert ctl.session.is_idle


@pytest.mark.asyncio
async def test_route_failure_texts_and_hook() -> None:
    transcript = ChatTranscript()
    seen = []
    ctl = AgentSessionController(FakeAgentInvoker(refused(), TimeoutError()), transcript)
    ctl.register(
        "reminders",
        lambda payload: None,
        failure_text="Failed",
        error_text="Unreachable",
        on_failure=lambda outcome, text: seen.append((outcome, text)),
    )

    await ctl.invoke("reminders", "a")
    await ctl.invoke("reminders", "b")

    assert [m.content for m in transcript.all()] == ["Failed", "Unreachable"]
    assert seen == [
        (InvokeOutcome.AGENT_FAILED, "Failed"),
        (InvokeOutcome.TRANSPORT_FAILED, "Unreachable"),
    ]


@pytest.mark.asyncio
async def test_handler_returning_none_adds_no_message() -> None:
    transcript = ChatTranscript()
    ctl = AgentSessionController(FakeAgentInvoker(ok({})), transcript)
    ctl.register("agent", lambda payload: None)

    result = await ctl.invoke("agent", "x")

    assert result.ok
    assert result.message is None
    assert len(transcript) == 0


@pytest.mark.asyncio
async def test_session_is_active_while_call_in_flight() -> None:
    gate = asyncio.Event()

    class SlowInvoker(FakeAgentInvoker):
        async def invoke_agent(self, prompt_text, agent_id):
            await gate.wait()
            return await super().invoke_agent(prompt_text, agent_id)

    ctl, _ = _controller(SlowInvoker(ok({"x": 2})))
    task = asyncio.create_task(ctl.invoke("agent", "x"))
    await asyncio.sleep(0)

    assert ctl.active_agent_id == "agent"
    assert ctl.is_busy

    gate.set()
    await task
    assert ctl.active_agent_id is None
