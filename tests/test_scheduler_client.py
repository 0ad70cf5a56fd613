# tests/test_scheduler_client.py

from __future__ import annotations

import json

import httpx
import pytest

from smarttask.schedules.client import HttpSchedulerClient, InMemorySchedulerClient


def _client(handler) -> HttpSchedulerClient:
    return HttpSchedulerClient(
        "http://scheduler.test/api/",
        api_key="secret",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_http_list_and_logs() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path == "/api/schedules":
            return httpx.Response(200, json={"schedules": [{"id": "s1", "is_active": True}, "junk"]})
        if request.url.path == "/api/schedules/s1/logs":
            return httpx.Response(200, json={"executions": [{"id": "e1", "success": True}]})
        return httpx.Response(404)

    async with _client(handler) as client:
        listed = await client.list_schedules()
        logs = await client.get_schedule_logs("s1", limit=5)

    assert listed.success and listed.schedules == [{"id": "s1", "is_active": True}]
    assert logs.success and logs.executions == [{"id": "e1", "success": True}]
    assert seen[0].headers["Authorization"] == "Bearer secret"
    assert seen[1].url.params["limit"] == "5"


@pytest.mark.asyncio
async def test_http_actions_report_remote_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        action = request.url.path.rsplit("/", 1)[-1]
        if action == "pause":
            return httpx.Response(200, json={"success": True})
        if action == "resume":
            return httpx.Response(200, content=json.dumps({"success": False, "error": "Schedule locked"}))
        return httpx.Response(500, json={"detail": "executor offline"})

    async with _client(handler) as client:
        paused = await client.pause_schedule("s1")
        resumed = await client.resume_schedule("s1")
        triggered = await client.trigger_schedule_now("s1")

    assert paused.success
    assert (resumed.success, resumed.error) == (False, "Schedule locked")
    assert (triggered.success, triggered.error) == (False, "executor offline")


@pytest.mark.asyncio
async def test_http_transport_errors_propagate() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    async with _client(handler) as client:
        with pytest.raises(httpx.TransportError):
            await client.list_schedules()


def test_http_requires_base_url() -> None:
    with pytest.raises(RuntimeError):
        HttpSchedulerClient("  ")


@pytest.mark.asyncio
async def test_in_memory_scheduler_round_trip() -> None:
    client = InMemorySchedulerClient("s1")

    assert (await client.pause_schedule("s1")).success
    listed = await client.list_schedules()
    assert listed.schedules[0]["is_active"] is False

    assert (await client.trigger_schedule_now("s1")).success
    logs = await client.get_schedule_logs("s1", limit=10)
    assert len(logs.executions) == 1 and logs.executions[0]["success"] is True

    missing = await client.trigger_schedule_now("nope")
    assert (missing.success, missing.error) == (False, "Schedule not found")
