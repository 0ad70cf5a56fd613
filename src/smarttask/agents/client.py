# src/smarttask/agents/client.py

from __future__ import annotations

import json
import logging
import time
from typing import Any

import httpx
import openai
from openai import AsyncOpenAI

from ..core.ports import AgentResult
from .prompts import with_current_date

logger = logging.getLogger(__name__)

_BAD_MODEL_COOLDOWN_SECONDS = 3600.0


def _is_auth_error(exc: Exception) -> bool:
    return isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError))


def _is_rate_limit_error(exc: Exception) -> bool:
    return isinstance(exc, openai.RateLimitError)


def _is_connection_error(exc: Exception) -> bool:
    return isinstance(exc, (openai.APIConnectionError, openai.APITimeoutError, httpx.TransportError))


def _is_not_found_error(exc: Exception) -> bool:
    return isinstance(exc, openai.NotFoundError)


def friendly_agent_error_message(err: Exception) -> str:
    msg = str(err).strip() or "Agent error."
    if "Agent API key is not set" in msg:
        return "Agents are not configured (missing API key). Set SMARTTASK_AGENT_API_KEY in .env."
    if "Agent model list is empty" in msg:
        return "Agents are not configured (no models). Set SMARTTASK_AGENT_MODELS in .env."
    if "Agent base URL is not set" in msg:
        return "Agents are not configured (missing base URL). Set SMARTTASK_AGENT_BASE_URL in .env."
    return msg


def _decode_payload(content: str) -> dict[str, Any] | None:
    """Parse the model output as a JSON object; tolerate a fenced ```json block."""
    text = content.strip()
    if text.startswith("```"):
        text = text.strip("`")
        if text.lower().startswith("json"):
            text = text[4:]
    try:
        val = json.loads(text)
    except json.JSONDecodeError:
        start, end = text.find("{"), text.rfind("}")
        if start == -1 or end <= start:
            return None
        try:
            val = json.loads(text[start : end + 1])
        except json.JSONDecodeError:
            return None
    return val if isinstance(val, dict) else None


class OpenAIAgentClient:
    """
    Agent backend on top of an OpenAI-compatible chat completions API (OpenRouter by default).

    Each agent id maps to a role prompt. One invoke = one non-streaming completion
    that must return a JSON object.

    Behavior:
    - Tries models in order; 404 models are skipped for an hour.
    - Rate limit / network issues / unusable output -> try next model.
    - Auth issues -> fail fast (raised as RuntimeError).
    - All models unusable -> AgentResult(success=False); last network error is re-raised
      so the caller can tell transport failures apart.
    """

    def __init__(self, settings: Any, agent_prompts: dict[str, str]) -> None:
        api_key = getattr(settings, "agent_api_key", None)
        base_url = getattr(settings, "agent_base_url", "") or ""
        if not api_key or not str(api_key).strip():
            raise RuntimeError("Agent API key is not set. Set SMARTTASK_AGENT_API_KEY in your .env.")
        if not base_url.strip():
            raise RuntimeError("Agent base URL is not set. Set SMARTTASK_AGENT_BASE_URL in your .env.")

        self._models: list[str] = [m.strip() for m in (getattr(settings, "agent_models", []) or []) if m.strip()]
        if not self._models:
            raise RuntimeError("Agent model list is empty. Set SMARTTASK_AGENT_MODELS in your .env.")

        self._headers: dict[str, str] = dict(getattr(settings, "extra_headers", {}) or {})
        self._prompts = dict(agent_prompts)
        self._bad_models: dict[str, float] = {}  # model -> retry_at (monotonic)

        timeout_s = float(getattr(settings, "agent_timeout_seconds", 60.0))
        # No SDK retries: fall back across models instead.
        self._client = AsyncOpenAI(
            base_url=str(base_url),
            api_key=str(api_key),
            timeout=httpx.Timeout(timeout_s, connect=5.0),
            max_retries=0,
        )

    async def aclose(self) -> None:
        await self._client.close()

    async def invoke_agent(self, prompt_text: str, agent_id: str) -> AgentResult:
        system_prompt = self._prompts.get(agent_id)
        if system_prompt is None:
            return AgentResult(success=False, error=f"Unknown agent: {agent_id}")

        messages = [
            {"role": "system", "content": with_current_date(system_prompt)},
            {"role": "user", "content": prompt_text},
        ]

        last_error: Exception | None = None
        now = time.monotonic()

        for model in self._models:
            retry_at = self._bad_models.get(model)
            if retry_at is not None and retry_at > now:
                continue

            logger.info("Agent %s: trying model=%s", agent_id, model)
            t0 = time.monotonic()
            try:
                completion = await self._client.chat.completions.create(
                    model=model,
                    messages=messages,
                    response_format={"type": "json_object"},
                    extra_headers=self._headers or None,
                )
            except Exception as e:
                last_error = e

                if _is_auth_error(e):
                    raise RuntimeError(
                        "Agent authentication failed. Check your API key (SMARTTASK_AGENT_API_KEY)."
                    ) from e

                if _is_not_found_error(e):
                    self._bad_models[model] = time.monotonic() + _BAD_MODEL_COOLDOWN_SECONDS
                    logger.info("Agent: model not available (404): %s", model)
                    continue

                if _is_rate_limit_error(e):
                    logger.info("Agent: rate-limited on model=%s, trying next", model)
                    continue

                if _is_connection_error(e):
                    logger.info("Agent: network/timeout error on model=%s, trying next", model)
                    continue

                logger.info("Agent: error on model=%s (%s), trying next", model, e.__class__.__name__)
                continue

            try:
                content = completion.choices[0].message.content or ""
            except (IndexError, AttributeError):
                content = ""

            payload = _decode_payload(content) if content else None
            if payload is None:
                logger.info("Agent: model=%s returned no usable JSON, trying next", model)
                last_error = None
                continue

            logger.info("Agent %s: completed with model=%s (%.2fs)", agent_id, model, time.monotonic() - t0)
            return AgentResult(success=True, result=payload)

        if last_error is not None and _is_connection_error(last_error):
            raise last_error
        if last_error is not None and _is_rate_limit_error(last_error):
            return AgentResult(success=False, error="Agent is rate-limited. Try again later.")
        return AgentResult(success=False, error="All agent models failed.")
