# src/smarttask/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time.
- Remote collaborators (agent backend, scheduler) are optional: missing URLs/keys
  mean the app runs against offline/in-memory stand-ins.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "SMARTTASK"

DEFAULT_TASK_AGENT_ID = "69a0921c849533a5e9977933"
DEFAULT_REMINDER_AGENT_ID = "69a0921d5fbdce87bf6e73e9"
DEFAULT_SCHEDULE_ID = "69a0922625d4d77f732e739a"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


# Local .env never overrides variables already set in the environment.
load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_optional(name: str) -> str | None:
    v = os.getenv(name)
    if v is None or v.strip() == "":
        return None
    return v.strip()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    return [p.strip() for p in raw.replace(",", " ").split() if p.strip()]


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    data_dir: Path

    # ---- Switches ----
    console_enabled: bool
    sample_data: bool

    # ---- Agents ----
    task_agent_id: str
    reminder_agent_id: str
    agent_api_key: str | None
    agent_base_url: str
    agent_models: list[str]
    agent_timeout_seconds: float
    extra_headers: dict[str, str]

    # ---- Scheduler ----
    schedule_id: str
    scheduler_base_url: str | None
    scheduler_api_key: str | None
    schedule_log_limit: int
    trigger_refresh_delay_seconds: float
    schedule_poll_seconds: float

    @staticmethod
    def from_env() -> Settings:
        app_name = _env(_k("APP_NAME"), "smarttask") or "smarttask"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/smarttask"))

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)
        sample_data = _env_bool(_k("SAMPLE_DATA"), False)

        task_agent_id = _env(_k("TASK_AGENT_ID"), DEFAULT_TASK_AGENT_ID).strip() or DEFAULT_TASK_AGENT_ID
        reminder_agent_id = (
            _env(_k("REMINDER_AGENT_ID"), DEFAULT_REMINDER_AGENT_ID).strip() or DEFAULT_REMINDER_AGENT_ID
        )

        agent_api_key = _env_optional(_k("AGENT_API_KEY"))
        agent_base_url = _env(_k("AGENT_BASE_URL"), "https://openrouter.ai/api/v1")
        agent_models = _env_list(
            _k("AGENT_MODELS"),
            [
                "qwen/qwen-2.5-72b-instruct:free",
                "deepseek/deepseek-chat-v3-0324:free",
            ],
        )
        agent_timeout_seconds = _env_float(_k("AGENT_TIMEOUT_SECONDS"), 60.0)

        extra_headers = {
            "HTTP-Referer": _env(_k("HTTP_REFERER"), "https://example.com"),
            "X-Title": _env(_k("APP_TITLE"), app_name),
        }

        schedule_id = _env(_k("SCHEDULE_ID"), DEFAULT_SCHEDULE_ID).strip() or DEFAULT_SCHEDULE_ID
        scheduler_base_url = _env_optional(_k("SCHEDULER_BASE_URL"))
        scheduler_api_key = _env_optional(_k("SCHEDULER_API_KEY"))
        schedule_log_limit = max(1, _env_int(_k("SCHEDULE_LOG_LIMIT"), 10))
        trigger_refresh_delay_seconds = max(0.0, _env_float(_k("TRIGGER_REFRESH_DELAY_SECONDS"), 3.0))
        schedule_poll_seconds = max(1.0, _env_float(_k("SCHEDULE_POLL_SECONDS"), 60.0))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            console_enabled=console_enabled,
            sample_data=sample_data,
            task_agent_id=task_agent_id,
            reminder_agent_id=reminder_agent_id,
            agent_api_key=agent_api_key,
            agent_base_url=agent_base_url,
            agent_models=agent_models,
            agent_timeout_seconds=agent_timeout_seconds,
            extra_headers=extra_headers,
            schedule_id=schedule_id,
            scheduler_base_url=scheduler_base_url,
            scheduler_api_key=scheduler_api_key,
            schedule_log_limit=schedule_log_limit,
            trigger_refresh_delay_seconds=trigger_refresh_delay_seconds,
            schedule_poll_seconds=schedule_poll_seconds,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
