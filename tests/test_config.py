# tests/test_config.py

from __future__ import annotations

import os
from pathlib import Path

import pytest

from smarttask.config import DEFAULT_SCHEDULE_ID, DEFAULT_TASK_AGENT_ID, Settings


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for key in list(os.environ):
        if key.startswith("SMARTTASK_"):
            monkeypatch.delenv(key)
    return monkeypatch


def test_defaults(clean_env: pytest.MonkeyPatch) -> None:
    s = Settings.from_env()
    assert s.task_agent_id == DEFAULT_TASK_AGENT_ID
    assert s.schedule_id == DEFAULT_SCHEDULE_ID
    assert s.agent_api_key is None
    assert s.scheduler_base_url is None
    assert s.schedule_log_limit == 10
    assert s.trigger_refresh_delay_seconds == 3.0
    assert s.console_enabled is True
    assert s.sample_data is False


def test_overrides_and_bad_values(clean_env: pytest.MonkeyPatch, tmp_path: Path) -> None:
    clean_env.setenv("SMARTTASK_AGENT_MODELS", "a/one, b/two  c/three")
    clean_env.setenv("SMARTTASK_SCHEDULE_LOG_LIMIT", "not-a-number")
    clean_env.setenv("SMARTTASK_TRIGGER_REFRESH_DELAY_SECONDS", "-5")
    clean_env.setenv("SMARTTASK_SAMPLE_DATA", "yes")
    clean_env.setenv("SMARTTASK_DATA_DIR", str(tmp_path))
    clean_env.setenv("SMARTTASK_SCHEDULER_BASE_URL", "  ")
    clean_env.setenv("SMARTTASK_TASK_AGENT_ID", " ")

    s = Settings.from_env()
    assert s.agent_models == ["a/one", "b/two", "c/three"]
    assert s.schedule_log_limit == 10
    assert s.trigger_refresh_delay_seconds == 0.0
    assert s.sample_data is True
    assert s.data_dir == tmp_path
    assert s.scheduler_base_url is None
    assert s.task_agent_id == DEFAULT_TASK_AGENT_ID
