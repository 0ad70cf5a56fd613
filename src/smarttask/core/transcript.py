# src/smarttask/core/transcript.py

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from ..tasks.task_models import new_id, utc_now_iso
from .observable import Observable

logger = logging.getLogger(__name__)


class Role(StrEnum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(slots=True, frozen=True)
class ChatMessage:
    id: str
    role: Role
    content: str
    timestamp: str
    # Raw agent payload, kept for audit/debug; never rendered.
    data: dict[str, Any] | None = None


class ChatTranscript(Observable):
    """Append-only ordered log of user/assistant turns."""

    def __init__(self, messages: Iterable[ChatMessage] | None = None) -> None:
        super().__init__()
        self._messages: list[ChatMessage] = list(messages or [])

    def __len__(self) -> int:
        return len(self._messages)

    def all(self) -> list[ChatMessage]:
        return list(self._messages)

    def last(self) -> ChatMessage | None:
        return self._messages[-1] if self._messages else None

    def append(self, role: Role, content: str, *, data: dict[str, Any] | None = None) -> ChatMessage:
        msg = ChatMessage(id=new_id(), role=role, content=content, timestamp=utc_now_iso(), data=data)
        self._messages.append(msg)
        logger.debug("Transcript +%s (%d chars)", role.value, len(content))
        self._changed()
        return msg

    def add_user(self, content: str) -> ChatMessage:
        return self.append(Role.USER, content)

    def add_assistant(self, content: str, *, data: dict[str, Any] | None = None) -> ChatMessage:
        return self.append(Role.ASSISTANT, content, data=data)

    def reset(self, messages: Iterable[ChatMessage] = ()) -> None:
        """Replace the whole log (sample-data switch only; normal flows never remove messages)."""
        self._messages = list(messages)
        self._changed()
