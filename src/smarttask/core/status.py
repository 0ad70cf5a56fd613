# src/smarttask/core/status.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class StatusKind(StrEnum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


@dataclass(slots=True, frozen=True)
class StatusMessage:
    """One-line feedback for the last user action. Expiry is up to the front-end."""

    kind: StatusKind
    text: str
    timestamp: str
