# src/smarttask/schedules/cron.py

"""Human-readable rendering of five-field cron expressions (display only)."""

from __future__ import annotations

import re

_DAY_NAMES = {
    "0": "Sunday",
    "1": "Monday",
    "2": "Tuesday",
    "3": "Wednesday",
    "4": "Thursday",
    "5": "Friday",
    "6": "Saturday",
    "7": "Sunday",
    "sun": "Sunday",
    "mon": "Monday",
    "tue": "Tuesday",
    "wed": "Wednesday",
    "thu": "Thursday",
    "fri": "Friday",
    "sat": "Saturday",
}

_STEP = re.compile(r"^\*/(\d+)$")
_NUM = re.compile(r"^\d+$")


def _at(hour: str, minute: str) -> str:
    return f"{int(hour):02d}:{int(minute):02d}"


def cron_to_human(expression: str) -> str:
    """
    Describe the common cron shapes in words.

    Unknown or unsupported shapes are returned unchanged.
    """
    raw = (expression or "").strip()
    parts = raw.split()
    if len(parts) != 5:
        return raw

    minute, hour, dom, month, dow = parts
    if month != "*":
        return raw

    if dom == "*" and dow == "*":
        if minute == "*" and hour == "*":
            return "Every minute"

        m = _STEP.match(minute)
        if m and hour == "*":
            n = int(m.group(1))
            return "Every minute" if n == 1 else f"Every {n} minutes"

        if _NUM.match(minute) and hour == "*":
            return "Every hour" if int(minute) == 0 else f"Every hour at minute {int(minute)}"

        h = _STEP.match(hour)
        if h and _NUM.match(minute):
            n = int(h.group(1))
            return "Every hour" if n == 1 else f"Every {n} hours"

        if _NUM.match(minute) and _NUM.match(hour):
            return f"Daily at {_at(hour, minute)}"

        return raw

    if not (_NUM.match(minute) and _NUM.match(hour)):
        return raw

    if dom == "*":
        if dow.lower() in ("1-5", "mon-fri"):
            return f"Weekdays at {_at(hour, minute)}"
        day = _DAY_NAMES.get(dow.lower())
        if day:
            return f"Every {day} at {_at(hour, minute)}"
        return raw

    if dow == "*" and _NUM.match(dom):
        return f"Monthly on day {int(dom)} at {_at(hour, minute)}"

    return raw
