"""Bedtime evaluator — how many minutes until tonight's bedtime.

No I/O: this module only transforms data. Both `now` and the configured
bedtime are local wall-clock; no timezone conversion happens here.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .config import log
from .constants import WEEKDAYS, TIME_FORMAT
from .schedule import Schedule


@dataclass(frozen=True)
class Evaluation:
    """Result of one evaluation.

    ok=False means "skip this tick". `error` is set only when the entry
    exists but could not be parsed, so the caller can tell the user.
    """

    minutes_to_bed: float = 0.0
    ok: bool = False
    error: str | None = None


def weekday_name(now: datetime) -> str:
    return WEEKDAYS[now.weekday()]


def parse_bedtime(raw: str, now: datetime) -> datetime:
    """Combine "HH:MM" with the calendar date of `now`.

    Raises ValueError on malformed input.
    """
    parsed = datetime.strptime(raw.strip(), TIME_FORMAT)
    return now.replace(hour=parsed.hour, minute=parsed.minute, second=0, microsecond=0)


def evaluate(now: datetime, schedule: Schedule) -> Evaluation:
    """Signed minutes from `now` to today's bedtime (negative once passed)."""
    day = weekday_name(now)
    raw = schedule.bedtime_for(day)
    if raw is None:
        log.debug("Bedtime not configured for %s", day)
        return Evaluation()

    try:
        target = parse_bedtime(raw, now)
    except ValueError as exc:
        log.warning("Invalid bedtime format for %s: %r (%s)", day, raw, exc)
        return Evaluation(error=f"Invalid bedtime format for {day}.")

    return Evaluation(minutes_to_bed=(target - now).total_seconds() / 60, ok=True)
