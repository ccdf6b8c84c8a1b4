"""
DayState — single source of truth for tonight's enforcement progress.

One instance per process. Mutated only by the escalation state machine
under its lock; superseded by reset() the first time a different
calendar date is seen.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Optional


@dataclass
class DayState:
    date: date = field(default_factory=date.today)

    # ── Manual override ───────────────────────────────────────
    cancelled_tonight: bool = False

    # ── Lock / log-off episode ────────────────────────────────
    locked: bool = False
    locked_at: Optional[datetime] = None
    logged_off: bool = False           # At most one log-off per lock episode

    # ── Warnings ──────────────────────────────────────────────
    last_warning_at: datetime = datetime.min
    one_minute_warning_shown: bool = False

    # ── Config problems surfaced to the user (once per day) ───
    bedtime_error_reported: bool = False

    def reset(self, today: date):
        """Back to defaults for a new calendar day."""
        self.date = today
        self.cancelled_tonight = False
        self.locked = False
        self.locked_at = None
        self.logged_off = False
        self.last_warning_at = datetime.min
        self.one_minute_warning_shown = False
        self.bedtime_error_reported = False

    def reset_if_new_day(self, now: datetime) -> bool:
        """Reset when `now` falls on a different date. Returns True if it did."""
        today = now.date()
        if today == self.date:
            return False
        self.reset(today)
        return True

    def mark_cancelled(self) -> bool:
        """Returns False when tonight was already cancelled."""
        if self.cancelled_tonight:
            return False
        self.cancelled_tonight = True
        return True

    def mark_locked(self, now: datetime):
        self.locked = True
        self.locked_at = now

    def mark_logged_off(self):
        self.logged_off = True

    def record_warning(self, now: datetime):
        self.last_warning_at = now

    def warning_due(self, now: datetime, repeat_minutes: float) -> bool:
        return now - self.last_warning_at >= timedelta(minutes=repeat_minutes)

    def grace_elapsed(self, now: datetime, grace_minutes: float) -> bool:
        if not self.locked or self.locked_at is None:
            return False
        return now - self.locked_at >= timedelta(minutes=grace_minutes)
