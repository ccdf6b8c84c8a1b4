"""Escalation state machine — warnings → lock → optional log-off.

`tick()` is pure: it mutates only the DayState it is handed and returns
a list of intents (Notify, LockWorkstation, LogOff, RecordEvent) for the
caller to execute. EscalationStateMachine wraps it with the inputs that
arrive from outside the tick loop (cancel, reload, resume) and guards
DayState and the active Schedule/Policy with one lock.

Per-tick order (all checks independent, more than one may fire):
  1. daily reset        4. general warning (repeat-gated)
  2. cancelled → stop   5. lock (once per day)
  3. one-minute warning 6. auto-log-off (once per lock episode)
"""

from __future__ import annotations

import math
import threading
from dataclasses import dataclass
from datetime import datetime

from .config import log
from .evaluator import evaluate
from .events import Event, EventKind
from .schedule import Policy, Schedule
from .state import DayState


# ─── Intents (returned to the caller, executed outside the core) ──

@dataclass(frozen=True)
class Notify:
    message: str


@dataclass(frozen=True)
class LockWorkstation:
    pass


@dataclass(frozen=True)
class LogOff:
    pass


@dataclass(frozen=True)
class RecordEvent:
    event: Event


# ─── Input messages ──────────────────────────────────────────────

@dataclass(frozen=True)
class Tick:
    now: datetime


@dataclass(frozen=True)
class ResumeFromSuspend:
    now: datetime


@dataclass(frozen=True)
class CancelTonight:
    now: datetime


@dataclass(frozen=True)
class ConfigReloaded:
    schedule: Schedule
    policy: Policy


MSG_ONE_MINUTE = "Bedtime in 1 minute!"
MSG_LOCK = "Bedtime reached. Locking workstation now."
MSG_LOGOFF = "Grace period expired. Logging off now."
MSG_CANCELLED = "Bedtime enforcement cancelled for tonight."
MSG_RELOADED = "Config reloaded"


def warning_message(minutes_to_bed: float) -> str:
    minutes = math.ceil(minutes_to_bed)
    unit = "minute" if minutes == 1 else "minutes"
    return f"Bedtime in {minutes} {unit}."


def tick(now: datetime, schedule: Schedule, policy: Policy, state: DayState) -> list:
    """Run one evaluation against `state` and return the resulting intents."""
    intents = []

    if state.reset_if_new_day(now):
        log.info("New day %s, state reset", state.date)

    if state.cancelled_tonight:
        return intents

    result = evaluate(now, schedule)
    if result.ok:
        m = result.minutes_to_bed
        one_minute_fired = False

        if policy.one_minute_warning and 0 < m <= 1 and not state.one_minute_warning_shown:
            state.one_minute_warning_shown = True
            state.record_warning(now)
            one_minute_fired = True
            intents.append(Notify(MSG_ONE_MINUTE))
            log.info("One-minute warning (%.2f min to bed)", m)

        if (not one_minute_fired
                and 0 < m <= policy.warning_lead_minutes
                and state.warning_due(now, policy.warning_repeat_minutes)):
            state.record_warning(now)
            intents.append(Notify(warning_message(m)))
            log.info("Bedtime warning (%.2f min to bed)", m)

        if m <= 0 and not state.locked:
            state.mark_locked(now)
            intents.append(Notify(MSG_LOCK))
            intents.append(LockWorkstation())
            intents.append(RecordEvent(Event.at(EventKind.LOCK, now, "workstation locked")))
            log.info("Bedtime reached (%.2f min), locking", m)

    elif result.error and not state.bedtime_error_reported:
        state.bedtime_error_reported = True
        intents.append(Notify(f"Error: {result.error}"))

    # Keyed on the lock episode only, not on today's evaluation result
    if (policy.auto_logoff
            and not state.logged_off
            and state.grace_elapsed(now, policy.grace_minutes)):
        state.mark_logged_off()
        intents.append(Notify(MSG_LOGOFF))
        intents.append(RecordEvent(Event.at(EventKind.LOGOFF, now, "auto logoff")))
        intents.append(LogOff())
        log.info("Grace period of %d min expired, logging off", policy.grace_minutes)

    return intents


class EscalationStateMachine:
    """
    Owns DayState and the active (Schedule, Policy) snapshot.
    handle() is the only entry point; every call runs under self._lock.
    """

    def __init__(self, schedule: Schedule, policy: Policy, state: DayState | None = None):
        self._schedule = schedule
        self._policy = policy
        self._state = state if state is not None else DayState()
        self._lock = threading.RLock()

    @property
    def policy(self) -> Policy:
        with self._lock:
            return self._policy

    @property
    def schedule(self) -> Schedule:
        with self._lock:
            return self._schedule

    @property
    def state(self) -> DayState:
        return self._state

    @property
    def cancelled_tonight(self) -> bool:
        with self._lock:
            return self._state.cancelled_tonight

    def handle(self, message) -> list:
        with self._lock:
            if isinstance(message, Tick):
                return tick(message.now, self._schedule, self._policy, self._state)
            if isinstance(message, ResumeFromSuspend):
                return self._on_resume(message.now)
            if isinstance(message, CancelTonight):
                return self._on_cancel(message.now)
            if isinstance(message, ConfigReloaded):
                return self._on_reload(message.schedule, message.policy)
        raise TypeError(f"Unsupported message: {message!r}")

    def _on_resume(self, now):
        if self._state.reset_if_new_day(now):
            log.info("Resumed on a new day %s, state reset", self._state.date)
        return []

    def _on_cancel(self, now):
        # A cancel just after midnight belongs to the new night
        self._state.reset_if_new_day(now)
        if not self._state.mark_cancelled():
            return []
        log.info("Enforcement cancelled for tonight (locked=%s)", self._state.locked)
        return [
            RecordEvent(Event.at(EventKind.CANCEL_TONIGHT, now, "user override")),
            Notify(MSG_CANCELLED),
        ]

    def _on_reload(self, schedule, policy):
        self._schedule = schedule
        self._policy = policy
        log.info("Config snapshot replaced")
        return [Notify(MSG_RELOADED)]
