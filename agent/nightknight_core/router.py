"""Notification router — normal toast or forced fallback popup.

Pure decision: no rendering, no retries. The caller makes exactly one
normal attempt and, if the renderer reports failure, delivers through
fallback_route().
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from .config import log
from .schedule import Policy


class Channel(str, Enum):
    NORMAL = "normal"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class Route:
    channel: Channel
    focus_stealing: bool = False


class PresenceProbe(Protocol):
    def is_fullscreen_app_focused(self) -> bool: ...


def _fullscreen(probe: PresenceProbe) -> bool:
    try:
        return bool(probe.is_fullscreen_app_focused())
    except Exception as exc:
        # Fail-safe toward the normal channel
        log.warning("Presence probe failed: %s", exc)
        return False


def fallback_route(policy: Policy) -> Route:
    return Route(Channel.FALLBACK, focus_stealing=policy.focus_stealing)


def route(message: str, policy: Policy, probe: PresenceProbe) -> Route:
    """Full-screen apps suppress system toasts, so go straight to fallback."""
    if _fullscreen(probe):
        log.info("Full-screen application focused, fallback for %r", message)
        return fallback_route(policy)
    return Route(Channel.NORMAL, focus_stealing=policy.focus_stealing)
