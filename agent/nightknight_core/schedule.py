"""
Schedule and Policy — immutable snapshots of the user's settings.

A config reload builds new instances; nothing here is mutated in place,
so a tick always sees one consistent snapshot.
"""

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

from .constants import (
    DEFAULT_WARNING_LEAD_MIN, DEFAULT_WARNING_REPEAT_MIN, DEFAULT_GRACE_MIN,
)


@dataclass(frozen=True)
class Schedule:
    """Bedtime per weekday name ("Monday" … "Sunday") as "HH:MM"."""

    bedtimes: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "bedtimes", MappingProxyType(dict(self.bedtimes)))

    def bedtime_for(self, weekday: str) -> Optional[str]:
        value = self.bedtimes.get(weekday)
        if value is None:
            return None
        value = str(value).strip()
        return value or None


@dataclass(frozen=True)
class Policy:
    warning_lead_minutes: int = DEFAULT_WARNING_LEAD_MIN
    warning_repeat_minutes: int = DEFAULT_WARNING_REPEAT_MIN
    one_minute_warning: bool = True
    grace_minutes: int = DEFAULT_GRACE_MIN
    auto_logoff: bool = False
    focus_stealing: bool = True
    stats_file: Optional[Path] = None
