"""
Append-only event log (stats file).

One line per event, comma separated, always "\\n"-terminated:
    YYYY-MM-DD,HH:MM,<Kind>,<note>
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path

from .config import log, retry_io, DEFAULT_STATS_FILE
from .constants import (
    DATE_FORMAT, TIME_FORMAT, LOG_APPEND_RETRIES, LOG_APPEND_RETRY_DELAY_SEC,
)


class EventKind(str, Enum):
    CANCEL_TONIGHT = "CancelTonight"
    LOCK = "Lock"
    LOGOFF = "Logoff"


@dataclass(frozen=True)
class Event:
    date: str
    time: str
    kind: EventKind
    note: str

    @classmethod
    def at(cls, kind, when: datetime, note: str):
        return cls(
            date=when.strftime(DATE_FORMAT),
            time=when.strftime(TIME_FORMAT),
            kind=kind,
            note=note,
        )

    def to_line(self) -> str:
        return f"{self.date},{self.time},{self.kind.value},{self.note}\n"


class EventLog:
    """Appends Event lines to the stats file, creating its folder on demand."""

    def __init__(self, path=None):
        self.path = Path(path or DEFAULT_STATS_FILE)

    def _write(self, line):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # newline="" keeps the "\n" terminator bit-exact on Windows too
        with open(self.path, "a", encoding="utf-8", newline="") as f:
            f.write(line)

    def append(self, event: Event):
        """Raises OSError once the bounded retries are exhausted."""
        line = event.to_line()
        retry_io(
            lambda: self._write(line),
            LOG_APPEND_RETRIES, LOG_APPEND_RETRY_DELAY_SEC, "Event log append",
        )
        log.info("Event logged: %s", line.rstrip("\n"))
