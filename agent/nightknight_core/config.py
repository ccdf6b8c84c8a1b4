"""
Paths, logging setup, bounded I/O retries, config load/save, config watcher.
"""

import os
import json
import sys
import time
import logging
from pathlib import Path

from .constants import (
    DEFAULT_BEDTIMES, DEFAULT_WARNING_LEAD_MIN, DEFAULT_WARNING_REPEAT_MIN,
    DEFAULT_GRACE_MIN, CONFIG_READ_RETRIES, CONFIG_READ_RETRY_DELAY_SEC,
)
from .schedule import Schedule, Policy


# ─── Paths ───────────────────────────────────────────────────────
# One config per user per machine, same location the tray app has always used.
_COMPANY_NAME = "Porkchop13"
_FOLDER_NAME = "NightKnight"

if sys.platform == "win32":
    BASE_DIR = (
        Path(os.environ.get("LOCALAPPDATA", Path.home() / "AppData" / "Local"))
        / _COMPANY_NAME / _FOLDER_NAME
    )
else:
    BASE_DIR = Path.home() / ".nightknight"

CONFIG_FILE = BASE_DIR / "Settings.json"
LOG_FILE = BASE_DIR / "nightknight.log"
DEFAULT_STATS_FILE = Path.home() / _FOLDER_NAME / "stats.csv"

log = logging.getLogger("nightknight")
_console_handler = None


class ConfigError(Exception):
    """Config could not be read or parsed; the previous snapshot stays active."""


def resource_path(relative_path):
    """Get path to bundled resource (works for both dev and PyInstaller)."""
    if getattr(sys, 'frozen', False):
        base = Path(sys._MEIPASS)
    else:
        base = Path(__file__).parent.parent
    return str(base / relative_path)


# ─── Safe print (no crash when --noconsole) ──────────────────────

def safe_print(*args, **kwargs):
    try:
        print(*args, **kwargs)
    except Exception:
        pass


# ─── Logging ─────────────────────────────────────────────────────

def setup_logging(log_file=None):
    """File log (truncated past 1 MB) plus console mirror."""
    log_file = Path(log_file or LOG_FILE)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    try:
        if log_file.exists() and log_file.stat().st_size > 1_000_000:
            log_file.write_text("")
    except OSError:
        pass

    logging.basicConfig(
        filename=str(log_file),
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        encoding="utf-8",
    )

    global _console_handler
    if _console_handler is None:    # auto-restart calls this again
        _console_handler = logging.StreamHandler(sys.stdout)
        _console_handler.setLevel(logging.INFO)
        _console_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
        log.addHandler(_console_handler)


# ─── Bounded retries for transient file contention ───────────────

def retry_io(fn, attempts, delay, what="I/O"):
    """
    Call fn() up to `attempts` times, sleeping `delay` seconds between
    OSErrors. The last OSError propagates once attempts are exhausted.
    """
    for attempt in range(1, attempts + 1):
        try:
            return fn()
        except OSError as e:
            if attempt >= attempts:
                log.warning("%s failed after %d attempts: %s", what, attempts, e)
                raise
            log.debug("%s attempt %d failed: %s, retrying", what, attempt, e)
            time.sleep(delay)


# ─── Config Management ──────────────────────────────────────────

def default_config():
    return {
        "bedtimes": dict(DEFAULT_BEDTIMES),
        "disableFocusStealing": False,
        "disableOneMinuteWarning": False,
        "enableAutoLogoff": False,
        "graceMinutesAfterLock": DEFAULT_GRACE_MIN,
        "toastRepeatMinutes": DEFAULT_WARNING_REPEAT_MIN,
        "statsFile": str(DEFAULT_STATS_FILE),
        "warningMinutesBefore": DEFAULT_WARNING_LEAD_MIN,
    }


def _flag(data, key):
    value = data.get(key, False)
    if not isinstance(value, bool):
        raise ConfigError(f"'{key}' must be true or false, got {value!r}")
    return value


def _minutes(data, key, default):
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"'{key}' must be a whole number of minutes, got {value!r}")
    return value


def parse_config(data):
    """Map the JSON document (camelCase keys) onto (Schedule, Policy)."""
    if not isinstance(data, dict):
        raise ConfigError("Config root must be a JSON object")

    bedtimes = data.get("bedtimes") or {}
    if not isinstance(bedtimes, dict):
        raise ConfigError("'bedtimes' must be an object of weekday → HH:MM")

    stats_file = data.get("statsFile") or DEFAULT_STATS_FILE
    if not isinstance(stats_file, (str, Path)):
        raise ConfigError(f"'statsFile' must be a path, got {stats_file!r}")

    policy = Policy(
        warning_lead_minutes=_minutes(data, "warningMinutesBefore", DEFAULT_WARNING_LEAD_MIN),
        warning_repeat_minutes=_minutes(data, "toastRepeatMinutes", DEFAULT_WARNING_REPEAT_MIN),
        one_minute_warning=not _flag(data, "disableOneMinuteWarning"),
        grace_minutes=_minutes(data, "graceMinutesAfterLock", DEFAULT_GRACE_MIN),
        auto_logoff=_flag(data, "enableAutoLogoff"),
        focus_stealing=not _flag(data, "disableFocusStealing"),
        stats_file=Path(stats_file),
    )

    # null is the same as leaving the day out
    schedule = Schedule({
        str(day): str(value) for day, value in bedtimes.items() if value is not None
    })
    return schedule, policy


def load_config(path=None):
    """
    Load (Schedule, Policy) from disk. Writes the defaults on first run.
    Raises ConfigError when the file stays locked or does not parse.
    """
    path = Path(path or CONFIG_FILE)

    if not path.exists():
        data = default_config()
        save_config(data, path)
        Path(data["statsFile"]).parent.mkdir(parents=True, exist_ok=True)
        log.info("Default config written to %s", path)
        return parse_config(data)

    try:
        raw = retry_io(
            lambda: path.read_text(encoding="utf-8"),
            CONFIG_READ_RETRIES, CONFIG_READ_RETRY_DELAY_SEC, "Config read",
        )
    except OSError as e:
        raise ConfigError(f"Could not read {path}: {e}") from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Malformed JSON in {path}: {e}") from e

    return parse_config(data)


def save_config(config, path=None):
    """Save config dict to disk."""
    path = Path(path or CONFIG_FILE)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config, f, indent=2)
    log.info("Config saved to %s", path)


# ─── Change detection ───────────────────────────────────────────

class ConfigWatcher:
    """
    Polls the config file's (mtime, size) signature. The app calls
    check() from its Tk loop and reloads when it returns True.
    """

    def __init__(self, path=None):
        self._path = Path(path or CONFIG_FILE)
        self._signature = self._read_signature()

    @property
    def path(self):
        return self._path

    def _read_signature(self):
        try:
            st = self._path.stat()
        except OSError:
            return None
        return (st.st_mtime_ns, st.st_size)

    def check(self) -> bool:
        signature = self._read_signature()
        if signature == self._signature:
            return False
        self._signature = signature
        # Deleted file: nothing to load, keep the current snapshot
        return signature is not None
