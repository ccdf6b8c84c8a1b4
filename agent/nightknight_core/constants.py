"""
Constants, thresholds, policy defaults, and popup theme.
"""

APP_NAME = "NightKnight"
APP_VERSION = "1.2.0"
APP_USER_MODEL_ID = "com.Porkchop13.NightKnight"
TOAST_TITLE = "NightKnight Reminder"

# ─── Cadence ─────────────────────────────────────────────────────
TICK_INTERVAL_SEC = 60         # Bedtime re-evaluation
QUEUE_POLL_MS = 200            # Drain tray/worker requests on the Tk thread
CONFIG_POLL_SEC = 2            # Config file change detection
RESUME_CHECK_SEC = 5           # Wall-clock watchdog for sleep/resume
RESUME_GAP_SEC = 30            # Wall-clock gap between checks treated as a resume

# ─── Policy defaults ─────────────────────────────────────────────
DEFAULT_WARNING_LEAD_MIN = 15
DEFAULT_WARNING_REPEAT_MIN = 5
DEFAULT_GRACE_MIN = 5

DEFAULT_BEDTIMES = {
    "Monday": "22:20",
    "Tuesday": "22:20",
    "Wednesday": "22:20",
    "Thursday": "22:20",
    "Friday": "23:20",
    "Saturday": "23:20",
    "Sunday": "22:20",
}

# datetime.weekday() order; independent of the process locale
WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

# ─── I/O retries ─────────────────────────────────────────────────
CONFIG_READ_RETRIES = 5
CONFIG_READ_RETRY_DELAY_SEC = 0.25
LOG_APPEND_RETRIES = 3
LOG_APPEND_RETRY_DELAY_SEC = 0.1

# ─── Presence / notifications ────────────────────────────────────
FULLSCREEN_COVERAGE = 0.95     # Window must cover 95% of width AND height
FALLBACK_DISPLAY_MS = 4000     # Fallback popup auto-dismiss
FALLBACK_SIZE = (500, 120)

# ─── Formats ─────────────────────────────────────────────────────
DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"

# ─── Tray ────────────────────────────────────────────────────────
TRAY_TEXT_RUNNING = "NightKnight – running"
TRAY_TEXT_CANCELLED = "NightKnight – cancelled for tonight"

# ─── Fallback popup theme ────────────────────────────────────────
THEME = {
    "bg": "#000000",
    "text": "#ffffff",
    "font": ("Segoe UI", 14, "bold"),
    "alpha": 0.9,
}
