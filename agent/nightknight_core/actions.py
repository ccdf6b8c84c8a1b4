"""
ActionGateway — the side effects of enforcement.

Everything here is fire-and-forget: failures are logged, never raised,
so the tick loop keeps running whatever the OS says.
"""

from .config import log
from . import platform_win


class ActionGateway:
    def __init__(self, event_log, platform=platform_win):
        self._event_log = event_log
        self._platform = platform

    @property
    def event_log(self):
        return self._event_log

    def set_event_log(self, event_log):
        self._event_log = event_log

    def lock(self):
        try:
            ok = self._platform.lock_workstation()
            log.info("LockWorkStation attempted (ok=%s)", ok)
        except Exception as e:
            log.error("Lock failed: %s", e)

    def log_off(self):
        try:
            ok = self._platform.log_off()
            log.info("Log-off attempted (ok=%s)", ok)
        except Exception as e:
            log.error("Log-off failed: %s", e)

    def append(self, event):
        try:
            self._event_log.append(event)
        except OSError as e:
            log.error("Could not write %s event to %s: %s",
                      event.kind.value, self._event_log.path, e)
