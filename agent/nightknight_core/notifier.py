"""
Notifier — executes a routing decision.

The route is decided synchronously on the caller's (Tk) thread. The
normal toast runs on a short-lived worker thread so a slow renderer
never stalls the tick loop; on failure the same worker hands the
message to the fallback renderer. Both failing drops the message.
"""

import threading

from .config import log
from .constants import TOAST_TITLE
from .router import Channel, route, fallback_route


def _start_thread(fn):
    threading.Thread(target=fn, daemon=True).start()


class Notifier:
    def __init__(self, normal, fallback, probe, run_async=_start_thread):
        self._normal = normal
        self._fallback = fallback
        self._probe = probe
        self._run_async = run_async

    def notify(self, message, policy):
        """Returns the Route taken for the first attempt."""
        decision = route(message, policy, self._probe)

        if decision.channel is Channel.FALLBACK:
            self._show_fallback(message, decision.focus_stealing)
            return decision

        retry = fallback_route(policy)

        def attempt_normal():
            try:
                delivered = self._normal.show(TOAST_TITLE, message)
            except Exception as e:
                log.warning("Toast raised: %s", e)
                delivered = False
            if not delivered:
                log.info("Toast not delivered, using fallback popup")
                self._show_fallback(message, retry.focus_stealing)

        self._run_async(attempt_normal)
        return decision

    def _show_fallback(self, message, focus_stealing):
        try:
            self._fallback.show(message, focus_stealing)
        except Exception as e:
            log.error("Fallback notification failed, dropping %r: %s", message, e)
