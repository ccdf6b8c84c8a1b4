"""
BedtimeEnforcer — single consumer between the outside world and the
escalation state machine.

Any thread may post() a message (tray menu, config watcher, resume
watchdog). Only the Tk main thread calls process_pending(), which feeds
messages to the machine one at a time and executes the returned intents.
At most one Tick is ever queued; further ticks are dropped until it runs.
"""

import queue
import threading

from .config import log
from .escalation import Tick, ConfigReloaded, Notify, LockWorkstation, LogOff, RecordEvent
from .events import EventLog


class BedtimeEnforcer:
    def __init__(self, machine, notifier, gateway):
        self._machine = machine
        self._notifier = notifier
        self._gateway = gateway
        self._queue = queue.Queue()
        self._tick_pending = False
        self._pending_lock = threading.Lock()

    def post(self, message) -> bool:
        """Queue a message. Returns False when a Tick was coalesced away."""
        if isinstance(message, Tick):
            with self._pending_lock:
                if self._tick_pending:
                    log.debug("Tick already pending, dropping %s", message.now)
                    return False
                self._tick_pending = True
        self._queue.put(message)
        return True

    def process_pending(self, max_batch=50) -> int:
        """Drain queued messages. Main thread only. Returns messages handled."""
        handled = 0
        while handled < max_batch:
            try:
                message = self._queue.get_nowait()
            except queue.Empty:
                break
            handled += 1
            if isinstance(message, Tick):
                with self._pending_lock:
                    self._tick_pending = False
            try:
                intents = self._machine.handle(message)
            except Exception as e:
                log.error("State machine error on %s: %s", type(message).__name__, e, exc_info=True)
                continue
            if isinstance(message, ConfigReloaded):
                self._sync_event_log(message.policy)
            self.execute(intents)
        return handled

    def execute(self, intents):
        """Run every intent; one failing never blocks the ones after it."""
        policy = self._machine.policy
        for intent in intents:
            try:
                if isinstance(intent, Notify):
                    self._notifier.notify(intent.message, policy)
                elif isinstance(intent, LockWorkstation):
                    self._gateway.lock()
                elif isinstance(intent, LogOff):
                    self._gateway.log_off()
                elif isinstance(intent, RecordEvent):
                    self._gateway.append(intent.event)
                else:
                    log.warning("Unknown intent %r", intent)
            except Exception as e:
                log.error("Intent %s failed: %s", type(intent).__name__, e, exc_info=True)

    def _sync_event_log(self, policy):
        path = policy.stats_file
        if path is None or path == self._gateway.event_log.path:
            return
        log.info("Event log moved to %s", path)
        self._gateway.set_event_log(EventLog(path))
