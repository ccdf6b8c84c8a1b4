"""
NightKnightApp — the main Tkinter application.

The bedtime tick, queue draining, config watching and sleep/resume
detection all run inside Tkinter's event loop via root.after(). Zero
busy-wait loops; the state machine is only ever driven from this thread.

Background threads: ONLY the pystray icon + short-lived toast threads.
None of them touch Tkinter directly.
"""

import queue
import time
import tkinter as tk
from datetime import datetime

from .constants import (
    APP_VERSION, TICK_INTERVAL_SEC, QUEUE_POLL_MS, CONFIG_POLL_SEC,
    RESUME_CHECK_SEC, RESUME_GAP_SEC,
)
from .config import log, safe_print, load_config, ConfigError, ConfigWatcher
from .escalation import (
    EscalationStateMachine, Tick, ResumeFromSuspend, CancelTonight, ConfigReloaded, Notify,
)
from .events import EventLog
from .actions import ActionGateway
from .notifier import Notifier
from .service import BedtimeEnforcer
from .platform_win import FullScreenProbe, open_with_default_app
from .popup import FallbackPopup
from .toast import ToastRenderer
from .tray import TrayIcon


class NightKnightApp:
    """
    Owns the Tk main loop. Schedules everything via root.after():
      _poll_queue()    — drains tray requests, messages, popups   (every 200ms)
      _tick()          — posts Tick(now) and processes it           (every 60s)
      _check_config()  — reloads on Settings.json change            (every 2s)
      _check_resume()  — wall-clock gap → ResumeFromSuspend         (every 5s)

    The root window is hidden (withdrawn). Popups are Toplevel children.
    """

    def __init__(self, config_path=None):
        self._config_path = config_path
        schedule, policy = load_config(config_path)

        self._machine = EscalationStateMachine(schedule, policy)
        self._gateway = ActionGateway(EventLog(policy.stats_file))
        self._requests = queue.Queue()
        self._watcher = ConfigWatcher(config_path)
        self._root = None
        self._popup = None
        self._tray = None
        self._enforcer = None
        self._last_wall = time.time()

    def run(self):
        """Start the agent. Blocks on Tk mainloop. Call from main thread."""
        self._root = tk.Tk()
        self._root.withdraw()

        self._popup = FallbackPopup(self._root)
        notifier = Notifier(ToastRenderer(), self._popup, FullScreenProbe())
        self._enforcer = BedtimeEnforcer(self._machine, notifier, self._gateway)

        self._tray = TrayIcon(
            on_cancel=lambda: self._enforcer.post(CancelTonight(datetime.now())),
            on_reload=lambda: self._requests.put(self.reload_config),
            on_open_config=lambda: self._requests.put(self._open_config),
            on_exit=lambda: self._requests.put(self.stop),
            is_cancelled=lambda: self._machine.cancelled_tonight,
        )
        self._tray.start()

        self._root.after(QUEUE_POLL_MS, self._poll_queue)
        self._root.after(0, self._tick)
        self._root.after(CONFIG_POLL_SEC * 1000, self._check_config)
        self._root.after(RESUME_CHECK_SEC * 1000, self._check_resume)

        policy = self._machine.policy
        log.info(
            "v%s started (tick=%ds, lead=%dmin, repeat=%dmin, autoLogoff=%s)",
            APP_VERSION, TICK_INTERVAL_SEC, policy.warning_lead_minutes,
            policy.warning_repeat_minutes, policy.auto_logoff,
        )
        safe_print("NightKnight running.\n")

        try:
            self._root.mainloop()
        finally:
            self._tray.stop()
            log.info("NightKnightApp shut down.")

    def stop(self):
        try:
            self._root.quit()
        except Exception:
            pass

    # ─── Queue polling (every 200ms) ─────────────────────────

    def _poll_queue(self):
        try:
            self._drain_requests()
            self._enforcer.process_pending()
            self._popup.pump()
            self._tray.refresh()
        except Exception as e:
            log.error("_poll_queue error: %s", e, exc_info=True)
        self._root.after(QUEUE_POLL_MS, self._poll_queue)

    def _drain_requests(self):
        while True:
            try:
                request = self._requests.get_nowait()
            except queue.Empty:
                return
            request()

    # ─── Tick (every 60s) ────────────────────────────────────

    def _tick(self):
        try:
            self._enforcer.post(Tick(datetime.now()))
            self._enforcer.process_pending()
        except Exception as e:
            log.error("_tick error: %s", e, exc_info=True)
        self._root.after(TICK_INTERVAL_SEC * 1000, self._tick)

    # ─── Config hot reload ───────────────────────────────────

    def _check_config(self):
        try:
            if self._watcher.check():
                log.info("Config file changed on disk")
                self.reload_config()
        except Exception as e:
            log.error("_check_config error: %s", e)
        self._root.after(CONFIG_POLL_SEC * 1000, self._check_config)

    def reload_config(self):
        """Load a fresh snapshot; on failure the current one stays active."""
        try:
            schedule, policy = load_config(self._config_path)
        except ConfigError as e:
            log.warning("Config reload failed, keeping previous settings: %s", e)
            self._enforcer.execute([Notify("Config reload failed; keeping previous settings.")])
            return
        self._enforcer.post(ConfigReloaded(schedule, policy))

    def _open_config(self):
        path = self._watcher.path
        try:
            if not path.exists():
                load_config(path)
            open_with_default_app(path)
        except Exception as e:
            log.error("Error opening config: %s", e)
            self._enforcer.execute([Notify(f"Error opening config: {e}")])

    # ─── Sleep / resume watchdog (every 5s) ──────────────────

    def _check_resume(self):
        try:
            now_wall = time.time()
            gap = now_wall - self._last_wall
            self._last_wall = now_wall
            if gap > RESUME_GAP_SEC:
                log.info("Wall-clock jump of %.0fs, system resumed", gap)
                self._enforcer.post(ResumeFromSuspend(datetime.now()))
                self._enforcer.process_pending()
        except Exception as e:
            log.error("_check_resume error: %s", e)
        self._root.after(RESUME_CHECK_SEC * 1000, self._check_resume)
