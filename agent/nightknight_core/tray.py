"""
Tray icon + context menu (pystray on its own daemon thread).

Menu callbacks run on the pystray thread, so they never touch Tk or the
state machine directly: they only hand work to the app's queues.
"""

import os
import threading

import pystray
from PIL import Image, ImageDraw

from .config import log, resource_path
from .constants import APP_NAME, TRAY_TEXT_RUNNING, TRAY_TEXT_CANCELLED


def _load_icon_image():
    icon_path = resource_path("NightKnight.ico")
    if os.path.isfile(icon_path):
        try:
            return Image.open(icon_path)
        except OSError as e:
            log.warning("Could not load %s: %s", icon_path, e)

    # Crescent moon: a light disc with an offset transparent bite
    img = Image.new("RGBA", (64, 64), (0, 0, 0, 0))
    draw = ImageDraw.Draw(img)
    draw.ellipse((6, 6, 58, 58), fill=(250, 214, 90, 255))
    draw.ellipse((20, 0, 70, 50), fill=(0, 0, 0, 0))
    return img


class TrayIcon:
    def __init__(self, on_cancel, on_reload, on_open_config, on_exit, is_cancelled):
        self._is_cancelled = is_cancelled
        menu = pystray.Menu(
            pystray.MenuItem(
                "Cancel tonight only",
                lambda icon, item: on_cancel(),
                enabled=lambda item: not self._is_cancelled(),
            ),
            pystray.MenuItem("Reload config", lambda icon, item: on_reload()),
            pystray.MenuItem("Open config file", lambda icon, item: on_open_config()),
            pystray.Menu.SEPARATOR,
            pystray.MenuItem("Exit", lambda icon, item: on_exit()),
        )
        self._icon = pystray.Icon(APP_NAME, _load_icon_image(), TRAY_TEXT_RUNNING, menu)
        self._cancelled_shown = False

    def start(self):
        threading.Thread(target=self._icon.run, daemon=True).start()
        log.info("Tray icon started")

    def refresh(self):
        """Sync tooltip + menu enablement with the state machine. Any thread."""
        cancelled = bool(self._is_cancelled())
        if cancelled == self._cancelled_shown:
            return
        self._cancelled_shown = cancelled
        self._icon.title = TRAY_TEXT_CANCELLED if cancelled else TRAY_TEXT_RUNNING
        try:
            self._icon.update_menu()
        except Exception as e:
            log.debug("Tray menu refresh failed: %s", e)

    def stop(self):
        try:
            self._icon.visible = False
            self._icon.stop()
        except Exception as e:
            log.debug("Tray stop: %s", e)
