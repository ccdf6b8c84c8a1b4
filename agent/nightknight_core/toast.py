"""
Normal notification channel — Windows toast via winotify.
"""

import os
import sys

from .config import log, resource_path
from .constants import APP_NAME


class ToastRenderer:
    """show() returns False whenever the toast could not be handed to Windows."""

    def __init__(self, app_id=APP_NAME, icon_name="NightKnight.ico"):
        self._app_id = app_id
        icon = resource_path(icon_name)
        self._icon = os.path.abspath(icon) if os.path.isfile(icon) else ""

    def show(self, title, body) -> bool:
        if sys.platform != "win32":
            log.info("Toast (no toast support here): %s: %s", title, body)
            return False

        from winotify import Notification, audio

        try:
            toast = Notification(
                app_id=self._app_id,
                title=title,
                msg=body,
                icon=self._icon,
                duration="short",
            )
            toast.set_audio(audio.Reminder, loop=False)
            toast.show()
        except Exception as e:
            log.warning("winotify error: %s", e)
            return False

        log.info("Toast shown: %s", body)
        return True
