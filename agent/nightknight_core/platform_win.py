"""
Windows-specific functionality:
  - Workstation lock (LockWorkStation)
  - Log-off (ExitWindowsEx)
  - Full-screen foreground app detection (GetForegroundWindow/GetWindowRect)
  - Focus forcing for the fallback popup
  - AppUserModelID so toasts are attributed to NightKnight
  - Open a file with its default handler

Every function is a no-op returning a neutral value off Windows.
"""

import os
import sys
import ctypes

from .config import log
from .constants import FULLSCREEN_COVERAGE

_EWX_LOGOFF = 0
_SM_CXSCREEN = 0
_SM_CYSCREEN = 1
_SW_SHOWNORMAL = 1


class _RECT(ctypes.Structure):
    _fields_ = [
        ("left",   ctypes.c_long),
        ("top",    ctypes.c_long),
        ("right",  ctypes.c_long),
        ("bottom", ctypes.c_long),
    ]


# ─── Enforcement actions ─────────────────────────────────────────

def lock_workstation():
    """Lock the session. Returns True if Windows accepted the request."""
    if sys.platform != "win32":
        log.info("lock_workstation: not on Windows, skipped")
        return False
    return bool(ctypes.windll.user32.LockWorkStation())


def log_off():
    """Log the interactive user off. Returns True if Windows accepted it."""
    if sys.platform != "win32":
        log.info("log_off: not on Windows, skipped")
        return False
    return bool(ctypes.windll.user32.ExitWindowsEx(_EWX_LOGOFF, 0))


# ─── Full-screen detection ───────────────────────────────────────

def covers_screen(window_size, screen_size, coverage=FULLSCREEN_COVERAGE):
    """True when the window spans `coverage` of the screen's width AND height."""
    win_w, win_h = window_size
    screen_w, screen_h = screen_size
    if screen_w <= 0 or screen_h <= 0:
        return False
    return win_w >= screen_w * coverage and win_h >= screen_h * coverage


def _foreground_window_size():
    """(width, height) of the focused window, or None if there is none."""
    user32 = ctypes.windll.user32
    hwnd = user32.GetForegroundWindow()
    if not hwnd:
        return None
    rect = _RECT()
    if not user32.GetWindowRect(hwnd, ctypes.byref(rect)):
        return None
    return rect.right - rect.left, rect.bottom - rect.top


def _primary_screen_size():
    user32 = ctypes.windll.user32
    return user32.GetSystemMetrics(_SM_CXSCREEN), user32.GetSystemMetrics(_SM_CYSCREEN)


def is_fullscreen_app_focused():
    """Never raises: any failure counts as "not full-screen"."""
    if sys.platform != "win32":
        return False
    try:
        size = _foreground_window_size()
        if size is None:
            return False
        return covers_screen(size, _primary_screen_size())
    except Exception as e:
        log.debug("Full-screen probe failed: %s", e)
        return False


class FullScreenProbe:
    """PresenceProbe backed by the Win32 foreground window."""

    def is_fullscreen_app_focused(self):
        return is_fullscreen_app_focused()


# ─── Window focus / shell helpers ────────────────────────────────

def force_foreground(hwnd):
    """Best-effort: bring a window in front of whatever has focus."""
    if sys.platform != "win32" or not hwnd:
        return
    try:
        user32 = ctypes.windll.user32
        user32.ShowWindow(hwnd, _SW_SHOWNORMAL)
        user32.BringWindowToTop(hwnd)
        user32.SetForegroundWindow(hwnd)
    except Exception as e:
        log.debug("force_foreground failed: %s", e)


def set_app_user_model_id(app_id):
    """Make toasts appear under our own AppUserModelID instead of python.exe."""
    if sys.platform != "win32":
        return
    try:
        ctypes.windll.shell32.SetCurrentProcessExplicitAppUserModelID(app_id)
    except Exception as e:
        log.warning("Could not set AppUserModelID: %s", e)


def open_with_default_app(path):
    if sys.platform == "win32":
        os.startfile(str(path))
    else:
        log.info("Open %s manually (no shell handler off Windows)", path)
