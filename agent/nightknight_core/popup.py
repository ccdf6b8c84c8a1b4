"""
FallbackPopup — borderless, topmost, self-dismissing notice.

Used when a full-screen app would swallow the toast, or when the toast
failed. Windows are created EXCLUSIVELY on the Tkinter main thread:
show() may be called from any thread and only queues the request;
pump() (scheduled by the app via root.after) builds the Toplevels.
"""

import queue
import tkinter as tk

from .constants import THEME, FALLBACK_DISPLAY_MS, FALLBACK_SIZE
from .config import log
from .platform_win import force_foreground


class FallbackPopup:
    """
    Lifecycle (all on main thread):
      pump()      → drains queued requests, calls _build()
      _build()    → creates Toplevel, schedules _close()
      _close()    → destroys it after FALLBACK_DISPLAY_MS
    """

    def __init__(self, root):
        self._root = root
        self._requests = queue.Queue()

    def show(self, body, focus_stealing):
        self._requests.put((body, focus_stealing))

    def pump(self):
        while True:
            try:
                body, focus_stealing = self._requests.get_nowait()
            except queue.Empty:
                return
            try:
                self._build(body, focus_stealing)
            except Exception as e:
                log.error("Failed to build fallback popup: %s", e, exc_info=True)

    # ─── UI construction ─────────────────────────────────────

    def _build(self, body, focus_stealing):
        top = tk.Toplevel(self._root)
        top.overrideredirect(True)
        top.configure(bg=THEME["bg"])
        top.attributes("-topmost", True)
        try:
            top.attributes("-alpha", THEME["alpha"])
        except tk.TclError:
            pass

        w, h = FALLBACK_SIZE
        top.update_idletasks()
        x = (top.winfo_screenwidth() - w) // 2
        y = (top.winfo_screenheight() - h) // 2
        top.geometry(f"{w}x{h}+{x}+{y}")

        tk.Label(
            top, text=body, font=THEME["font"],
            fg=THEME["text"], bg=THEME["bg"],
            wraplength=w - 40, justify="center",
        ).pack(fill="both", expand=True)

        top.after(FALLBACK_DISPLAY_MS, lambda: self._close(top))

        if focus_stealing:
            top.deiconify()
            top.lift()
            top.focus_force()
            try:
                force_foreground(int(top.frame(), 16))
            except (tk.TclError, ValueError):
                force_foreground(top.winfo_id())

        log.info("Fallback popup shown (focus_stealing=%s): %s", focus_stealing, body)

    def _close(self, top):
        try:
            top.destroy()
        except tk.TclError:
            pass
