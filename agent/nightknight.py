"""
NightKnight — Bedtime Enforcer Tray Agent
=========================================
Warns before the configured bedtime, locks the workstation when it
arrives and, if enabled, logs the user off after a grace period.
"Cancel tonight only" in the tray menu suspends enforcement until
the next day. Settings live in Settings.json and reload on save.

Usage:
    python nightknight.py
"""

from nightknight_core.runner import run_with_auto_restart


if __name__ == "__main__":
    run_with_auto_restart()
