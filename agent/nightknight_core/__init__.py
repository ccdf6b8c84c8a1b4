"""
nightknight_core — Bedtime enforcer tray agent v1.2
===================================================
Architecture: Tkinter main-thread event loop, pure decision core.

  constants.py    → Version, cadence, policy defaults, theme
  config.py       → Paths, logging, retries, config load/save/watch
  schedule.py     → Schedule + Policy (immutable snapshots)
  state.py        → DayState dataclass (single source of truth)
  evaluator.py    → Minutes-to-bedtime for "now"
  escalation.py   → Warn / lock / log-off state machine (pure tick)
  events.py       → Append-only stats log (CancelTonight/Lock/Logoff)
  router.py       → Normal toast vs fallback popup decision
  notifier.py     → Executes the route, falls back on failure
  actions.py      → ActionGateway: lock, log off, append event
  service.py      → BedtimeEnforcer: message queue → intents
  platform_win.py → Windows: lock, log-off, full-screen probe, focus
  toast.py        → Normal channel (winotify)
  popup.py        → Fallback channel (Toplevel on main thread)
  tray.py         → Tray icon + menu (pystray)
  app.py          → NightKnightApp (Tk main loop, root.after scheduling)
  runner.py       → main() + auto-restart wrapper
"""
