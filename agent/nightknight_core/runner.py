"""
Entry point and auto-restart wrapper.
"""

import time

from .constants import APP_VERSION, APP_USER_MODEL_ID
from .config import log, safe_print, setup_logging, ConfigError
from .platform_win import set_app_user_model_id


def main(config_path=None):
    """Primary agent entry point."""
    setup_logging()
    safe_print("NightKnight – bedtime enforcer v" + APP_VERSION)
    safe_print()

    set_app_user_model_id(APP_USER_MODEL_ID)

    # Imported late so tkinter/pystray only load once logging is up
    from .app import NightKnightApp

    try:
        app = NightKnightApp(config_path)
    except ConfigError as e:
        log.error("Cannot start without a readable config: %s", e)
        raise

    app.run()


def run_with_auto_restart():
    """
    Wrapper that auto-restarts on crash. Never gives up.
    Crash counter resets if the agent ran for 2+ minutes (not a boot-loop).
    """
    crash_count = 0
    crash_window = 120
    max_rapid_crashes = 10

    while True:
        start_time = time.time()
        try:
            main()
            break
        except KeyboardInterrupt:
            safe_print("\nNightKnight stopped by user.")
            break
        except SystemExit as e:
            if str(e) == "0":
                break
            log.error("NightKnight SystemExit: %s", e)
        except Exception as e:
            elapsed = time.time() - start_time
            log.error("NightKnight crashed after %.0fs: %s", elapsed, e, exc_info=True)

            if elapsed > crash_window:
                crash_count = 0
            crash_count += 1

            if crash_count >= max_rapid_crashes:
                wait = 120
                log.warning("Many rapid crashes (%d). Waiting %ds...", crash_count, wait)
            else:
                wait = min(10 * crash_count, 60)

            log.info("Restarting in %ds (crash %d)...", wait, crash_count)
            time.sleep(wait)
