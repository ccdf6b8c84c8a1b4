"""Tests for nightknight_core.app — reload and resume paths, without Tk."""

import json
import time
from datetime import date

import pytest

pytest.importorskip("tkinter")
pytest.importorskip("pystray")

from nightknight_core.actions import ActionGateway
from nightknight_core.app import NightKnightApp
from nightknight_core.constants import RESUME_CHECK_SEC, RESUME_GAP_SEC, TOAST_TITLE
from nightknight_core.escalation import MSG_RELOADED
from nightknight_core.events import EventLog
from nightknight_core.notifier import Notifier
from nightknight_core.service import BedtimeEnforcer

from conftest import FakeProbe, FakeNormalRenderer, FakeFallbackRenderer, FakePlatform, run_inline


class FakeRoot:
    def __init__(self):
        self.scheduled = []

    def after(self, ms, fn):
        self.scheduled.append((ms, fn))


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "Settings.json"
    path.write_text(json.dumps({
        "bedtimes": {"Monday": "22:15"},
        "toastRepeatMinutes": 5,
        "statsFile": str(tmp_path / "stats.csv"),
    }), encoding="utf-8")
    return path


@pytest.fixture
def app(config_path):
    app = NightKnightApp(config_path)
    app._normal = FakeNormalRenderer()
    notifier = Notifier(app._normal, FakeFallbackRenderer(), FakeProbe(), run_async=run_inline)
    gateway = ActionGateway(EventLog(app._machine.policy.stats_file), platform=FakePlatform())
    app._enforcer = BedtimeEnforcer(app._machine, notifier, gateway)
    app._root = FakeRoot()
    return app


def shown(app):
    return [body for _, body in app._normal.shown]


class TestReloadConfig:
    def test_failed_reload_keeps_previous_snapshot(self, app, config_path):
        before = app._machine.policy
        config_path.write_text("{not json", encoding="utf-8")

        app.reload_config()
        app._enforcer.process_pending()

        assert app._machine.policy is before
        assert shown(app) == ["Config reload failed; keeping previous settings."]

    def test_invalid_value_keeps_previous_snapshot(self, app, config_path):
        before = app._machine.policy
        config_path.write_text(json.dumps({"enableAutoLogoff": "false"}), encoding="utf-8")

        app.reload_config()
        app._enforcer.process_pending()

        assert app._machine.policy is before
        assert before.auto_logoff is False

    def test_successful_reload_swaps_snapshot(self, app, config_path):
        data = json.loads(config_path.read_text(encoding="utf-8"))
        data["toastRepeatMinutes"] = 2
        config_path.write_text(json.dumps(data), encoding="utf-8")

        app.reload_config()
        app._enforcer.process_pending()

        assert app._machine.policy.warning_repeat_minutes == 2
        assert app._normal.shown == [(TOAST_TITLE, MSG_RELOADED)]

    def test_check_config_reloads_on_change(self, app, config_path):
        config_path.write_text(json.dumps({
            "bedtimes": {"Monday": "21:00"},
            "statsFile": str(config_path.parent / "stats.csv"),
        }), encoding="utf-8")

        app._check_config()
        app._enforcer.process_pending()

        assert app._machine.schedule.bedtime_for("Monday") == "21:00"
        assert app._root.scheduled[-1][1] == app._check_config


class TestResumeWatchdog:
    def make_stale(self, app):
        app._machine.state.date = date(2000, 1, 1)
        app._machine.state.locked = True

    def test_large_gap_resets_stale_day(self, app):
        self.make_stale(app)
        app._last_wall = time.time() - (RESUME_GAP_SEC + 10)

        app._check_resume()

        assert app._machine.state.date == date.today()
        assert app._machine.state.locked is False
        assert app._root.scheduled == [(RESUME_CHECK_SEC * 1000, app._check_resume)]

    def test_small_gap_is_ignored(self, app):
        self.make_stale(app)
        app._last_wall = time.time() - RESUME_CHECK_SEC

        app._check_resume()

        assert app._machine.state.date == date(2000, 1, 1)
        assert app._machine.state.locked is True
        assert app._root.scheduled == [(RESUME_CHECK_SEC * 1000, app._check_resume)]

    def test_resume_sends_no_notice(self, app):
        app._last_wall = time.time() - (RESUME_GAP_SEC + 10)
        app._check_resume()
        assert shown(app) == []
