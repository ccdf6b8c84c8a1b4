"""Shared test fixtures and fakes.

The core never touches Tk or Win32, so everything here runs headless:
renderers, the presence probe and the OS actions are simple recorders.
"""

from datetime import date, datetime

import pytest

from nightknight_core.constants import WEEKDAYS
from nightknight_core.schedule import Policy, Schedule
from nightknight_core.state import DayState

# 2025-01-13 is a Monday
MONDAY = date(2025, 1, 13)


def at(hh, mm, ss=0, day=MONDAY):
    return datetime(day.year, day.month, day.day, hh, mm, ss)


class FakeProbe:
    def __init__(self, fullscreen=False, error=None):
        self.fullscreen = fullscreen
        self.error = error
        self.calls = 0

    def is_fullscreen_app_focused(self):
        self.calls += 1
        if self.error:
            raise self.error
        return self.fullscreen


class FakeNormalRenderer:
    def __init__(self, result=True, error=None):
        self.result = result
        self.error = error
        self.shown = []

    def show(self, title, body):
        self.shown.append((title, body))
        if self.error:
            raise self.error
        return self.result


class FakeFallbackRenderer:
    def __init__(self, error=None):
        self.error = error
        self.shown = []

    def show(self, body, focus_stealing):
        self.shown.append((body, focus_stealing))
        if self.error:
            raise self.error


class FakePlatform:
    def __init__(self, lock_error=None):
        self.lock_error = lock_error
        self.calls = []

    def lock_workstation(self):
        self.calls.append("lock")
        if self.lock_error:
            raise self.lock_error
        return True

    def log_off(self):
        self.calls.append("logoff")
        return True


def run_inline(fn):
    fn()


@pytest.fixture
def schedule():
    return Schedule({day: "22:15" for day in WEEKDAYS})


@pytest.fixture
def policy(tmp_path):
    return Policy(stats_file=tmp_path / "stats.csv")


@pytest.fixture
def state():
    return DayState(date=MONDAY)
