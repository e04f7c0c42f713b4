# tests/test_backends.py

from __future__ import annotations

import pytest

from backends.base import BackendUnsupportedError, PlatformBackend
from backends.desktop import DesktopBackend
from backends.factory import create_backend, default_backend_name
from backends.windows import WindowsBackend
from hotkey_manager import HotkeyManager
from scheduler import Scheduler

from .fakes import FakeClock, FakeListener


def make_backend(clock: FakeClock, sleeps: list) -> DesktopBackend:
    def sleep(seconds: float) -> None:
        sleeps.append(seconds)
        clock.advance(10)

    return DesktopBackend(hotkeys=HotkeyManager(listener_factory=FakeListener), idle_sleep=0.01, sleep=sleep)


def test_base_backend_reports_unsupported_features():
    backend = PlatformBackend()

    with pytest.raises(BackendUnsupportedError) as excinfo:
        backend.left_click()
    assert excinfo.value.feature == "left_click"

    backend.clear_hotkeys()


def test_create_backend_by_name():
    assert isinstance(create_backend("desktop"), DesktopBackend)
    assert isinstance(create_backend(" Windows "), WindowsBackend)
    assert default_backend_name() in ("desktop", "windows")

    with pytest.raises(ValueError):
        create_backend("amiga")


def test_message_loop_ticks_scheduler_until_quit():
    clock = FakeClock()
    sleeps: list = []
    backend = make_backend(clock, sleeps)
    scheduler = Scheduler(clock=clock)
    fired: list = []

    scheduler.schedule_repeat(0.02, lambda: fired.append(clock.now_ms))
    scheduler.schedule_once(0.1, backend.post_quit)

    backend.run_message_loop(scheduler)

    assert fired == [20, 40, 60, 80, 100]
    assert all(s == 0.01 for s in sleeps)
    assert backend.exit_code == 0


def test_message_loop_drains_triggers_before_ticking():
    clock = FakeClock()
    backend = make_backend(clock, [])
    scheduler = Scheduler(clock=clock)
    order: list = []

    backend.register_hotkey("<ctrl>+q", lambda: order.append("trigger"))
    backend.register_hotkey("<ctrl>+x", lambda: backend.post_quit(4))
    scheduler.schedule_once(0, lambda: order.append("tick"))

    listener = FakeListener.instances[-1]
    listener.press("<ctrl>+q")

    def quit_after_tick():
        order.append("tick-2")
        listener.press("<ctrl>+x")

    scheduler.schedule_once(0.01, quit_after_tick)

    backend.run_message_loop(scheduler)

    assert order == ["trigger", "tick", "tick-2"]
    assert backend.exit_code == 4


def test_clear_hotkeys_stops_listener():
    backend = make_backend(FakeClock(), [])
    backend.register_hotkey("<ctrl>+q", lambda: None)

    backend.clear_hotkeys()

    assert FakeListener.instances[-1].stopped
