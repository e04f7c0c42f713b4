# tests/test_hotkey_manager.py

from __future__ import annotations

import pytest

from backends.base import HotkeyRegistrationError
from hotkey_manager import HotkeyManager, parse_hotkey

from .fakes import FakeListener


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Ctrl+Alt+A", "<ctrl>+<alt>+a"),
        ("ctrl + shift + f6", "<ctrl>+<shift>+<f6>"),
        ("Win+Escape", "<cmd>+<esc>"),
        ("Control+Return", "<ctrl>+<enter>"),
        ("F12", "<f12>"),
        ("7", "7"),
        ("Alt+Ctrl+A", "<ctrl>+<alt>+a"),
        ("Shift+Win+Ctrl+Tab", "<ctrl>+<shift>+<cmd>+<tab>"),
        ("Ctrl+Control+N", "<ctrl>+n"),
    ],
)
def test_parse_hotkey(raw, expected):
    assert parse_hotkey(raw) == expected


@pytest.mark.parametrize("raw", ["", "   ", "Ctrl+Alt", "Ctrl+Banana"])
def test_parse_hotkey_rejects_unusable_strings(raw):
    with pytest.raises(ValueError):
        parse_hotkey(raw)


def test_fired_hotkeys_run_only_when_dispatched():
    manager = HotkeyManager(listener_factory=FakeListener)
    fired: list = []
    manager.register("<ctrl>+a", lambda: fired.append("a"))
    manager.register("<ctrl>+b", lambda: fired.append("b"))

    listener = FakeListener.instances[-1]
    assert listener.started
    listener.press("<ctrl>+b")
    listener.press("<ctrl>+a")
    assert fired == []

    assert manager.dispatch_pending() == 2
    assert fired == ["b", "a"]
    assert manager.dispatch_pending() == 0


def test_registering_restarts_listener_with_all_hotkeys():
    manager = HotkeyManager(listener_factory=FakeListener)
    manager.register("<ctrl>+a", lambda: None)
    manager.register("<ctrl>+b", lambda: None)

    first, second = FakeListener.instances
    assert first.stopped
    assert sorted(second.hotkey_map) == ["<ctrl>+a", "<ctrl>+b"]
    assert manager.registered_triggers() == ["<ctrl>+a", "<ctrl>+b"]


def test_duplicate_trigger_is_refused():
    manager = HotkeyManager(listener_factory=FakeListener)
    manager.register("<ctrl>+a", lambda: None)

    with pytest.raises(HotkeyRegistrationError):
        manager.register("<ctrl>+a", lambda: None)


def test_same_chord_in_another_modifier_order_is_refused():
    manager = HotkeyManager(listener_factory=FakeListener)
    manager.register(parse_hotkey("Ctrl+Alt+N"), lambda: None)

    with pytest.raises(HotkeyRegistrationError):
        manager.register(parse_hotkey("Alt+Ctrl+N"), lambda: None)

    assert manager.registered_triggers() == ["<ctrl>+<alt>+n"]


def test_listener_failure_rolls_back_registration():
    calls = {"n": 0}

    def flaky_factory(hotkey_map):
        calls["n"] += 1
        if "<ctrl>+bad" in hotkey_map:
            raise ValueError("unsupported key")
        return FakeListener(hotkey_map)

    manager = HotkeyManager(listener_factory=flaky_factory)
    manager.register("<ctrl>+a", lambda: None)

    with pytest.raises(HotkeyRegistrationError):
        manager.register("<ctrl>+bad", lambda: None)

    assert manager.registered_triggers() == ["<ctrl>+a"]
    assert FakeListener.instances[-1].hotkey_map.keys() == {"<ctrl>+a"}
    assert not FakeListener.instances[-1].stopped


def test_clear_stops_listener_and_drops_stale_events():
    manager = HotkeyManager(listener_factory=FakeListener)
    fired: list = []
    manager.register("<ctrl>+a", lambda: fired.append("a"))
    listener = FakeListener.instances[-1]
    listener.press("<ctrl>+a")

    manager.clear()

    assert listener.stopped
    assert manager.dispatch_pending() == 0
    assert fired == []
    assert manager.registered_triggers() == []
