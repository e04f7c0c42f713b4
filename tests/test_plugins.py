# tests/test_plugins.py

from __future__ import annotations

from automation.plugins import Plugin, PluginManager
from automation.window_helpers import WindowHelpersPlugin
from logger import LogLevel

from .fakes import messages


class RecordingPlugin(Plugin):
    name = "recording"

    def __init__(self, events: list, fail_shutdown: bool = False) -> None:
        self.events = events
        self.fail_shutdown = fail_shutdown

    def install(self, registry, ctx) -> None:
        self.events.append(("install", self.name))
        registry.register_action("ping", lambda params, c: lambda: self.events.append(("ping", params.get("n"))))

    def shutdown(self, ctx) -> None:
        if self.fail_shutdown:
            raise RuntimeError("stuck")
        self.events.append(("shutdown", self.name))


def test_plugins_register_actions_and_shut_down_once(registry, ctx, logger):
    events: list = []
    manager = PluginManager(logger)
    manager.register_plugin(RecordingPlugin(events), registry, ctx)
    manager.register_plugin(None, registry, ctx)

    registry.create_action("PING", {"n": "1"}, ctx)()
    manager.shutdown_plugins(ctx)
    manager.shutdown_plugins(ctx)

    assert events == [("install", "recording"), ("ping", "1"), ("shutdown", "recording")]
    assert manager.plugins == []
    assert "Plugin installed" in messages(logger, LogLevel.INFO)


def test_failing_shutdown_does_not_block_others(registry, ctx, logger):
    events: list = []
    manager = PluginManager(logger)
    manager.register_plugin(RecordingPlugin(events, fail_shutdown=True), registry, ctx)
    second = RecordingPlugin(events)
    second.name = "second"
    manager.register_plugin(second, registry, ctx)

    manager.shutdown_plugins(ctx)

    assert ("shutdown", "second") in events
    assert "Plugin shutdown failed" in messages(logger, LogLevel.ERROR)


def test_window_helpers_actions(registry, ctx, backend, logger):
    PluginManager(logger).register_plugin(WindowHelpersPlugin(), registry, ctx)
    backend.active_window = 5
    backend.titles[5] = "Editor"

    registry.create_action("active_window_info", {}, ctx)()
    info = logger.get_recent_logs(1)[0]
    assert info.message == "Active window info"
    assert info.fields == {"title": "Editor", "details": "hwnd=5"}

    registry.create_action("snap_active_center", {}, ctx)()
    assert backend.named_calls("center") == [("center", 5)]

    registry.create_action("screen_info", {}, ctx)()
    assert logger.get_recent_logs(1)[0].fields == {"width": "1920", "height": "1080"}


def test_window_helpers_without_active_window(registry, ctx, backend, logger):
    PluginManager(logger).register_plugin(WindowHelpersPlugin(), registry, ctx)

    registry.create_action("active_window_info", {}, ctx)()
    registry.create_action("snap_active_center", {}, ctx)()

    warnings = messages(logger, LogLevel.WARNING)
    assert "No active window detected" in warnings
    assert "Cannot snap center; no active window" in warnings
    assert backend.calls == []
