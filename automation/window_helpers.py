"""Window and screen helper actions, installed as a plugin."""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict

from automation.plugins import Plugin
from automation.registry import Action, ActionRegistry

if TYPE_CHECKING:  # pragma: no cover
    from runtime_context import RuntimeContext


def _active_window_info(params: Dict[str, str], ctx: "RuntimeContext") -> Action:
    backend = ctx.backend
    logger = ctx.logger

    def run() -> None:
        hwnd = backend.get_active_window()
        if hwnd == 0:
            logger.warning("No active window detected")
            return
        logger.info(
            "Active window info",
            title=backend.get_window_title(hwnd),
            details=backend.describe_window(hwnd),
        )

    return run


def _snap_active_center(params: Dict[str, str], ctx: "RuntimeContext") -> Action:
    backend = ctx.backend
    logger = ctx.logger

    def run() -> None:
        hwnd = backend.get_active_window()
        if hwnd == 0:
            logger.warning("Cannot snap center; no active window")
            return
        title = backend.get_window_title(hwnd)
        if backend.center_window_on_primary_monitor(hwnd):
            logger.info("Snapped active window to center", title=title)
        else:
            logger.error("Failed to snap active window", title=title)

    return run


def _screen_info(params: Dict[str, str], ctx: "RuntimeContext") -> Action:
    backend = ctx.backend
    logger = ctx.logger

    def run() -> None:
        width, height = backend.get_primary_screen_size()
        logger.info("Screen info", width=width, height=height)

    return run


class WindowHelpersPlugin(Plugin):
    name = "window_helpers"
    description = "Active window and screen helpers"

    def install(self, registry: ActionRegistry, ctx: "RuntimeContext") -> None:
        registry.register_action("active_window_info", _active_window_info)
        registry.register_action("snap_active_center", _snap_active_center)
        registry.register_action("screen_info", _screen_info)

    def shutdown(self, ctx: "RuntimeContext") -> None:
        ctx.logger.debug("Window helpers plugin shutdown", name=self.name)
