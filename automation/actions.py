"""
Built-in actions: small, composable building blocks.

Supported actions (``action`` field in the config):
- start_process:          start an application detached (command, args)
- kill_process:           terminate processes by executable name (name)
- send_text:              type literal text into the focused window (text)
- move_mouse:             move the cursor to absolute coordinates (x, y)
- left_click:             click the left mouse button at the cursor
- capture_window_target:  remember the active window under a name (target, persist)
- center_active_window:   center the foreground window on the primary monitor
- exit_loop:              stop the message loop and exit

Each factory reads its parameters once and captures only the logger, the
backend and whatever tables it needs; the returned callable does the work.
"""

from __future__ import annotations

import shlex
from typing import TYPE_CHECKING, Dict

from automation.registry import Action, ActionRegistry
from backends.base import PlatformError
from window_targets import update_stored_hwnd

if TYPE_CHECKING:  # pragma: no cover
    from runtime_context import RuntimeContext

_TRUE_VALUES = ("1", "true", "yes", "on")


class ActionError(Exception):
    pass


def parse_int_opt(params: Dict[str, str], key: str, default: int = 0) -> int:
    raw = params.get(key)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def parse_bool_opt(params: Dict[str, str], key: str, default: bool = True) -> bool:
    if key not in params:
        return default
    return params[key].strip().lower() in _TRUE_VALUES


def _start_process(params: Dict[str, str], ctx: "RuntimeContext") -> Action:
    command = params.get("command", "")
    args = shlex.split(params.get("args", ""))
    backend = ctx.backend
    logger = ctx.logger

    def run() -> None:
        if not command:
            raise ActionError("start_process: 'command' is required")
        if backend.start_process_detached(command, args):
            logger.info("Started process", command=command)
        else:
            logger.error("Failed to start process", command=command)

    return run


def _kill_process(params: Dict[str, str], ctx: "RuntimeContext") -> Action:
    name = params.get("name", "")
    backend = ctx.backend
    logger = ctx.logger

    def run() -> None:
        killed = backend.kill_processes_by_name(name)
        logger.info("Kill process result", name=name, killed=killed)

    return run


def _send_text(params: Dict[str, str], ctx: "RuntimeContext") -> Action:
    text = params.get("text", "")
    backend = ctx.backend
    logger = ctx.logger

    def run() -> None:
        backend.send_text(text)
        logger.info("Sent text", text=text)

    return run


def _move_mouse(params: Dict[str, str], ctx: "RuntimeContext") -> Action:
    x = parse_int_opt(params, "x")
    y = parse_int_opt(params, "y")
    backend = ctx.backend
    logger = ctx.logger

    def run() -> None:
        if backend.set_mouse_pos(x, y):
            logger.info("Mouse moved", x=x, y=y)
        else:
            logger.error("Failed to move mouse", x=x, y=y)

    return run


def _left_click(params: Dict[str, str], ctx: "RuntimeContext") -> Action:
    backend = ctx.backend
    logger = ctx.logger

    def run() -> None:
        backend.left_click()
        logger.debug("Left click issued")

    return run


def _capture_window_target(params: Dict[str, str], ctx: "RuntimeContext") -> Action:
    target_name = params.get("target", "").strip()
    persist = parse_bool_opt(params, "persist", True)
    backend = ctx.backend
    logger = ctx.logger
    # The table object itself is stable for the whole run; only its entries change.
    targets = ctx.window_targets
    state_store = ctx.state_store

    def run() -> None:
        if not target_name:
            logger.warning("capture_window_target requires a 'target' parameter")
            return

        try:
            hwnd = backend.get_active_window()
        except PlatformError as exc:
            logger.error("Failed to capture active window", error=exc)
            return

        if hwnd == 0:
            logger.warning("No active window detected while capturing target", target=target_name)
            return

        update_stored_hwnd(targets, target_name, hwnd, logger)

        if persist and state_store is not None:
            state_store.save(targets, logger)

    return run


def _center_active_window(params: Dict[str, str], ctx: "RuntimeContext") -> Action:
    backend = ctx.backend
    logger = ctx.logger

    def run() -> None:
        hwnd = backend.get_active_window()
        if hwnd == 0:
            logger.warning("No active window to center")
            return
        title = backend.get_window_title(hwnd)
        if backend.center_window_on_primary_monitor(hwnd):
            logger.info("Centered active window", title=title)
        else:
            logger.error("Failed to center window", title=title)

    return run


def _exit_loop(params: Dict[str, str], ctx: "RuntimeContext") -> Action:
    exit_code = parse_int_opt(params, "exit_code", 0)
    backend = ctx.backend
    logger = ctx.logger

    def run() -> None:
        logger.info("Requesting message loop exit")
        backend.post_quit(exit_code)

    return run


BUILTIN_ACTIONS = {
    "start_process": _start_process,
    "kill_process": _kill_process,
    "send_text": _send_text,
    "move_mouse": _move_mouse,
    "left_click": _left_click,
    "capture_window_target": _capture_window_target,
    "center_active_window": _center_active_window,
    "exit_loop": _exit_loop,
}


def register_builtin_actions(registry: ActionRegistry) -> None:
    """Built-in actions that don't require plugins."""
    for name, factory in BUILTIN_ACTIONS.items():
        registry.register_action(name, factory)
