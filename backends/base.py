"""
Platform capability contract.

Every capability raises :class:`BackendUnsupportedError` by default so that a
backend only has to implement what its platform supports. The core never
inspects which concrete backend it was given.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Callable, Sequence, Tuple

if TYPE_CHECKING:  # pragma: no cover
    from scheduler import Scheduler

WindowHandle = int
HotkeyId = int
HotkeyCallback = Callable[[], None]


class PlatformError(Exception):
    """Base error type for platform-related failures."""


class BackendUnsupportedError(PlatformError):
    def __init__(self, feature: str):
        super().__init__(f"Feature '{feature}' is not supported on this platform (platform={sys.platform}).")
        self.feature = feature


class HotkeyRegistrationError(PlatformError):
    """The trigger could not be claimed (already taken, no keyboard hook, ...)."""


class PlatformBackend:
    """Fixed capability set consumed by actions and the hotkey setup."""

    name = "base"
    exit_code = 0

    # Processes ---------------------------------------------------------

    def start_process_detached(self, command: str, args: Sequence[str] = ()) -> bool:
        raise BackendUnsupportedError("start_process_detached")

    def kill_processes_by_name(self, name: str, exit_code: int = 0) -> int:
        raise BackendUnsupportedError("kill_processes_by_name")

    # Input -------------------------------------------------------------

    def send_text(self, text: str) -> None:
        raise BackendUnsupportedError("send_text")

    def set_mouse_pos(self, x: int, y: int) -> bool:
        raise BackendUnsupportedError("set_mouse_pos")

    def left_click(self) -> None:
        raise BackendUnsupportedError("left_click")

    # Windows -----------------------------------------------------------

    def get_active_window(self) -> WindowHandle:
        raise BackendUnsupportedError("get_active_window")

    def get_window_title(self, hwnd: WindowHandle) -> str:
        raise BackendUnsupportedError("get_window_title")

    def describe_window(self, hwnd: WindowHandle) -> str:
        raise BackendUnsupportedError("describe_window")

    def center_window_on_primary_monitor(self, hwnd: WindowHandle) -> bool:
        raise BackendUnsupportedError("center_window_on_primary_monitor")

    def get_primary_screen_size(self) -> Tuple[int, int]:
        raise BackendUnsupportedError("get_primary_screen_size")

    # Triggers and event pump -------------------------------------------

    def register_hotkey(self, trigger: str, callback: HotkeyCallback) -> HotkeyId:
        raise BackendUnsupportedError("register_hotkey")

    def clear_hotkeys(self) -> None:
        pass

    def run_message_loop(self, scheduler: "Scheduler") -> None:
        raise BackendUnsupportedError("run_message_loop")

    def post_quit(self, exit_code: int = 0) -> None:
        raise BackendUnsupportedError("post_quit")
