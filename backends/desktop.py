"""
Cross-platform desktop backend.

Hotkeys come from pynput (through :class:`HotkeyManager`), mouse and keyboard
input from pyautogui, processes from the standard ``subprocess`` module.
Window manipulation needs a platform specific backend.
"""

from __future__ import annotations

import os
import signal
import subprocess
import sys
import time
from typing import TYPE_CHECKING, Callable, Optional, Sequence, Tuple

from backends.base import HotkeyCallback, HotkeyId, PlatformBackend
from hotkey_manager import HotkeyManager

if TYPE_CHECKING:  # pragma: no cover
    from scheduler import Scheduler


def _pyautogui():
    """Import pyautogui lazily; it needs a display at import time."""
    import pyautogui  # local import to avoid hard dep at import time

    pyautogui.FAILSAFE = True  # Move mouse to corner to abort input
    pyautogui.PAUSE = 0.0
    return pyautogui


class DesktopBackend(PlatformBackend):
    """Backend for any desktop session pynput and pyautogui can drive."""

    name = "desktop"

    def __init__(
        self,
        hotkeys: Optional[HotkeyManager] = None,
        idle_sleep: float = 0.01,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._hotkeys = hotkeys or HotkeyManager()
        self._idle_sleep = idle_sleep
        self._sleep = sleep
        self._quit_requested = False
        self.exit_code = 0

    # Processes ---------------------------------------------------------

    def start_process_detached(self, command: str, args: Sequence[str] = ()) -> bool:
        if not command:
            return False
        kwargs = {}
        if sys.platform.startswith("win"):
            kwargs["creationflags"] = subprocess.DETACHED_PROCESS | subprocess.CREATE_NEW_PROCESS_GROUP
        else:
            kwargs["start_new_session"] = True
        try:
            subprocess.Popen(
                [command, *args],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                **kwargs,
            )
        except OSError:
            return False
        return True

    def kill_processes_by_name(self, name: str, exit_code: int = 0) -> int:
        if not name:
            return 0
        if sys.platform.startswith("win"):
            result = subprocess.run(
                ["taskkill", "/F", "/IM", name],
                capture_output=True,
                text=True,
            )
            return sum(1 for line in result.stdout.splitlines() if line.startswith("SUCCESS"))

        result = subprocess.run(["pgrep", "-x", name], capture_output=True, text=True)
        killed = 0
        for raw_pid in result.stdout.split():
            try:
                os.kill(int(raw_pid), signal.SIGTERM)
            except (ProcessLookupError, PermissionError):
                continue
            killed += 1
        return killed

    # Input -------------------------------------------------------------

    def send_text(self, text: str) -> None:
        _pyautogui().write(text)

    def set_mouse_pos(self, x: int, y: int) -> bool:
        pyautogui = _pyautogui()
        try:
            pyautogui.moveTo(int(x), int(y))
        except pyautogui.PyAutoGUIException:
            return False
        return True

    def left_click(self) -> None:
        _pyautogui().click(button="left")

    def get_primary_screen_size(self) -> Tuple[int, int]:
        width, height = _pyautogui().size()
        return int(width), int(height)

    # Triggers and event pump -------------------------------------------

    def register_hotkey(self, trigger: str, callback: HotkeyCallback) -> HotkeyId:
        return self._hotkeys.register(trigger, callback)

    def clear_hotkeys(self) -> None:
        self._hotkeys.clear()

    def run_message_loop(self, scheduler: "Scheduler") -> None:
        """Pump hotkeys and the scheduler until :meth:`post_quit` is called.

        Pending triggers are always drained first; the scheduler only ticks
        on passes where no trigger was waiting.
        """
        self._quit_requested = False
        while not self._quit_requested:
            if self._hotkeys.dispatch_pending() > 0:
                continue
            scheduler.tick()
            if not self._quit_requested:
                self._sleep(self._idle_sleep)

    def post_quit(self, exit_code: int = 0) -> None:
        self.exit_code = exit_code
        self._quit_requested = True
