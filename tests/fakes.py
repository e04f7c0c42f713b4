# tests/fakes.py

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence, Set, Tuple

from backends.base import HotkeyCallback, HotkeyRegistrationError, PlatformBackend


class FakeClock:
    """
    Deterministic monotonic clock for scheduler tests.

    Time is kept in whole milliseconds and handed out as nanoseconds, the
    unit the scheduler reads from ``time.monotonic_ns``.
    """

    def __init__(self, start_ms: int = 0) -> None:
        self.now_ms = start_ms

    def __call__(self) -> int:
        return self.now_ms * 1_000_000

    def advance(self, ms: int) -> None:
        self.now_ms += ms


class FakeListener:
    """Stands in for ``pynput.keyboard.GlobalHotKeys``."""

    instances: List["FakeListener"] = []

    def __init__(self, hotkey_map: Dict[str, Callable[[], None]]) -> None:
        self.hotkey_map = dict(hotkey_map)
        self.started = False
        self.stopped = False
        FakeListener.instances.append(self)

    def start(self) -> None:
        self.started = True

    def stop(self) -> None:
        self.stopped = True

    def press(self, trigger: str) -> None:
        """Simulate the listener thread seeing ``trigger``."""
        self.hotkey_map[trigger]()


class RecordingBackend(PlatformBackend):
    """
    In-memory backend that records every capability call.

    Hotkeys are kept in a plain dict; ``fire`` invokes a registered callback
    the way an event pump would.
    """

    name = "recording"

    def __init__(self, active_window: int = 0, refuse: Optional[Set[str]] = None) -> None:
        self.calls: List[Tuple] = []
        self.hotkeys: Dict[str, HotkeyCallback] = {}
        self.clears = 0
        self.active_window = active_window
        self.titles: Dict[int, str] = {}
        self.center_result = True
        self.refuse = refuse or set()
        self.loop_triggers: List[str] = []
        self.quit_code: Optional[int] = None

    def start_process_detached(self, command: str, args: Sequence[str] = ()) -> bool:
        self.calls.append(("start_process", command, tuple(args)))
        return True

    def kill_processes_by_name(self, name: str, exit_code: int = 0) -> int:
        self.calls.append(("kill_process", name))
        return 2

    def send_text(self, text: str) -> None:
        self.calls.append(("send_text", text))

    def set_mouse_pos(self, x: int, y: int) -> bool:
        self.calls.append(("set_mouse_pos", x, y))
        return True

    def left_click(self) -> None:
        self.calls.append(("left_click",))

    def get_active_window(self) -> int:
        return self.active_window

    def get_window_title(self, hwnd: int) -> str:
        return self.titles.get(hwnd, "")

    def describe_window(self, hwnd: int) -> str:
        return f"hwnd={hwnd}"

    def center_window_on_primary_monitor(self, hwnd: int) -> bool:
        self.calls.append(("center", hwnd))
        return self.center_result

    def get_primary_screen_size(self) -> Tuple[int, int]:
        return 1920, 1080

    def register_hotkey(self, trigger: str, callback: HotkeyCallback) -> int:
        if trigger in self.refuse or trigger in self.hotkeys:
            raise HotkeyRegistrationError(f"Hotkey '{trigger}' is already registered")
        self.hotkeys[trigger] = callback
        return len(self.hotkeys)

    def clear_hotkeys(self) -> None:
        self.clears += 1
        self.hotkeys.clear()

    def run_message_loop(self, scheduler) -> None:
        for trigger in self.loop_triggers:
            self.fire(trigger)
            scheduler.tick()

    def post_quit(self, exit_code: int = 0) -> None:
        self.quit_code = exit_code
        self.exit_code = exit_code

    def fire(self, trigger: str) -> None:
        self.hotkeys[trigger]()

    def named_calls(self, name: str) -> List[Tuple]:
        return [call for call in self.calls if call[0] == name]


def messages(logger, level=None) -> List[str]:
    """Messages recorded by a StatusLogger, optionally filtered by level."""
    return [entry.message for entry in logger.get_all_logs() if level is None or entry.level == level]
