"""Windows backend: desktop capabilities plus window handling via pywinauto."""

from __future__ import annotations

from backends.desktop import DesktopBackend
from backends.base import WindowHandle


def _window(hwnd: WindowHandle):
    from pywinauto.controls.hwndwrapper import HwndWrapper  # type: ignore

    return HwndWrapper(hwnd)


class WindowsBackend(DesktopBackend):
    name = "windows"

    def get_active_window(self) -> WindowHandle:
        from pywinauto import win32functions  # type: ignore

        return int(win32functions.GetForegroundWindow() or 0)

    def get_window_title(self, hwnd: WindowHandle) -> str:
        return _window(hwnd).window_text()

    def describe_window(self, hwnd: WindowHandle) -> str:
        window = _window(hwnd)
        rect = window.rectangle()
        return (
            f"hwnd=0x{hwnd:X} class={window.class_name()} pid={window.process_id()} "
            f"rect=({rect.left}, {rect.top}, {rect.right}, {rect.bottom})"
        )

    def center_window_on_primary_monitor(self, hwnd: WindowHandle) -> bool:
        window = _window(hwnd)
        rect = window.rectangle()
        screen_w, screen_h = self.get_primary_screen_size()
        width, height = rect.width(), rect.height()
        try:
            window.move_window(
                x=max(0, (screen_w - width) // 2),
                y=max(0, (screen_h - height) // 2),
                width=width,
                height=height,
            )
        except Exception:  # pragma: no cover - pywinauto raises a variety of COM/OS errors
            return False
        return True
