"""Platform-agnostic hotkey trigger source built on top of pynput."""

from __future__ import annotations

import functools
import queue
from typing import Callable, Dict, Optional

try:
    from pynput import keyboard  # type: ignore
except Exception as _e:  # pragma: no cover - environment dependent
    keyboard = None  # type: ignore

from backends.base import HotkeyCallback, HotkeyRegistrationError

ListenerFactory = Callable[[Dict[str, Callable[[], None]]], object]

_MODIFIER_ALIASES: Dict[str, str] = {
    "ctrl": "ctrl",
    "control": "ctrl",
    "alt": "alt",
    "shift": "shift",
    "win": "cmd",
    "cmd": "cmd",
    "command": "cmd",
    "option": "alt",
    "super": "cmd",
}

# Modifiers are emitted in this order so one chord has one trigger string.
_MODIFIER_ORDER = ("ctrl", "alt", "shift", "cmd")

_NAMED_KEY_ALIASES: Dict[str, str] = {
    "esc": "esc",
    "escape": "esc",
    "space": "space",
    "tab": "tab",
    "enter": "enter",
    "return": "enter",
    "backspace": "backspace",
    "delete": "delete",
    "del": "delete",
    "insert": "insert",
    "home": "home",
    "end": "end",
    "pageup": "page_up",
    "page_up": "page_up",
    "pagedown": "page_down",
    "page_down": "page_down",
    "up": "up",
    "down": "down",
    "left": "left",
    "right": "right",
}


def parse_hotkey(hotkey: str) -> str:
    """Convert "Ctrl+Alt+A" style strings into pynput's ``<ctrl>+<alt>+a`` form.

    Modifiers come out as ctrl, alt, shift, cmd regardless of how they were
    typed, and repeats collapse, so "Alt+Ctrl+A" gives the same trigger.

    Raises:
        ValueError: if the string is empty or names no non-modifier key
    """
    if not hotkey:
        raise ValueError("Empty hotkey string")

    tokens = [token.strip() for token in hotkey.replace("+", " ").split() if token.strip()]
    if not tokens:
        raise ValueError("Hotkey contains no tokens")

    modifiers = set()
    parsed: list[str] = []
    has_key = False
    for token in tokens:
        lower_token = token.lower()

        if lower_token in _MODIFIER_ALIASES:
            modifiers.add(_MODIFIER_ALIASES[lower_token])
            continue

        has_key = True
        if lower_token in _NAMED_KEY_ALIASES:
            parsed.append(f"<{_NAMED_KEY_ALIASES[lower_token]}>")
        elif lower_token.startswith("f") and lower_token[1:].isdigit():
            parsed.append(f"<{lower_token}>")
        elif len(lower_token) == 1:
            parsed.append(lower_token)
        else:
            raise ValueError(f"Unknown key '{token}' in hotkey '{hotkey}'")

    if not has_key:
        raise ValueError(f"Hotkey '{hotkey}' has no key besides modifiers")

    ordered = [f"<{name}>" for name in _MODIFIER_ORDER if name in modifiers]
    return "+".join(ordered + parsed)


class HotkeyManager:
    """
    Owns the trigger -> callback table for one process run.

    The pynput listener runs on its own thread and only enqueues the id of
    the hotkey that fired. Callbacks run later, on whichever thread calls
    :meth:`dispatch_pending`, so the rest of the program stays single-threaded.
    """

    def __init__(self, listener_factory: Optional[ListenerFactory] = None) -> None:
        self._listener_factory = listener_factory
        self._callbacks: Dict[int, HotkeyCallback] = {}
        self._triggers: Dict[str, int] = {}
        self._pending: "queue.SimpleQueue[int]" = queue.SimpleQueue()
        self._listener: Optional[object] = None
        self._next_id = 1

    def register(self, trigger: str, callback: HotkeyCallback) -> int:
        """Claim ``trigger`` (pynput hotkey syntax) and return its hotkey id."""
        if trigger in self._triggers:
            raise HotkeyRegistrationError(f"Hotkey '{trigger}' is already registered")

        hotkey_id = self._next_id
        self._triggers[trigger] = hotkey_id
        self._callbacks[hotkey_id] = callback
        try:
            self._restart_listener()
        except HotkeyRegistrationError:
            del self._triggers[trigger]
            del self._callbacks[hotkey_id]
            # Bring the listener back for the hotkeys that were already working.
            if self._triggers:
                self._restart_listener()
            raise

        self._next_id += 1
        return hotkey_id

    def registered_triggers(self) -> list[str]:
        return list(self._triggers)

    def dispatch_pending(self) -> int:
        """Run callbacks for every trigger that fired since the last call.

        Never blocks. Returns the number of callbacks invoked.
        """
        dispatched = 0
        while True:
            try:
                hotkey_id = self._pending.get_nowait()
            except queue.Empty:
                return dispatched
            callback = self._callbacks.get(hotkey_id)
            if callback is None:
                # Fired just before clear(); the binding is gone.
                continue
            callback()
            dispatched += 1

    def clear(self) -> None:
        """Unregister every hotkey and stop listening."""
        self.stop()
        self._callbacks.clear()
        self._triggers.clear()

    def stop(self) -> None:
        listener = self._listener
        self._listener = None
        if listener is not None:
            listener.stop()  # type: ignore[attr-defined]

    def _restart_listener(self) -> None:
        self.stop()
        if not self._triggers:
            return

        factory = self._listener_factory
        if factory is None:
            if keyboard is None:
                raise HotkeyRegistrationError("pynput/keyboard backend not available; global hotkeys disabled")
            factory = keyboard.GlobalHotKeys

        hotkey_map = {
            trigger: functools.partial(self._pending.put, hotkey_id)
            for trigger, hotkey_id in self._triggers.items()
        }
        try:
            listener = factory(hotkey_map)
            listener.start()  # type: ignore[attr-defined]
        except Exception as exc:
            raise HotkeyRegistrationError(f"Failed to register hotkeys: {exc}") from exc
        self._listener = listener
