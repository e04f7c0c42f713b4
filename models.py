"""
Domain models for the hotkey runner.
Each class follows the Single Responsibility Principle (SRP).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from logger import LogLevel


def to_params(data: Any) -> Dict[str, str]:
    """
    Convert a raw mapping into the string->string parameter map actions consume.

    Strings are kept, booleans become "true"/"false" and numbers use their
    ``str()`` form. Nested containers and nulls are dropped.
    """
    params: Dict[str, str] = {}
    if not isinstance(data, dict):
        return params
    for key, value in data.items():
        if isinstance(value, bool):
            params[str(key)] = "true" if value else "false"
        elif isinstance(value, (str, int, float)):
            params[str(key)] = str(value)
    return params


def _optional_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    return int(value)


def _flag(value: Any, default: bool) -> bool:
    """Read a JSON boolean, also accepting "true"/"false" style strings."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off"):
            return False
    raise ValueError(f"Expected a boolean, got {value!r}")


@dataclass
class ActionSpec:
    """A named action plus the parameters it should be bound with."""
    name: str
    params: Dict[str, str] = field(default_factory=dict)

    def with_target(self, target: str) -> "ActionSpec":
        """Return a copy carrying ``target`` unless a target is already explicit."""
        if not target or "target" in self.params:
            return self
        params = dict(self.params)
        params["target"] = target
        return ActionSpec(name=self.name, params=params)


@dataclass
class SequenceStep:
    """One step of a chained sequence, fired ``delay_ms`` after the previous one."""
    delay_ms: int
    action: ActionSpec

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "SequenceStep":
        return SequenceStep(
            delay_ms=int(data.get("delay_ms", 0) or 0),
            action=ActionSpec(
                name=str(data.get("action", "") or ""),
                params=to_params(data.get("params")),
            ),
        )


@dataclass
class Binding:
    """
    Declarative trigger-to-action record.

    Exactly one of ``action`` / ``uia_action`` is used; the direct action
    wins when both are present. Timing precedence (sequence, repeat, delay,
    immediate) is applied by the dispatch builder.
    """
    keys: str
    action: Optional[ActionSpec] = None
    uia_action: Optional[ActionSpec] = None
    enabled: bool = True
    target: str = ""
    delay_ms: Optional[int] = None
    repeat_ms: Optional[int] = None
    sequence: List[SequenceStep] = field(default_factory=list)

    def resolved_action(self) -> Optional[ActionSpec]:
        if self.action is not None and self.action.name:
            return self.action
        if self.uia_action is not None and self.uia_action.name:
            return self.uia_action
        return None

    def action_name(self) -> str:
        spec = self.resolved_action()
        return spec.name if spec else ""

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Binding":
        """
        Create a Binding from a JSON dictionary.

        Raises:
            ValueError: when ``keys`` or both action names are missing, a
                timing field is not a number or ``enabled`` is not a boolean
        """
        keys = str(data.get("keys", "") or "").strip()
        action_name = str(data.get("action", "") or "").strip()
        uia_name = str(data.get("uia_action", "") or "").strip()
        if not keys or not (action_name or uia_name):
            raise ValueError("Hotkey entry missing 'keys' or action/uia_action")

        steps: List[SequenceStep] = []
        raw_steps = data.get("sequence", []) or []
        if isinstance(raw_steps, list):
            for raw in raw_steps:
                if isinstance(raw, dict):
                    steps.append(SequenceStep.from_dict(raw))

        return Binding(
            keys=keys,
            action=ActionSpec(action_name, to_params(data.get("params"))) if action_name else None,
            uia_action=ActionSpec(uia_name, to_params(data.get("uia_params"))) if uia_name else None,
            enabled=_flag(data.get("enabled"), True),
            target=str(data.get("target", "") or "").strip(),
            delay_ms=_optional_int(data.get("delay_ms")),
            repeat_ms=_optional_int(data.get("repeat_ms")),
            sequence=steps,
        )


@dataclass
class WindowTarget:
    """A logical window that actions can refer to by name."""
    name: str
    title: Optional[str] = None
    title_contains: Optional[str] = None
    class_name: Optional[str] = None
    process_name: Optional[str] = None
    stored_hwnd: Optional[int] = None

    @staticmethod
    def from_dict(name: str, data: Dict[str, Any]) -> "WindowTarget":
        def text(key: str) -> Optional[str]:
            raw = data.get(key)
            return str(raw) if raw not in (None, "") else None

        hwnd = data.get("hwnd")
        return WindowTarget(
            name=name,
            title=text("title"),
            title_contains=text("title_contains"),
            class_name=text("class"),
            process_name=text("process"),
            stored_hwnd=int(hwnd) if hwnd is not None else None,
        )


@dataclass
class ConfigResult:
    """Everything a config file contributes to a run."""
    logging_level: Optional[LogLevel] = None
    structured_logs: bool = False
    backend: Optional[str] = None
    hotkeys: List[Binding] = field(default_factory=list)
    window_targets: Dict[str, WindowTarget] = field(default_factory=dict)
