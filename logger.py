"""
Status Logger - leveled, in-memory logging for the hotkey runner.

SRP: This class has one responsibility - recording and emitting log lines.
Every component receives the same instance through the runtime context.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import IntEnum
from typing import Any, Callable, Dict, List, Optional, Union


class LogLevel(IntEnum):
    """Severity levels, ordered from most to least verbose."""
    TRACE = 0
    DEBUG = 1
    INFO = 2
    WARNING = 3
    ERROR = 4


_LEVEL_ALIASES: Dict[str, LogLevel] = {
    "trace": LogLevel.TRACE,
    "debug": LogLevel.DEBUG,
    "info": LogLevel.INFO,
    "warn": LogLevel.WARNING,
    "warning": LogLevel.WARNING,
    "error": LogLevel.ERROR,
    "err": LogLevel.ERROR,
}


def parse_log_level(name: str) -> Optional[LogLevel]:
    """Resolve a case-insensitive level name, or None when unknown."""
    return _LEVEL_ALIASES.get(str(name).strip().lower())


@dataclass
class LogEntry:
    """
    Represents a single log entry.

    Fields are free-form key/value context attached to the message.
    """
    timestamp: datetime
    message: str
    level: LogLevel = LogLevel.INFO
    fields: Dict[str, str] = field(default_factory=dict)

    def iso_time(self) -> str:
        return self.timestamp.strftime("%Y-%m-%dT%H:%M:%S.") + f"{self.timestamp.microsecond // 1000:03d}Z"

    def to_json(self) -> str:
        payload: Dict[str, Any] = {
            "ts": self.iso_time(),
            "level": self.level.name,
            "msg": self.message,
        }
        if self.fields:
            payload["fields"] = dict(self.fields)
        return json.dumps(payload, ensure_ascii=False)

    def __str__(self) -> str:
        extras = ""
        if self.fields:
            extras = " [" + ", ".join(f"{k}={v}" for k, v in self.fields.items()) + "]"
        return f"[{self.iso_time()}] {self.level.name}: {self.message}{extras}"


class StatusLogger:
    """
    Leveled logger with a bounded history.

    Messages below the configured level are dropped before they reach the
    history or the sink. The sink receives one formatted line per entry,
    either human readable or a JSON object when ``structured`` is set.
    """

    def __init__(
        self,
        level: LogLevel = LogLevel.INFO,
        structured: bool = False,
        max_entries: int = 100,
        sink: Optional[Callable[[str], None]] = print,
    ):
        """
        Initialize the logger.

        Args:
            level: Minimum level that gets recorded
            structured: Emit JSON lines instead of plain text
            max_entries: Maximum number of log entries to keep in memory
            sink: Line consumer; None keeps entries in memory only
        """
        self.level = level
        self.structured = structured
        self._log_entries: List[LogEntry] = []
        self._max_entries = max_entries
        self._sink = sink

    def set_level(self, level: Union[LogLevel, str]) -> None:
        """Update the level from an enum member or a case-insensitive name.

        Unknown names leave the current level untouched.
        """
        if isinstance(level, LogLevel):
            self.level = level
            return
        parsed = parse_log_level(level)
        if parsed is not None:
            self.level = parsed

    def is_enabled_for(self, level: LogLevel) -> bool:
        return level >= self.level

    def trace(self, message: str, **fields: Any) -> None:
        self.log(LogLevel.TRACE, message, **fields)

    def debug(self, message: str, **fields: Any) -> None:
        self.log(LogLevel.DEBUG, message, **fields)

    def info(self, message: str, **fields: Any) -> None:
        """Log an informational message."""
        self.log(LogLevel.INFO, message, **fields)

    def warning(self, message: str, **fields: Any) -> None:
        """Log a warning message."""
        self.log(LogLevel.WARNING, message, **fields)

    def error(self, message: str, **fields: Any) -> None:
        """Log an error message."""
        self.log(LogLevel.ERROR, message, **fields)

    def log(self, level: LogLevel, message: str, **fields: Any) -> None:
        if not self.is_enabled_for(level):
            return
        self._add_entry(message, level, {k: str(v) for k, v in fields.items()})

    def get_recent_logs(self, count: int = 10) -> List[LogEntry]:
        """
        Get the most recent log entries.

        Args:
            count: Number of recent entries to return

        Returns:
            List of recent log entries
        """
        return self._log_entries[-count:]

    def get_all_logs(self) -> List[LogEntry]:
        """Returns all log entries."""
        return self._log_entries.copy()

    def clear_logs(self) -> None:
        """Clear all log entries."""
        self._log_entries.clear()

    def _add_entry(self, message: str, level: LogLevel, fields: Dict[str, str]) -> None:
        entry = LogEntry(
            timestamp=datetime.now(timezone.utc),
            message=message,
            level=level,
            fields=fields,
        )

        self._log_entries.append(entry)

        # Trim old entries if we exceed max
        if len(self._log_entries) > self._max_entries:
            self._log_entries = self._log_entries[-self._max_entries:]

        if self._sink is not None:
            self._sink(entry.to_json() if self.structured else str(entry))
