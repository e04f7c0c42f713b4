"""
Loads the JSON hotkey configuration.

Expected shape::

    {
      "logging": {"level": "info", "structured": false},
      "backend": "desktop",
      "window_targets": {"editor": {"title_contains": "Notepad"}},
      "hotkeys": [
        {"keys": "Ctrl+Alt+N", "action": "start_process",
         "params": {"command": "notepad.exe"}},
        {"keys": "Ctrl+Alt+S", "action": "send_text",
         "sequence": [{"delay_ms": 500, "action": "send_text",
                       "params": {"text": "Step 2"}}]}
      ]
    }

A malformed hotkey entry is skipped with a warning; the rest still load.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Union

from logger import StatusLogger, parse_log_level
from models import Binding, ConfigResult, WindowTarget


def load_config(path: Union[str, Path], logger: StatusLogger) -> ConfigResult:
    """Load configuration from the JSON file at ``path``.

    Raises:
        OSError: the file cannot be read
        ValueError: the file is not valid JSON
    """
    path = Path(path)
    logger.info("Loading config", path=path)
    root = json.loads(path.read_text(encoding="utf-8"))
    return parse_config(root, logger)


def parse_config(root: Any, logger: StatusLogger) -> ConfigResult:
    """Build a ConfigResult from an already decoded JSON document."""
    result = ConfigResult()

    if not isinstance(root, dict):
        logger.error("Config root is not a JSON object")
        return result

    _parse_logging(root.get("logging"), result, logger)

    backend = root.get("backend")
    if isinstance(backend, str) and backend.strip():
        result.backend = backend.strip().lower()

    _parse_window_targets(root.get("window_targets"), result, logger)

    hotkeys = root.get("hotkeys")
    if not isinstance(hotkeys, list):
        logger.warning("No hotkeys array found in config")
    else:
        for index, entry in enumerate(hotkeys):
            if not isinstance(entry, dict):
                logger.warning("Hotkey entry is not an object, skipping", index=index)
                continue
            try:
                result.hotkeys.append(Binding.from_dict(entry))
            except (TypeError, ValueError) as exc:
                logger.warning("Skipping hotkey entry", index=index, keys=entry.get("keys", ""), error=exc)

    logger.info("Config loaded", hotkey_count=len(result.hotkeys))
    return result


def _parse_logging(node: Any, result: ConfigResult, logger: StatusLogger) -> None:
    if not isinstance(node, dict):
        return
    level_name = str(node.get("level", "") or "")
    if level_name:
        level = parse_log_level(level_name)
        if level is None:
            logger.warning("Unknown logging level in config, using default", level=level_name)
        else:
            result.logging_level = level
    result.structured_logs = bool(node.get("structured", False))


def _parse_window_targets(node: Any, result: ConfigResult, logger: StatusLogger) -> None:
    if node is None:
        return

    entries: Dict[str, Dict[str, Any]] = {}
    if isinstance(node, list):
        for entry in node:
            if not isinstance(entry, dict):
                continue
            name = str(entry.get("name", "") or "")
            if not name:
                logger.warning("Window target missing name, skipping")
                continue
            entries[name] = entry
    elif isinstance(node, dict):
        for name, entry in node.items():
            if not isinstance(entry, dict):
                logger.warning("Window target is not an object, skipping", name=name)
                continue
            entries[name] = entry
    else:
        logger.warning("window_targets must be an object or an array of objects")
        return

    for name, entry in entries.items():
        try:
            result.window_targets[name] = WindowTarget.from_dict(name, entry)
        except (TypeError, ValueError) as exc:
            logger.warning("Invalid window target, skipping", name=name, error=exc)
