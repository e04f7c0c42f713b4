"""Named window targets and persistence of captured window handles."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Optional, Union

from logger import StatusLogger
from models import WindowTarget

DEFAULT_STATE_FILENAME = "window_targets_state.json"


def derive_state_path(config_path: Union[str, Path]) -> Path:
    """Place the state file next to the primary config."""
    return Path(config_path).resolve().parent / DEFAULT_STATE_FILENAME


def update_stored_hwnd(
    targets: Dict[str, WindowTarget],
    name: str,
    hwnd: int,
    logger: Optional[StatusLogger] = None,
) -> WindowTarget:
    """Update or insert a window target with a stored handle value."""
    target = targets.get(name) or WindowTarget(name=name)
    target.stored_hwnd = hwnd
    targets[name] = target
    if logger is not None:
        logger.info("Captured window target", name=name, hwnd=hwnd)
    return target


def validate_handle(hwnd: int, logger: Optional[StatusLogger] = None) -> bool:
    if hwnd <= 0:
        if logger is not None:
            logger.warning("Invalid window handle found in state; skipping", hwnd=hwnd)
        return False
    return True


class WindowTargetStateStore:
    """Loads and saves captured window handles so they survive restarts."""

    def __init__(self, storage_path: Union[str, Path]) -> None:
        self._storage_path = Path(storage_path)

    @property
    def storage_path(self) -> Path:
        """Absolute path to the state file."""
        return self._storage_path

    def load_into(self, targets: Dict[str, WindowTarget], logger: Optional[StatusLogger] = None) -> int:
        """Merge persisted handles into ``targets``. Returns how many were merged.

        A missing file is not an error; an unreadable or malformed one is
        reported and otherwise ignored.
        """
        path = self.storage_path
        if not path.exists():
            return 0

        try:
            raw_data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            if logger is not None:
                logger.warning("Failed to parse window target state file", path=path, error=exc)
            return 0

        section = raw_data.get("window_targets") if isinstance(raw_data, dict) else None
        if not isinstance(section, dict):
            if logger is not None:
                logger.warning("window_targets section missing in state file", path=path)
            return 0

        merged = 0
        for name, entry in section.items():
            if not isinstance(entry, dict) or "hwnd" not in entry:
                continue
            try:
                hwnd = int(entry["hwnd"])
            except (TypeError, ValueError):
                continue
            if not validate_handle(hwnd, logger):
                continue
            update_stored_hwnd(targets, name, hwnd, logger)
            merged += 1
        return merged

    def save(self, targets: Dict[str, WindowTarget], logger: Optional[StatusLogger] = None) -> bool:
        """Persist stored handles atomically to disk."""
        path = self.storage_path
        payload = {
            "window_targets": {
                name: {"hwnd": target.stored_hwnd}
                for name, target in targets.items()
                if target.stored_hwnd is not None
            }
        }
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = path.with_suffix(".tmp")
            tmp_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
            tmp_path.replace(path)
        except OSError as exc:
            if logger is not None:
                logger.error("Failed to save window target state", path=path, error=exc)
            return False
        if logger is not None:
            logger.info("Saved window target state", path=path)
        return True
