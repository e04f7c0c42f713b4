"""Shared runtime aggregate handed to action factories and plugins."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Optional

from backends.base import PlatformBackend
from logger import StatusLogger
from models import WindowTarget
from scheduler import Scheduler

if TYPE_CHECKING:  # pragma: no cover
    from window_targets import WindowTargetStateStore


@dataclass
class RuntimeContext:
    """
    One instance per process run, only ever touched from the main thread.

    Plugins may keep mutating it while they install, so action factories
    copy out the pieces they need instead of keeping the context itself.
    """
    logger: StatusLogger
    scheduler: Scheduler
    backend: PlatformBackend
    window_targets: Dict[str, WindowTarget] = field(default_factory=dict)
    state_store: Optional["WindowTargetStateStore"] = None
