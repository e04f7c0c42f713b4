"""Explicit backend selection by name."""

import sys
from typing import Callable, Dict

from backends.base import PlatformBackend
from backends.desktop import DesktopBackend
from backends.windows import WindowsBackend

BACKENDS: Dict[str, Callable[..., PlatformBackend]] = {
    DesktopBackend.name: DesktopBackend,
    WindowsBackend.name: WindowsBackend,
}


def default_backend_name() -> str:
    return WindowsBackend.name if sys.platform.startswith("win") else DesktopBackend.name


def create_backend(name: str, **kwargs) -> PlatformBackend:
    """Instantiate the backend registered under ``name``.

    Raises:
        ValueError: for names that are not in :data:`BACKENDS`
    """
    key = (name or "").strip().lower()
    if key not in BACKENDS:
        raise ValueError(f"Unknown backend '{name}'. Choose one of: {', '.join(sorted(BACKENDS))}")
    return BACKENDS[key](**kwargs)
