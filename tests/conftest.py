# tests/conftest.py

from __future__ import annotations

import pytest

from automation.actions import register_builtin_actions
from automation.registry import ActionRegistry
from logger import LogLevel, StatusLogger
from runtime_context import RuntimeContext
from scheduler import Scheduler

from .fakes import FakeClock, FakeListener, RecordingBackend


@pytest.fixture()
def logger() -> StatusLogger:
    """Captures everything in memory; nothing is printed."""
    return StatusLogger(level=LogLevel.TRACE, max_entries=1000, sink=None)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def scheduler(logger: StatusLogger, clock: FakeClock) -> Scheduler:
    return Scheduler(logger, clock=clock)


@pytest.fixture()
def backend() -> RecordingBackend:
    return RecordingBackend()


@pytest.fixture()
def ctx(logger: StatusLogger, scheduler: Scheduler, backend: RecordingBackend) -> RuntimeContext:
    return RuntimeContext(logger=logger, scheduler=scheduler, backend=backend)


@pytest.fixture()
def registry(logger: StatusLogger) -> ActionRegistry:
    registry = ActionRegistry(logger)
    register_builtin_actions(registry)
    return registry


@pytest.fixture(autouse=True)
def _reset_fake_listeners():
    FakeListener.instances.clear()
    yield
    FakeListener.instances.clear()
