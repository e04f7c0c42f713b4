"""
Cooperative task scheduler.

The scheduler never spawns threads. The host loop calls :meth:`Scheduler.tick`
whenever it is otherwise idle, and every due task runs synchronously on that
caller's thread. Delays are expressed in seconds and stored as integer
nanoseconds of the monotonic clock.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, Iterable, List, Optional

if TYPE_CHECKING:  # pragma: no cover
    from logger import StatusLogger

Action = Callable[[], None]
Clock = Callable[[], int]

_NS_PER_SECOND = 1_000_000_000


def _to_ns(seconds: float) -> int:
    # Negative delays mean "as soon as possible".
    return max(0, int(round(seconds * _NS_PER_SECOND)))


class TaskKind(Enum):
    ONCE = "once"
    REPEAT = "repeat"
    SEQUENCE = "sequence"


@dataclass
class TaskHandle:
    """Returned to whoever scheduled a task; pass it to ``Scheduler.cancel``."""
    id: int
    cancelled: bool = False


@dataclass
class ScheduledStep:
    """One link of a sequence: wait ``delay`` seconds, then run ``action``."""
    delay: float
    action: Action


@dataclass
class ScheduledTask:
    id: int
    kind: TaskKind
    next_run: int
    action: Optional[Action] = None
    interval: int = 0
    steps: List[ScheduledStep] = field(default_factory=list)
    step_index: int = 0
    cancelled: bool = False
    done: bool = False


class Scheduler:
    """
    Owns pending timed tasks and runs the due ones on :meth:`tick`.

    Tasks live in an insertion-ordered dict keyed by id, so tasks that become
    due in the same tick run in the order they were registered. Repeats use
    fixed-delay semantics: the next run is computed from the actual firing
    time, not from the previous due time.
    """

    def __init__(self, logger: Optional["StatusLogger"] = None, clock: Clock = time.monotonic_ns):
        self.logger = logger
        self._clock = clock
        self._tasks: Dict[int, ScheduledTask] = {}
        self._handles: Dict[int, TaskHandle] = {}
        self._next_id = 1

    # Registration ------------------------------------------------------

    def schedule_once(self, delay: float, action: Action) -> TaskHandle:
        task = self._add(TaskKind.ONCE, self._clock() + _to_ns(delay), action=action)
        self._debug("Scheduled one-shot task", id=task.id, delay_ms=int(delay * 1000))
        return self._handles[task.id]

    def schedule_repeat(
        self,
        interval: float,
        action: Action,
        initial_delay: Optional[float] = None,
    ) -> TaskHandle:
        interval_ns = _to_ns(interval)
        start_after = interval_ns if initial_delay is None else _to_ns(initial_delay)
        task = self._add(
            TaskKind.REPEAT,
            self._clock() + start_after,
            action=action,
            interval=interval_ns,
        )
        self._debug("Scheduled repeating task", id=task.id, interval_ms=int(interval * 1000))
        return self._handles[task.id]

    def schedule_sequence(self, steps: Iterable[ScheduledStep]) -> TaskHandle:
        steps = list(steps)
        if not steps:
            raise ValueError("A sequence needs at least one step")
        task = self._add(TaskKind.SEQUENCE, self._clock() + _to_ns(steps[0].delay), steps=steps)
        self._debug("Scheduled sequence", id=task.id, steps=len(steps))
        return self._handles[task.id]

    def cancel(self, handle: Optional[TaskHandle]) -> None:
        """Mark a task cancelled. Idempotent; unknown or finished ids are ignored."""
        if handle is None:
            return
        task = self._tasks.get(handle.id)
        if task is None:
            return
        handle.cancelled = True
        self._handles[task.id].cancelled = True
        if not task.cancelled:
            task.cancelled = True
            self._debug("Cancelled scheduled task", id=handle.id)

    def clear(self) -> None:
        """Cancel and drop every pending task."""
        for task_id, task in self._tasks.items():
            task.cancelled = True
            self._handles[task_id].cancelled = True
        self._tasks.clear()
        self._handles.clear()

    # Execution ---------------------------------------------------------

    def tick(self) -> int:
        """Run every due task once. Returns the number of actions executed."""
        if not self._tasks:
            return 0

        now = self._clock()
        executed = 0

        # Snapshot: tasks added by an action during this pass wait for the next tick.
        for task in list(self._tasks.values()):
            if task.cancelled or now < task.next_run:
                continue

            if task.kind is TaskKind.SEQUENCE:
                step = task.steps[task.step_index]
                self._run(task, step.action)
                task.step_index += 1
                if task.step_index < len(task.steps):
                    task.next_run = now + _to_ns(task.steps[task.step_index].delay)
                else:
                    task.done = True
            else:
                self._run(task, task.action)
                if task.kind is TaskKind.REPEAT:
                    task.next_run = now + task.interval
                else:
                    task.done = True
            executed += 1

        for task_id in [t.id for t in self._tasks.values() if t.cancelled or t.done]:
            del self._tasks[task_id]
            self._handles.pop(task_id, None)

        return executed

    # Introspection -----------------------------------------------------

    def pending_ids(self) -> List[int]:
        return [t.id for t in self._tasks.values() if not t.cancelled]

    def __len__(self) -> int:
        return len(self.pending_ids())

    def __contains__(self, task_id: object) -> bool:
        task = self._tasks.get(task_id)  # type: ignore[arg-type]
        return task is not None and not task.cancelled

    # Internal helpers --------------------------------------------------

    def _add(self, kind: TaskKind, next_run: int, **fields) -> ScheduledTask:
        task = ScheduledTask(id=self._next_id, kind=kind, next_run=next_run, **fields)
        self._next_id += 1
        self._tasks[task.id] = task
        self._handles[task.id] = TaskHandle(id=task.id)
        return task

    def _run(self, task: ScheduledTask, action: Optional[Action]) -> None:
        if action is None:
            return
        try:
            action()
        except Exception as exc:
            if self.logger is not None:
                self.logger.error(
                    "Scheduled action failed",
                    id=task.id,
                    kind=task.kind.value,
                    error=f"{type(exc).__name__}: {exc}",
                )

    def _debug(self, message: str, **fields) -> None:
        if self.logger is not None:
            self.logger.debug(message, **fields)
