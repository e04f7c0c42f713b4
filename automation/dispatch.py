"""
Turns declarative bindings into hotkey callbacks.

Timing precedence for one binding:
1. a non-empty ``sequence``  -> schedule the chained steps
2. ``repeat_ms``             -> schedule a fixed-delay repeat
3. ``delay_ms``              -> schedule a one-shot
4. otherwise                 -> run the action right away

Every callback runs on the thread that pumps hotkeys; the scheduled variants
only register work with the scheduler and return.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List

from automation.registry import ActionRegistry
from backends.base import HotkeyCallback, PlatformBackend, PlatformError
from hotkey_manager import parse_hotkey
from models import Binding, ConfigResult
from scheduler import ScheduledStep

if TYPE_CHECKING:  # pragma: no cover
    from runtime_context import RuntimeContext


def _ms(value: int) -> float:
    return value / 1000.0


class BindingDispatchBuilder:
    """Builds exactly one callback per enabled binding."""

    def __init__(self, registry: ActionRegistry, ctx: "RuntimeContext") -> None:
        self._registry = registry
        self._ctx = ctx

    def build_callback(self, binding: Binding) -> HotkeyCallback:
        """
        Bind the binding's action(s) now and return the trigger callback.

        A binding ``target`` is injected as the primary action's ``target``
        parameter unless the parameters already name one. Sequence steps
        are bound with their own parameters only.

        Raises:
            ValueError: the binding names no action
        """
        spec = binding.resolved_action()
        if spec is None:
            raise ValueError(f"Hotkey '{binding.keys}' has no action")
        spec = spec.with_target(binding.target)

        base_action = self._registry.create_action(spec.name, spec.params, self._ctx)

        # Pull what the callbacks need out of the context before closing over it.
        logger = self._ctx.logger
        scheduler = self._ctx.scheduler
        keys = binding.keys

        if binding.sequence:
            steps: List[ScheduledStep] = []
            for step in binding.sequence:
                steps.append(
                    ScheduledStep(
                        delay=_ms(step.delay_ms),
                        action=self._registry.create_action(step.action.name, step.action.params, self._ctx),
                    )
                )
            logger.debug("Bound sequence", hotkey=keys, steps=len(steps))

            def run_sequence() -> None:
                logger.info("Running sequence", hotkey=keys)
                scheduler.schedule_sequence(steps)

            return run_sequence

        if binding.repeat_ms is not None:
            interval = _ms(binding.repeat_ms)
            logger.debug("Bound repeating action", hotkey=keys, action=spec.name, interval=binding.repeat_ms)

            def run_repeat() -> None:
                logger.info("Scheduling repeating task", hotkey=keys, interval=binding.repeat_ms)
                scheduler.schedule_repeat(interval, base_action)

            return run_repeat

        if binding.delay_ms is not None:
            delay = _ms(binding.delay_ms)
            logger.debug("Bound delayed action", hotkey=keys, action=spec.name, delay=binding.delay_ms)

            def run_delayed() -> None:
                logger.info("Scheduling delayed task", hotkey=keys, delay=binding.delay_ms)
                scheduler.schedule_once(delay, base_action)

            return run_delayed

        logger.debug("Bound immediate action", hotkey=keys, action=spec.name)

        def run_immediate() -> None:
            logger.info("Executing immediate action", hotkey=keys)
            try:
                base_action()
            except Exception as exc:
                logger.error("Action failed", hotkey=keys, action=spec.name, error=f"{type(exc).__name__}: {exc}")

        return run_immediate


def register_configured_hotkeys(
    config: ConfigResult,
    backend: PlatformBackend,
    registry: ActionRegistry,
    ctx: "RuntimeContext",
    clear_existing: bool = True,
) -> int:
    """Register every enabled binding with ``backend``.

    Each binding is handled on its own: a bad trigger, a failing factory or
    a trigger that is already claimed is logged and the rest carry on.
    Returns the number of hotkeys registered.
    """
    logger = ctx.logger
    builder = BindingDispatchBuilder(registry, ctx)

    if clear_existing:
        try:
            backend.clear_hotkeys()
            logger.debug("Cleared existing hotkeys before registration")
        except PlatformError as exc:
            logger.warning("Failed to clear existing hotkeys", error=exc)

    registered = 0
    for binding in config.hotkeys:
        if not binding.enabled:
            logger.info("Hotkey disabled; skipping registration", keys=binding.keys)
            continue

        try:
            trigger = parse_hotkey(binding.keys)
        except ValueError as exc:
            logger.warning("Skipping hotkey with no usable key", keys=binding.keys, error=exc)
            continue

        try:
            callback = builder.build_callback(binding)
        except Exception as exc:
            logger.error("Failed to bind hotkey action", keys=binding.keys, error=exc)
            continue

        try:
            backend.register_hotkey(trigger, callback)
        except PlatformError as exc:
            logger.error("Failed to register hotkey", keys=binding.keys, error=exc)
            continue

        logger.info("Registered hotkey", keys=binding.keys, action=binding.action_name())
        registered += 1

    return registered
