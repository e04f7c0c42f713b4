"""
Action registry: maps action names to factories.

A factory receives the action's parameters and the runtime context once, at
bind time, and returns a zero-argument callable. Factories must copy the
pieces of the context they need (logger, backend, ...) into locals instead of
closing over the context, because plugins keep changing it after the action
has been created.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Dict, List, Mapping, Optional

from logger import StatusLogger

if TYPE_CHECKING:  # pragma: no cover
    from runtime_context import RuntimeContext

Action = Callable[[], None]
ActionFactory = Callable[[Dict[str, str], "RuntimeContext"], Action]


def _noop() -> None:
    return None


class ActionRegistry:
    def __init__(self, logger: Optional[StatusLogger] = None) -> None:
        self._factories: Dict[str, ActionFactory] = {}
        self._logger = logger

    def register_action(self, name: str, factory: ActionFactory) -> None:
        """Register ``factory`` under ``name`` (case-insensitive). The last registration wins."""
        key = name.lower()
        replaced = key in self._factories
        self._factories[key] = factory
        if self._logger is not None:
            self._logger.debug("Registered action", name=name, replaced=replaced)

    def has_action(self, name: str) -> bool:
        return name.lower() in self._factories

    def action_names(self) -> List[str]:
        return sorted(self._factories)

    def create_action(
        self,
        name: str,
        params: Mapping[str, str],
        ctx: "RuntimeContext",
    ) -> Action:
        """Bind ``name`` to ``params`` and ``ctx``.

        Unknown names never fail the caller: a warning is logged and a no-op
        action is returned.
        """
        factory = self._factories.get(name.lower())
        if factory is None:
            if self._logger is not None:
                self._logger.warning("Unknown action requested", action=name)
            return _noop
        return factory(dict(params), ctx)
