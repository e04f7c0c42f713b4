"""
Extension modules.

A plugin registers extra named actions into the shared registry when it is
installed and gets one shutdown call when the run ends.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

from automation.registry import ActionRegistry
from logger import StatusLogger

if TYPE_CHECKING:  # pragma: no cover
    from runtime_context import RuntimeContext


class Plugin:
    name = "plugin"
    description = ""

    def install(self, registry: ActionRegistry, ctx: "RuntimeContext") -> None:
        pass

    def shutdown(self, ctx: "RuntimeContext") -> None:
        pass


class PluginManager:
    def __init__(self, logger: Optional[StatusLogger] = None) -> None:
        self._plugins: List[Plugin] = []
        self._logger = logger

    @property
    def plugins(self) -> List[Plugin]:
        return list(self._plugins)

    def register_plugin(self, plugin: Optional[Plugin], registry: ActionRegistry, ctx: "RuntimeContext") -> None:
        if plugin is None:
            return
        plugin.install(registry, ctx)
        self._plugins.append(plugin)
        if self._logger is not None:
            self._logger.info("Plugin installed", name=plugin.name)

    def shutdown_plugins(self, ctx: "RuntimeContext") -> None:
        """Shut every installed plugin down once, in install order."""
        plugins, self._plugins = self._plugins, []
        for plugin in plugins:
            try:
                plugin.shutdown(ctx)
            except Exception as exc:
                if self._logger is not None:
                    self._logger.error("Plugin shutdown failed", name=plugin.name, error=exc)
                continue
            if self._logger is not None:
                self._logger.debug("Plugin shut down", name=plugin.name)
