"""
Main entry point for the hotkey runner.

Program flow:
- parse arguments and load the JSON config
- select the platform backend by name
- build the runtime context, actions and plugins
- register hotkeys and pump events until an exit action fires
- tear everything down once
"""

import sys
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from automation.actions import register_builtin_actions
from automation.dispatch import register_configured_hotkeys
from automation.plugins import Plugin, PluginManager
from automation.registry import ActionRegistry
from automation.window_helpers import WindowHelpersPlugin
from backends.base import PlatformBackend, PlatformError
from backends.factory import create_backend, default_backend_name
from cli_args import USAGE, parse_cli_args
from config_loader import load_config
from logger import StatusLogger
from models import ConfigResult
from runtime_context import RuntimeContext
from scheduler import Scheduler
from window_targets import WindowTargetStateStore, derive_state_path


def default_plugins() -> List[Plugin]:
    return [WindowHelpersPlugin()]


def run(
    config: ConfigResult,
    backend: PlatformBackend,
    logger: StatusLogger,
    state_path: Optional[Path] = None,
    dry_run: bool = False,
    plugins: Optional[Iterable[Plugin]] = None,
) -> int:
    """Wire the runtime together, pump events and tear down. Returns the exit code."""
    scheduler = Scheduler(logger)

    targets = dict(config.window_targets)
    state_store = WindowTargetStateStore(state_path) if state_path is not None else None
    if state_store is not None:
        state_store.load_into(targets, logger)

    ctx = RuntimeContext(
        logger=logger,
        scheduler=scheduler,
        backend=backend,
        window_targets=targets,
        state_store=state_store,
    )

    registry = ActionRegistry(logger)
    register_builtin_actions(registry)

    plugin_manager = PluginManager(logger)
    for plugin in default_plugins() if plugins is None else plugins:
        plugin_manager.register_plugin(plugin, registry, ctx)

    try:
        registered = register_configured_hotkeys(config, backend, registry, ctx)
        if registered == 0:
            logger.warning("No hotkeys registered")
        if dry_run:
            logger.info("Dry run; not entering the message loop", registered=registered)
            return 0
        logger.info("Entering message loop. Press the configured exit hotkey to quit.")
        backend.run_message_loop(scheduler)
    except PlatformError as exc:
        logger.error("Message loop failed", backend=backend.name, error=exc)
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted; shutting down")
    finally:
        plugin_manager.shutdown_plugins(ctx)
        scheduler.clear()
        backend.clear_hotkeys()

    return backend.exit_code


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Application entry point."""
    try:
        options = parse_cli_args(sys.argv[1:] if argv is None else argv)
    except ValueError as exc:
        print(f"Error: {exc}")
        print(USAGE)
        return 2

    if options.show_help:
        print(USAGE)
        return 0

    config_path = Path(options.resolved_config_path())
    if not config_path.exists():
        print(f"Config file {config_path} not found.")
        return 2

    logger = StatusLogger()
    if options.log_level:
        logger.set_level(options.log_level)

    try:
        config = load_config(config_path, logger)
    except (OSError, ValueError) as exc:
        logger.error("Failed to load config", path=config_path, error=exc)
        return 1

    if config.logging_level is not None and not options.log_level:
        logger.set_level(config.logging_level)
    logger.structured = config.structured_logs

    backend_name = options.backend or config.backend or default_backend_name()
    try:
        backend = create_backend(backend_name)
    except ValueError as exc:
        logger.error("No usable backend", backend=backend_name, error=exc)
        return 2

    return run(
        config,
        backend,
        logger,
        state_path=derive_state_path(config_path),
        dry_run=options.dry_run,
    )


if __name__ == "__main__":
    raise SystemExit(main())
