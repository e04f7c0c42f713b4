"""Command-line argument parsing for the hotkey runner."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

DEFAULT_CONFIG = "examples/hotkeys.json"

USAGE = """\
Usage: hotkey-runner [CONFIG] [--backend NAME] [--log-level LEVEL] [--dry-run]

  CONFIG             JSON config file (default: examples/hotkeys.json)
  --backend NAME     platform backend: desktop | windows
  --log-level LEVEL  trace | debug | info | warn | error
  --dry-run          load and bind hotkeys, then exit without listening
"""


@dataclass
class CliOptions:
    config_path: Optional[str] = None
    backend: Optional[str] = None
    log_level: Optional[str] = None
    dry_run: bool = False
    show_help: bool = False

    def resolved_config_path(self) -> str:
        return self.config_path or DEFAULT_CONFIG


def parse_cli_args(args: Sequence[str]) -> CliOptions:
    """
    Parse command-line arguments.

    The first non-flag argument is the config path. Value flags accept both
    ``--flag value`` and ``--flag=value``.

    Raises:
        ValueError: unknown flags, missing values or a second config path
    """
    options = CliOptions()
    remaining: List[str] = list(args)

    while remaining:
        arg = remaining.pop(0)
        flag, has_inline, inline_value = arg.partition("=")

        if arg in ("-h", "--help"):
            options.show_help = True
        elif arg == "--dry-run":
            options.dry_run = True
        elif flag in ("--backend", "--log-level"):
            if has_inline:
                value = inline_value
            elif remaining:
                value = remaining.pop(0)
            else:
                raise ValueError(f"{flag} requires a value")
            if not value:
                raise ValueError(f"{flag} requires a value")
            if flag == "--backend":
                options.backend = value
            else:
                options.log_level = value
        elif arg.startswith("--"):
            raise ValueError(f"Unrecognized flag: {arg}")
        elif options.config_path is not None:
            raise ValueError("Only one config path is supported")
        else:
            options.config_path = arg

    return options
