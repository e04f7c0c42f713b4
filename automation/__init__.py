"""
Automation package: named actions and the glue that binds them to hotkeys.

Key parts
---------
- registry:       name -> factory table producing zero-argument actions
- actions:        built-in actions (processes, input, window targets, exit)
- plugins:        extension modules that register more actions at startup
- window_helpers: plugin with active-window and screen helpers
- dispatch:       builds hotkey callbacks from bindings (immediate/delay/repeat/sequence)
"""

from .dispatch import BindingDispatchBuilder, register_configured_hotkeys
from .registry import ActionRegistry

__all__ = ["ActionRegistry", "BindingDispatchBuilder", "register_configured_hotkeys"]
