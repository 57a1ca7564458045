"""Action registry, default key table and help rendering."""

from .models import ActionRef, Binding, normalize_key
from .registry import KeymapConflictError, KeymapRegistry
from .defaults import apply_user_keymap, build_registry, load_default_keymaps
from .help import HELP_GROUPS, render_help

__all__ = [
    "ActionRef",
    "Binding",
    "normalize_key",
    "KeymapRegistry",
    "KeymapConflictError",
    "load_default_keymaps",
    "apply_user_keymap",
    "build_registry",
    "HELP_GROUPS",
    "render_help",
]
