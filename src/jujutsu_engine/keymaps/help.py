"""Grouped help text for the active key table."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from .models import CUSTOM_GROUP
from .registry import KeymapRegistry

HELP_GROUPS: Tuple[Tuple[str, str], ...] = (
    ("help", "Help"),
    ("navigation", "Navigation"),
    ("log", "Log"),
    ("basic_operations", "Basic Operations"),
    ("advanced_operations", "Advanced Operations"),
    ("bookmarks", "Bookmarks"),
    ("multi_selection", "Multi-Selection"),
    (CUSTOM_GROUP, "Custom"),
)

_KEY_LABELS = {" ": "space", "enter": "Enter", "escape": "Esc", "tab": "Tab"}


@dataclass(frozen=True, slots=True)
class HelpEntry:
    key: str
    description: str
    order: int


def key_label(key: str) -> str:
    return _KEY_LABELS.get(key, key)


def group_bindings(registry: KeymapRegistry) -> List[Tuple[str, List[HelpEntry]]]:
    """Bindings bucketed by help group, ordered by group then action order then key.

    Actions carrying a group the help layout does not know land in ``custom``.
    Empty groups are omitted.
    """

    known = {key for key, _ in HELP_GROUPS}
    buckets: Dict[str, List[HelpEntry]] = {}
    for binding in registry.iter_bindings():
        action = registry.get_action(binding.action_id)
        group = action.group if action.group in known else CUSTOM_GROUP
        order = action.order if group != CUSTOM_GROUP else 999
        description = binding.description or action.description or action.id
        buckets.setdefault(group, []).append(HelpEntry(binding.key, description, order))

    grouped: List[Tuple[str, List[HelpEntry]]] = []
    for key, title in HELP_GROUPS:
        entries = buckets.get(key)
        if not entries:
            continue
        entries.sort(key=lambda entry: (entry.order, entry.key))
        grouped.append((title, entries))
    return grouped


def render_help(registry: KeymapRegistry, *, width: int = 10) -> str:
    lines: List[str] = [""]
    for title, entries in group_bindings(registry):
        lines.append(f"  {title}")
        lines.extend(_format_entries(entries, width))
        lines.append("")
    return "\n".join(lines)


def _format_entries(entries: Sequence[HelpEntry], width: int) -> List[str]:
    return [f"    {key_label(entry.key):<{width}}  {entry.description}" for entry in entries]


__all__ = ["HELP_GROUPS", "HelpEntry", "group_bindings", "key_label", "render_help"]
