"""Built-in actions, the default key table and user keymap overlays."""

from __future__ import annotations

import importlib
import inspect
import shlex
from typing import TYPE_CHECKING, Any, Callable, Mapping, Sequence

from jujutsu_engine import flows
from jujutsu_engine.flows.prompts import FlowOutcome
from jujutsu_engine.runtime import telemetry

from .models import CUSTOM_GROUP, ActionRef, Binding, normalize_key
from .registry import KeymapRegistry

if TYPE_CHECKING:
    from jujutsu_engine.session.state import Session


def _action(
    action_id: str,
    handler: Callable[..., object],
    description: str,
    group: str,
    order: int,
) -> ActionRef:
    return ActionRef(
        id=action_id, handler=handler, description=description, group=group, order=order
    )


DEFAULT_ACTIONS: tuple[ActionRef, ...] = (
    _action("show_help", flows.show_help, "Show help", "help", 1),
    _action("jump_to_next_change", flows.jump_to_next_change, "Next change", "navigation", 1),
    _action("jump_to_prev_change", flows.jump_to_prev_change, "Previous change", "navigation", 2),
    _action("open_diff", flows.open_diff, "Show diff for change", "navigation", 3),
    _action("quit", flows.quit_view, "Close log", "log", 1),
    _action("refresh", flows.refresh, "Refresh log", "log", 2),
    _action("set_revset", flows.set_revset, "Set log revset", "log", 3),
    _action("describe", flows.describe, "Describe change", "basic_operations", 1),
    _action("new_change", flows.new_change, "New change after this", "basic_operations", 2),
    _action("abandon_changes", flows.abandon_changes, "Abandon change(s)", "basic_operations", 3),
    _action("edit_change", flows.edit_change, "Edit (check out) change", "basic_operations", 4),
    _action("undo", flows.undo, "Undo last operation", "basic_operations", 5),
    _action("rebase_change", flows.rebase_change, "Rebase change(s)", "advanced_operations", 1),
    _action("squash_change", flows.squash_change, "Squash change(s)", "advanced_operations", 2),
    _action("squash_to_target", flows.squash_to_target, "Squash into target", "advanced_operations", 3),
    _action("bookmark_change", flows.bookmark_change, "Set or create bookmark", "bookmarks", 1),
    _action("bookmark_menu", flows.bookmark_menu, "Bookmark actions", "bookmarks", 2),
    _action("push_bookmarks", flows.push_bookmarks, "Push bookmarks", "bookmarks", 3),
    _action(
        "push_bookmarks_and_create",
        flows.push_bookmarks_and_create,
        "Push bookmarks (allow new)",
        "bookmarks",
        4,
    ),
    _action("toggle_change", flows.toggle_change, "Toggle selection", "multi_selection", 1),
    _action("clear_selections", flows.clear_selections, "Clear selections", "multi_selection", 2),
)

DEFAULT_KEYS: Mapping[str, str] = {
    "?": "show_help",
    "j": "jump_to_next_change",
    "k": "jump_to_prev_change",
    "enter": "open_diff",
    "q": "quit",
    "R": "refresh",
    "L": "set_revset",
    "d": "describe",
    "n": "new_change",
    "a": "abandon_changes",
    "e": "edit_change",
    "u": "undo",
    "r": "rebase_change",
    "s": "squash_change",
    "S": "squash_to_target",
    "b": "bookmark_change",
    "B": "bookmark_menu",
    "p": "push_bookmarks",
    "P": "push_bookmarks_and_create",
    "m": "toggle_change",
    "c": "clear_selections",
}

DEFAULT_BINDINGS: tuple[Binding, ...] = tuple(
    Binding(key=key, action_id=action_id, source="default")
    for key, action_id in DEFAULT_KEYS.items()
)


def load_default_keymaps(
    registry: KeymapRegistry,
    *,
    replace: bool = False,
    include_actions: Sequence[str] | None = None,
    exclude_actions: Sequence[str] | None = None,
) -> None:
    """Register built-in actions and their default keys."""

    filters = _build_filters(include_actions, exclude_actions)

    for action in DEFAULT_ACTIONS:
        if _selected(action.id, filters):
            registry.register_action(action, replace=replace)

    for binding in DEFAULT_BINDINGS:
        if _selected(binding.action_id, filters):
            registry.register_binding(binding, replace=replace)


def apply_user_keymap(registry: KeymapRegistry, keymap: Mapping[str, Any]) -> None:
    """Overlay user bindings on top of the defaults.

    Each value is a built-in action name, a callable, ``false`` (unbind) or a
    table ``{cmd = ..., desc = ...}``. Names that are not built-in actions are
    treated as user procedures: ``"pkg.module:function"`` is imported on first
    use and anything else runs as a jj argument string.
    """

    for raw_key, value in keymap.items():
        key = normalize_key(str(raw_key))
        if value is False or value is None:
            registry.unregister_binding(key)
            continue

        cmd, desc = value, ""
        if isinstance(value, Mapping):
            cmd = value.get("cmd")
            desc = str(value.get("desc", ""))

        if isinstance(cmd, str) and registry.has_action(cmd):
            action_id = cmd
        else:
            action = passthrough_action(key, cmd, desc)
            registry.register_action(action, replace=True)
            action_id = action.id

        registry.register_binding(
            Binding(key=key, action_id=action_id, description=desc, source="user"),
            replace=True,
        )
        telemetry.record_event(
            "keymaps.user_binding",
            level="debug",
            data={"key": key, "action_id": action_id},
        )


def passthrough_action(key: str, cmd: Any, description: str = "") -> ActionRef:
    if callable(cmd):
        handler = cmd
        label = getattr(cmd, "__name__", "custom")
    else:
        text = str(cmd)
        handler = _procedure(text) if ":" in text else _jj_command(text)
        label = text
    return ActionRef(
        id=f"custom:{key}",
        handler=handler,
        description=description or label,
        group=CUSTOM_GROUP,
    )


async def invoke(action: ActionRef, session: "Session") -> object:
    """Call an action handler, awaiting it when it is a coroutine function."""

    result = action(session)
    if inspect.isawaitable(result):
        result = await result
    return result


def _procedure(path: str) -> Callable[["Session"], Any]:
    module_name, _, attr = path.partition(":")

    async def run(session: "Session") -> object:
        try:
            target = getattr(importlib.import_module(module_name), attr)
        except (ImportError, AttributeError) as exc:
            session.notify(f"Cannot load {path}: {exc}", "error")
            return FlowOutcome("failed", str(exc))
        result = target(session)
        if inspect.isawaitable(result):
            result = await result
        return result

    return run


def _jj_command(command: str) -> Callable[["Session"], Any]:
    args = shlex.split(command)

    async def run(session: "Session") -> FlowOutcome:
        result = await session.jj.run_args(args)
        if result is None:
            return FlowOutcome("failed")
        if result.stdout.strip():
            session.view.show_output(f"jj {command}", result.stdout)
        session.request_refresh()
        return FlowOutcome("executed", f"jj {command}")

    return run


def _build_filters(
    include: Sequence[str] | None, exclude: Sequence[str] | None
) -> tuple[set[str] | None, set[str]]:
    include_set = set(include) if include else None
    exclude_set = set(exclude or ())
    return include_set, exclude_set


def _selected(item_id: str, filters: tuple[set[str] | None, set[str]]) -> bool:
    include, exclude = filters
    if include is not None and item_id not in include:
        return False
    return item_id not in exclude


def build_registry(keymap: Mapping[str, Any] | None = None) -> KeymapRegistry:
    registry = KeymapRegistry(logger_name="jujutsu_engine.keymaps")
    load_default_keymaps(registry)
    if keymap:
        apply_user_keymap(registry, keymap)
    return registry


__all__ = [
    "DEFAULT_ACTIONS",
    "DEFAULT_BINDINGS",
    "DEFAULT_KEYS",
    "load_default_keymaps",
    "apply_user_keymap",
    "passthrough_action",
    "build_registry",
    "invoke",
]
