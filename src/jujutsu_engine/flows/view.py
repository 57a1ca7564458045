"""Log-view flows: navigation, selection, revset, diff preview, help."""

from __future__ import annotations

from typing import TYPE_CHECKING

from jujutsu_engine.vcs import change_id_at, find_change_line

from .base import cancelled, executed, failed, flow, noop
from .prompts import FlowOutcome, plural

if TYPE_CHECKING:
    from jujutsu_engine.session.state import Session


def _jump(session: "Session", step: int) -> FlowOutcome:
    index = find_change_line(session.view.lines(), session.view.cursor_index(), step)
    if index is None:
        return noop()
    session.view.move_cursor(index)
    return FlowOutcome("executed")


@flow("jump_to_next_change")
async def jump_to_next_change(session: "Session") -> FlowOutcome:
    return _jump(session, 1)


@flow("jump_to_prev_change")
async def jump_to_prev_change(session: "Session") -> FlowOutcome:
    return _jump(session, -1)


@flow("toggle_change")
async def toggle_change(session: "Session") -> FlowOutcome:
    change_id = change_id_at(session.cursor_line())
    if change_id is None:
        session.notify("Could not find change ID on current line", "warning")
        return noop()
    session.toggle(change_id)
    count = session.selection.count()
    if count:
        session.notify(f"{plural(count)} selected")
    return FlowOutcome("executed")


@flow("clear_selections")
async def clear_selections(session: "Session") -> FlowOutcome:
    session.clear_selection()
    return executed(session, "Cleared all selections")


@flow("refresh")
async def refresh(session: "Session") -> FlowOutcome:
    session.request_refresh()
    return FlowOutcome("executed")


@flow("set_revset")
async def set_revset(session: "Session") -> FlowOutcome:
    revset = await session.prompter.ask("Revset (empty for default): ", session.revset or "")
    if revset is None:
        return cancelled(session, "Revset unchanged")
    session.revset = revset.strip() or None
    session.request_refresh()
    return FlowOutcome("executed", session.revset)


@flow("open_diff")
async def open_diff(session: "Session") -> FlowOutcome:
    change_id = session.change_at_cursor()
    if change_id is None:
        return noop()
    preset = session.config.diff(warn=lambda message: session.notify(message, "warning"))
    if preset.is_noop:
        return noop("diff preview disabled")
    result = await session.jj.run_args(preset.build(change_id))
    if result is None:
        return failed()
    session.view.show_output(f"Diff {change_id}", result.stdout)
    return FlowOutcome("executed")


@flow("show_help")
async def show_help(session: "Session") -> FlowOutcome:
    # Imported lazily: keymaps.defaults imports this module.
    from jujutsu_engine.keymaps.help import render_help
    from jujutsu_engine.keymaps.registry import KeymapRegistry

    registry = session.extras.get("keymap_registry")
    if not isinstance(registry, KeymapRegistry):
        raise RuntimeError("Session.extras missing 'keymap_registry'")
    session.view.show_help(render_help(registry))
    return FlowOutcome("executed")


@flow("quit")
async def quit_view(session: "Session") -> FlowOutcome:
    session.view.close()
    return FlowOutcome("executed")


__all__ = [
    "jump_to_next_change",
    "jump_to_prev_change",
    "toggle_change",
    "clear_selections",
    "refresh",
    "set_revset",
    "open_diff",
    "show_help",
    "quit_view",
]
