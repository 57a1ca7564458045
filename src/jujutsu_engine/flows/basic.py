"""Single-command flows: new, describe, abandon, edit, undo."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .base import cancelled, executed, failed, fetch_changes, flow, noop
from .prompts import FlowOutcome, ids_preview, plural, short_id, strip_help_lines

if TYPE_CHECKING:
    from jujutsu_engine.session.state import Session


@flow("new_change")
async def new_change(session: "Session") -> FlowOutcome:
    parents = session.targets()
    if not parents:
        return noop()
    if await session.jj.new_change(parents) is None:
        return failed()
    session.consumed()
    return executed(session, f"Created new change after {ids_preview(parents)}")


@flow("describe")
async def describe(session: "Session") -> FlowOutcome:
    change_id = session.change_at_cursor()
    if change_id is None:
        return noop()
    changes = await fetch_changes(session, [change_id])
    if changes is None:
        return failed()

    text = await session.prompter.capture(
        changes[0].message, title=f"Describe {short_id(change_id)}"
    )
    if text is None:
        return cancelled(session, "Aborted description edit")

    if await session.jj.describe(change_id, strip_help_lines(text)) is None:
        return failed()
    session.request_refresh()
    return executed(session, f"Description updated for {change_id}")


@flow("abandon_changes")
async def abandon_changes(session: "Session") -> FlowOutcome:
    change_ids = session.targets()
    if not change_ids:
        return noop()
    if len(change_ids) == 1:
        prompt = f"Abandon change {short_id(change_ids[0])}?"
    else:
        prompt = f"Abandon {plural(len(change_ids))} [{ids_preview(change_ids)}]?"
    if not await session.prompter.confirm(prompt):
        return cancelled(session, "Abandon cancelled")

    if await session.jj.abandon(change_ids) is None:
        return failed()
    session.consumed()
    return executed(session, f"Abandoned {plural(len(change_ids))}")


@flow("edit_change")
async def edit_change(session: "Session") -> FlowOutcome:
    change_id = session.change_at_cursor()
    if change_id is None:
        return noop()
    if await session.jj.edit(change_id) is None:
        return failed()
    session.request_refresh()
    return executed(session, f"Checked out change {change_id}")


@flow("undo")
async def undo(session: "Session") -> FlowOutcome:
    if not await session.prompter.confirm("Undo the last jj operation?"):
        return cancelled(session, "Undo cancelled")
    if await session.jj.undo() is None:
        return failed()
    session.request_refresh()
    return executed(session, "Undid last operation")


__all__ = ["new_change", "describe", "abandon_changes", "edit_change", "undo"]
