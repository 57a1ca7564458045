"""Squash flows: selection or cursor into a target, with a combined message."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Sequence

from jujutsu_engine.vcs import Change, parent_of

from .base import cancelled, executed, failed, fetch_changes, flow, noop
from .prompts import HELP_PREFIX, FlowOutcome, plural, strip_help_lines

if TYPE_CHECKING:
    from jujutsu_engine.session.state import Session


def compose_message(changes: Sequence[Change]) -> str:
    """Non-blank descriptions, each under a marker naming its change."""

    blocks = [
        f"{HELP_PREFIX} {change.change_id}\n{change.description}"
        for change in changes
        if not change.is_blank
    ]
    return "\n".join(blocks)


def squash_header(source_ids: Sequence[str], target_id: str) -> str:
    return (
        f"{HELP_PREFIX} Squashing {plural(len(source_ids))} into {target_id}. "
        "Enter a description for the combined commit."
    )


async def describe_and_squash(
    session: "Session", source_ids: List[str], target_id: str
) -> FlowOutcome:
    changes = await fetch_changes(session, [*source_ids, target_id])
    if changes is None:
        return failed()

    draft = "\n".join((squash_header(source_ids, target_id), compose_message(changes)))
    text = await session.prompter.capture(draft, title=f"Squash into {target_id}")
    if text is None:
        return cancelled(session, "Squash cancelled")

    if await session.jj.squash(source_ids, target_id, strip_help_lines(text)) is None:
        return failed()
    session.consumed()
    return executed(session, f"Squashed {plural(len(source_ids))} into {target_id}")


@flow("squash_change")
async def squash_change(session: "Session") -> FlowOutcome:
    cursor_id = session.change_at_cursor()
    if cursor_id is None:
        return noop()

    if not session.selection:
        return await describe_and_squash(session, [cursor_id], parent_of(cursor_id))

    source_ids = [change_id for change_id in session.selection if change_id != cursor_id]
    if not source_ids:
        session.notify("Nothing to squash: only the target change is selected", "warning")
        return noop()
    return await describe_and_squash(session, source_ids, cursor_id)


@flow("squash_to_target")
async def squash_to_target(session: "Session") -> FlowOutcome:
    source_id = session.change_at_cursor()
    if source_id is None:
        return noop()
    target_id = await session.prompter.pick_change("Select target to squash into")
    if target_id is None:
        return cancelled(session, "Squash cancelled")
    return await describe_and_squash(session, [source_id], target_id)


__all__ = [
    "compose_message",
    "squash_header",
    "describe_and_squash",
    "squash_change",
    "squash_to_target",
]
