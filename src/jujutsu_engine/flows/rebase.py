"""Rebase flow.

With an active selection the selected changes are rebased as revisions and
the cursor change is the destination::

    start -> choose destination type -> confirm -> run

Without a selection the cursor change is the lone source::

    start -> choose source type -> pick destination in the log
          -> choose destination type -> confirm -> run

Cancelling at any step ends the flow without running jj and without
touching the selection.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional

from jujutsu_engine.vcs import (
    REBASE_DESTINATION_TYPES,
    REBASE_SOURCE_TYPES,
    REVISION_SOURCE,
    RebaseDestinationType,
    RebaseSourceType,
    build_rebase_args,
)

from .base import cancelled, executed, failed, flow, noop
from .prompts import FlowOutcome, Option, ids_preview, plural, short_id

if TYPE_CHECKING:
    from jujutsu_engine.session.state import Session


@dataclass(slots=True)
class RebasePlan:
    source_ids: List[str]
    source_type: RebaseSourceType
    dest_id: str
    dest_type: RebaseDestinationType

    def args(self) -> List[str]:
        return build_rebase_args(
            self.source_ids, self.source_type, self.dest_id, self.dest_type
        )

    def summary(self) -> str:
        count = len(self.source_ids)
        return (
            f"Rebase {plural(count)} [{ids_preview(self.source_ids)}] "
            f"({self.source_type.label}) "
            f"{self.dest_type.preposition} {short_id(self.dest_id)}?"
        )


async def choose_source_type(session: "Session") -> Optional[RebaseSourceType]:
    options = [Option(t.key, t.label, t) for t in REBASE_SOURCE_TYPES]
    choice = await session.prompter.choose("Rebase source type:", options)
    return None if choice is None else choice.value


async def choose_destination_type(
    session: "Session",
) -> Optional[RebaseDestinationType]:
    options = [Option(t.key, t.label, t) for t in REBASE_DESTINATION_TYPES]
    choice = await session.prompter.choose("Rebase destination type:", options)
    return None if choice is None else choice.value


@flow("rebase_change")
async def rebase_change(session: "Session") -> FlowOutcome:
    if session.selection:
        source_ids = session.selection.list()
        source_type = REVISION_SOURCE
        dest_id = session.change_at_cursor()
        if dest_id is None:
            return noop()
    else:
        source_id = session.change_at_cursor()
        if source_id is None:
            return noop()
        source_ids = [source_id]
        chosen = await choose_source_type(session)
        if chosen is None:
            return cancelled(session, "Rebase cancelled")
        source_type = chosen
        dest_id = await session.prompter.pick_change("Select change to rebase onto")
        if dest_id is None:
            return cancelled(session, "Rebase cancelled")

    dest_type = await choose_destination_type(session)
    if dest_type is None:
        return cancelled(session, "Rebase cancelled")

    plan = RebasePlan(source_ids, source_type, dest_id, dest_type)
    if not await session.prompter.confirm(plan.summary()):
        return cancelled(session, "Rebase cancelled")

    if await session.jj.rebase(source_ids, source_type, dest_id, dest_type) is None:
        return failed()
    session.consumed()
    return executed(
        session,
        f"Rebased {plural(len(source_ids))} {dest_type.preposition} {short_id(dest_id)}",
    )


__all__ = [
    "RebasePlan",
    "rebase_change",
    "choose_source_type",
    "choose_destination_type",
]
