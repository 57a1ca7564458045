"""Shared plumbing for flow coroutines."""

from __future__ import annotations

import functools
from typing import TYPE_CHECKING, Awaitable, Callable, List, Optional, Sequence

from jujutsu_engine.runtime import telemetry
from jujutsu_engine.vcs import Change, ChangeCountMismatchError

from .prompts import FlowOutcome

if TYPE_CHECKING:
    from jujutsu_engine.session.state import Session

FlowFn = Callable[["Session"], Awaitable[FlowOutcome]]


def flow(name: str) -> Callable[[FlowFn], FlowFn]:
    """Wrap a flow coroutine in a telemetry span and record its outcome."""

    def decorate(func: FlowFn) -> FlowFn:
        @functools.wraps(func)
        async def wrapper(session: "Session") -> FlowOutcome:
            with telemetry.span(
                f"flow::{name}",
                logger_name="jujutsu_engine.flows",
                component="flows",
                metadata={"selected": session.selection.count()},
            ) as handle:
                outcome = await func(session)
                handle.add_metadata("status", outcome.status)
                if outcome.status == "aborted":
                    handle.cancel(outcome.message)
            telemetry.record_event(
                f"flow.{name}",
                level="debug",
                data={"status": outcome.status, "message": outcome.message or ""},
                logger_name="jujutsu_engine.flows",
            )
            return outcome

        wrapper.flow_name = name  # type: ignore[attr-defined]
        return wrapper

    return decorate


def cancelled(session: "Session", message: str) -> FlowOutcome:
    session.notify(message, "info")
    return FlowOutcome("aborted", message)


def failed(message: str | None = None) -> FlowOutcome:
    return FlowOutcome("failed", message)


def noop(message: str | None = None) -> FlowOutcome:
    return FlowOutcome("noop", message)


def executed(session: "Session", message: str) -> FlowOutcome:
    session.notify(message, "info")
    return FlowOutcome("executed", message)


async def fetch_changes(
    session: "Session", change_ids: Sequence[str]
) -> Optional[List[Change]]:
    """Fetch exactly one record per id, reporting mismatches as errors."""

    try:
        return await session.jj.get_changes_by_ids(change_ids)
    except ChangeCountMismatchError as exc:
        telemetry.record_event(
            "flows.change_count_mismatch",
            level="error",
            data={"requested": len(exc.requested), "received": len(exc.received)},
        )
        session.notify(str(exc), "error")
        return None


__all__ = [
    "flow",
    "FlowFn",
    "cancelled",
    "failed",
    "noop",
    "executed",
    "fetch_changes",
]
