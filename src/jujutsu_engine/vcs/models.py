"""Dataclasses describing jj command results, changes and rebase options."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Exit status and captured output of one ``jj`` invocation."""

    args: Tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


@dataclass(frozen=True, slots=True)
class Change:
    """Read-only snapshot of a change as reported by ``jj log``.

    Snapshots go stale after any mutating command; callers re-query instead
    of reusing them.
    """

    change_id: str
    description: str = ""
    commit_id: Optional[str] = None

    @property
    def is_blank(self) -> bool:
        return not self.description.strip()

    @property
    def message(self) -> str:
        """Description with the blank placeholder mapped to ``""``."""

        return "" if self.is_blank else self.description


@dataclass(frozen=True, slots=True)
class RebaseSourceType:
    key: str
    label: str
    flag: str


@dataclass(frozen=True, slots=True)
class RebaseDestinationType:
    key: str
    label: str
    flag: str
    preposition: str


REBASE_SOURCE_TYPES: Tuple[RebaseSourceType, ...] = (
    RebaseSourceType("r", "Revision (single change)", "-r"),
    RebaseSourceType("s", "Source (subtree - change + descendants)", "-s"),
    RebaseSourceType("b", "Branch (all revisions in branch)", "-b"),
)

REBASE_DESTINATION_TYPES: Tuple[RebaseDestinationType, ...] = (
    RebaseDestinationType("d", "Destination (onto - default)", "-d", "onto"),
    RebaseDestinationType("a", "After destination", "-A", "after"),
    RebaseDestinationType("b", "Before destination", "-B", "before"),
)

REVISION_SOURCE = REBASE_SOURCE_TYPES[0]


__all__ = [
    "CommandResult",
    "Change",
    "RebaseSourceType",
    "RebaseDestinationType",
    "REBASE_SOURCE_TYPES",
    "REBASE_DESTINATION_TYPES",
    "REVISION_SOURCE",
]
