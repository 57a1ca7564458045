"""Typed wrappers around the ``jj`` subcommands the engine issues."""

from __future__ import annotations

from typing import List, Optional, Sequence

from .models import Change, CommandResult, RebaseDestinationType, RebaseSourceType
from .parser import (
    CHANGE_TEMPLATE,
    CHANGE_TEMPLATE_WITH_COMMIT,
    ensure_count,
    parse_changes,
)
from .runner import CommandRunner

LOCAL_BOOKMARKS_TEMPLATE = 'if(!remote, name ++ "\\n")'
CHANGE_BOOKMARKS_TEMPLATE = 'local_bookmarks.map(|b| b.name()).join("\\n") ++ "\\n"'


def make_revset(change_ids: Sequence[str]) -> str:
    """Join ids with the revset union operator."""

    return " | ".join(change_ids)


def parent_of(change_id: str) -> str:
    return f"{change_id}-"


def build_rebase_args(
    source_ids: Sequence[str],
    source_type: RebaseSourceType,
    dest_id: str,
    dest_type: RebaseDestinationType,
) -> List[str]:
    args = ["rebase"]
    for change_id in source_ids:
        args.extend((source_type.flag, change_id))
    args.extend((dest_type.flag, dest_id))
    return args


def build_squash_args(source_ids: Sequence[str], target_id: str, message: str) -> List[str]:
    return [
        "squash",
        "--from",
        make_revset(source_ids),
        "--into",
        target_id,
        "-m",
        message,
    ]


def build_push_args(change_ids: Sequence[str], *, allow_new: bool = False) -> List[str]:
    args = ["git", "push", "-r", make_revset(change_ids)]
    if allow_new:
        args.append("--allow-new")
    return args


def _lines(output: str) -> List[str]:
    names = [line.strip() for line in output.splitlines()]
    return list(dict.fromkeys(name for name in names if name))


class Jujutsu:
    """Issues jj commands through a ``CommandRunner``.

    Mutating helpers return the ``CommandResult`` on success and ``None`` after
    the runner has reported a failure.
    """

    def __init__(self, runner: CommandRunner) -> None:
        self.runner = runner

    async def get_changes(
        self, revset: str, *, with_commit_id: bool = False
    ) -> Optional[List[Change]]:
        template = CHANGE_TEMPLATE_WITH_COMMIT if with_commit_id else CHANGE_TEMPLATE
        result = await self.runner.call(
            ["log", "--no-graph", "-r", revset, "-T", template],
            failure="Failed to get changes",
        )
        if result is None:
            return None
        return parse_changes(result.stdout, with_commit_id=with_commit_id)

    async def get_changes_by_ids(
        self, change_ids: Sequence[str], *, with_commit_id: bool = False
    ) -> Optional[List[Change]]:
        """Fetch one record per id; raises ``ChangeCountMismatchError`` otherwise."""

        changes = await self.get_changes(
            make_revset(change_ids), with_commit_id=with_commit_id
        )
        if changes is None:
            return None
        return ensure_count(change_ids, changes)

    async def new_change(self, change_ids: Sequence[str]) -> Optional[CommandResult]:
        return await self.runner.call(["new", *change_ids], failure="New change failed")

    async def abandon(self, change_ids: Sequence[str]) -> Optional[CommandResult]:
        return await self.runner.call(["abandon", *change_ids], failure="Abandon failed")

    async def edit(self, change_id: str) -> Optional[CommandResult]:
        return await self.runner.call(["edit", change_id], failure="Edit failed")

    async def describe(self, change_id: str, message: str) -> Optional[CommandResult]:
        return await self.runner.call(
            ["describe", "-r", change_id, "-m", message], failure="Describe failed"
        )

    async def undo(self) -> Optional[CommandResult]:
        return await self.runner.call(["undo"], failure="Undo failed")

    async def rebase(
        self,
        source_ids: Sequence[str],
        source_type: RebaseSourceType,
        dest_id: str,
        dest_type: RebaseDestinationType,
    ) -> Optional[CommandResult]:
        return await self.runner.call(
            build_rebase_args(source_ids, source_type, dest_id, dest_type),
            failure="Rebase failed",
        )

    async def squash(
        self, source_ids: Sequence[str], target_id: str, message: str
    ) -> Optional[CommandResult]:
        return await self.runner.call(
            build_squash_args(source_ids, target_id, message), failure="Squash failed"
        )

    async def bookmark_names(self) -> Optional[List[str]]:
        result = await self.runner.call(
            ["bookmark", "list", "-T", LOCAL_BOOKMARKS_TEMPLATE],
            failure="Failed to list bookmarks",
        )
        return None if result is None else _lines(result.stdout)

    async def bookmarks_on(self, change_id: str) -> Optional[List[str]]:
        result = await self.runner.call(
            ["log", "--no-graph", "-r", change_id, "-T", CHANGE_BOOKMARKS_TEMPLATE],
            failure="Failed to get bookmarks",
        )
        return None if result is None else _lines(result.stdout)

    async def bookmark_create(self, name: str, change_id: str) -> Optional[CommandResult]:
        return await self.runner.call(
            ["bookmark", "create", name, "-r", change_id],
            failure="Bookmark create failed",
        )

    async def bookmark_set(self, name: str, revision: str) -> Optional[CommandResult]:
        # Setting a bookmark "here" may move it sideways or backwards.
        return await self.runner.call(
            ["bookmark", "set", name, "-r", revision, "--allow-backwards"],
            failure="Bookmark set failed",
        )

    async def bookmark_delete(self, name: str) -> Optional[CommandResult]:
        return await self.runner.call(
            ["bookmark", "delete", name], failure="Bookmark delete failed"
        )

    async def bookmark_rename(self, old: str, new: str) -> Optional[CommandResult]:
        return await self.runner.call(
            ["bookmark", "rename", old, new], failure="Bookmark rename failed"
        )

    async def git_fetch(self, bookmark: str, remote: str) -> Optional[CommandResult]:
        return await self.runner.call(
            ["git", "fetch", "--remote", remote, "-b", bookmark], failure="Fetch failed"
        )

    async def git_push(
        self, change_ids: Sequence[str], *, allow_new: bool = False
    ) -> Optional[CommandResult]:
        return await self.runner.call(
            build_push_args(change_ids, allow_new=allow_new), failure="Push failed"
        )

    async def log(self, revset: str | None = None) -> Optional[CommandResult]:
        """Rendered, colored log output for the log view."""

        args = ["log", "--color=always"]
        if revset:
            args.extend(("-r", revset))
        return await self.runner.call(args, failure="Failed to load log")

    async def run_args(self, args: Sequence[str]) -> Optional[CommandResult]:
        return await self.runner.call(list(args), failure="jj " + " ".join(args))


__all__ = [
    "Jujutsu",
    "make_revset",
    "parent_of",
    "build_rebase_args",
    "build_squash_args",
    "build_push_args",
]
