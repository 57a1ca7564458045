"""Bookmark and push flows."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Sequence

from .base import cancelled, executed, failed, flow, noop
from .prompts import (
    FlowOutcome,
    Option,
    fits_option_keys,
    ids_preview,
    keyed_options,
    short_id,
)

if TYPE_CHECKING:
    from jujutsu_engine.session.state import Session

CREATE_NEW = object()

_MENU_OPTIONS = (
    Option("d", "Delete bookmark", "delete"),
    Option("r", "Rename bookmark", "rename"),
    Option("p", "Pull bookmark from remote", "pull"),
)


async def _ask_name(session: "Session", prompt: str, default: str = "") -> Optional[str]:
    name = await session.prompter.ask(prompt, default)
    if name is None:
        return None
    return name.strip() or None


async def _choose_bookmark(
    session: "Session", prompt: str, names: Sequence[str]
) -> Optional[str]:
    if fits_option_keys(names):
        choice = await session.prompter.choose(prompt, keyed_options(names))
        return None if choice is None else choice.value

    # Too many to key individually: type the name instead.
    name = await _ask_name(session, f"{prompt} ({len(names)} bookmarks) ")
    if name is None:
        return None
    if name not in names:
        session.notify(f"Unknown bookmark {name}", "warning")
        return None
    return name


async def _bookmark_target(
    session: "Session", change_id: str, names: Sequence[str]
) -> Optional[tuple[str, bool]]:
    """Bookmark name to put on ``change_id`` and whether it has to be created."""

    if not fits_option_keys(names):
        # Too many to key individually: a known name moves, anything else is created.
        name = await _ask_name(
            session, f"Bookmark for {short_id(change_id)} ({len(names)} existing): "
        )
        return None if name is None else (name, name not in names)

    options: list[Option[object]] = [Option("c", "Create new bookmark", CREATE_NEW)]
    options.extend(keyed_options(names))
    choice = await session.prompter.choose(f"Set bookmark on {short_id(change_id)}:", options)
    if choice is None:
        return None
    if choice.value is not CREATE_NEW:
        return str(choice.value), False
    name = await _ask_name(session, "New bookmark name: ")
    return None if name is None else (name, True)


@flow("bookmark_change")
async def bookmark_change(session: "Session") -> FlowOutcome:
    change_id = session.change_at_cursor()
    if change_id is None:
        return noop()
    names = await session.jj.bookmark_names()
    if names is None:
        return failed()

    target = await _bookmark_target(session, change_id, names)
    if target is None:
        return cancelled(session, "Bookmark cancelled")
    name, create = target

    if create:
        if await session.jj.bookmark_create(name, change_id) is None:
            return failed()
        session.request_refresh()
        return executed(session, f"Created bookmark {name} at {short_id(change_id)}")

    if await session.jj.bookmark_set(name, change_id) is None:
        return failed()
    session.request_refresh()
    return executed(session, f"Moved bookmark {name} to {short_id(change_id)}")


@flow("bookmark_menu")
async def bookmark_menu(session: "Session") -> FlowOutcome:
    change_id = session.change_at_cursor()
    if change_id is None:
        return noop()
    names = await session.jj.bookmarks_on(change_id)
    if names is None:
        return failed()
    if not names:
        session.notify(f"No bookmarks on change {short_id(change_id)}", "warning")
        return noop("no bookmarks")

    action = await session.prompter.choose(
        f"Bookmarks on {short_id(change_id)}:", list(_MENU_OPTIONS)
    )
    if action is None:
        return cancelled(session, "Bookmark action cancelled")

    if action.value == "delete":
        return await _delete_bookmark(session, names)
    if action.value == "rename":
        return await _rename_bookmark(session, names)
    return await _pull_bookmark(session, names)


async def _delete_bookmark(session: "Session", names: Sequence[str]) -> FlowOutcome:
    name = await _choose_bookmark(session, "Delete which bookmark?", names)
    if name is None:
        return cancelled(session, "Delete cancelled")
    if await session.jj.bookmark_delete(name) is None:
        return failed()
    session.request_refresh()
    return executed(session, f"Deleted bookmark {name}")


async def _rename_bookmark(session: "Session", names: Sequence[str]) -> FlowOutcome:
    old = await _choose_bookmark(session, "Rename which bookmark?", names)
    if old is None:
        return cancelled(session, "Rename cancelled")
    new = await _ask_name(session, f"Rename {old} to: ", old)
    if new is None or new == old:
        return cancelled(session, "Rename cancelled")
    if await session.jj.bookmark_rename(old, new) is None:
        return failed()
    session.request_refresh()
    return executed(session, f"Renamed bookmark {old} to {new}")


async def _pull_bookmark(session: "Session", names: Sequence[str]) -> FlowOutcome:
    name = await _choose_bookmark(session, "Pull which bookmark?", names)
    if name is None:
        return cancelled(session, "Pull cancelled")
    remote = session.config.remote
    if await session.jj.git_fetch(name, remote) is None:
        return failed()
    if await session.jj.bookmark_set(name, f"{name}@{remote}") is None:
        return failed()
    session.request_refresh()
    return executed(session, f"Pulled {name} from {remote}")


async def _push(session: "Session", *, allow_new: bool) -> FlowOutcome:
    change_ids = session.targets()
    if not change_ids:
        return noop()
    if await session.jj.git_push(change_ids, allow_new=allow_new) is None:
        return failed()
    session.consumed()
    return executed(session, f"Pushed bookmarks on {ids_preview(change_ids)}")


@flow("push_bookmarks")
async def push_bookmarks(session: "Session") -> FlowOutcome:
    return await _push(session, allow_new=False)


@flow("push_bookmarks_and_create")
async def push_bookmarks_and_create(session: "Session") -> FlowOutcome:
    return await _push(session, allow_new=True)


__all__ = [
    "CREATE_NEW",
    "bookmark_change",
    "bookmark_menu",
    "push_bookmarks",
    "push_bookmarks_and_create",
]
