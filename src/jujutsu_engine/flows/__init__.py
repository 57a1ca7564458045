"""Interactive flows driving jj operations through the host prompter."""

from .basic import abandon_changes, describe, edit_change, new_change, undo
from .bookmarks import (
    bookmark_change,
    bookmark_menu,
    push_bookmarks,
    push_bookmarks_and_create,
)
from .prompts import FlowOutcome, LogView, Option, Prompter
from .rebase import RebasePlan, rebase_change
from .squash import squash_change, squash_to_target
from .view import (
    clear_selections,
    jump_to_next_change,
    jump_to_prev_change,
    open_diff,
    quit_view,
    refresh,
    set_revset,
    show_help,
    toggle_change,
)

__all__ = [
    "FlowOutcome",
    "LogView",
    "Option",
    "Prompter",
    "RebasePlan",
    "new_change",
    "describe",
    "abandon_changes",
    "edit_change",
    "undo",
    "rebase_change",
    "squash_change",
    "squash_to_target",
    "bookmark_change",
    "bookmark_menu",
    "push_bookmarks",
    "push_bookmarks_and_create",
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
