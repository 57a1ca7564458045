"""jj command runner, typed subcommand wrappers and log parsers."""

from .jujutsu import (
    Jujutsu,
    build_push_args,
    build_rebase_args,
    build_squash_args,
    make_revset,
    parent_of,
)
from .models import (
    REBASE_DESTINATION_TYPES,
    REBASE_SOURCE_TYPES,
    REVISION_SOURCE,
    Change,
    CommandResult,
    RebaseDestinationType,
    RebaseSourceType,
)
from .parser import (
    ChangeCountMismatchError,
    change_id_at,
    extract_change_id,
    find_change_line,
    parse_changes,
    selected_lines,
    strip_ansi,
)
from .runner import CommandRunner

__all__ = [
    "Jujutsu",
    "CommandRunner",
    "CommandResult",
    "Change",
    "RebaseSourceType",
    "RebaseDestinationType",
    "REBASE_SOURCE_TYPES",
    "REBASE_DESTINATION_TYPES",
    "REVISION_SOURCE",
    "ChangeCountMismatchError",
    "make_revset",
    "parent_of",
    "build_rebase_args",
    "build_squash_args",
    "build_push_args",
    "parse_changes",
    "strip_ansi",
    "extract_change_id",
    "change_id_at",
    "find_change_line",
    "selected_lines",
]
