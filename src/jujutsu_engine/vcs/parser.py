"""Parsers for ``jj log`` output.

Two paths exist. The structured path reads output rendered with
``CHANGE_TEMPLATE`` and is used for every query the engine issues itself.
The heuristic path pulls a change id out of a rendered, colored log line and
is only used for "the change under the cursor" in the log view.
"""

from __future__ import annotations

import re
from typing import Collection, Iterable, List, Optional, Sequence

from .models import Change

FIELD_SEPARATOR = ";"
RECORD_TERMINATOR = "\n---END-CHANGE---\n"
MIN_CHANGE_ID_LENGTH = 4

CHANGE_TEMPLATE = (
    'separate(";", change_id.short(), coalesce(description, " "))'
    ' ++ "\\n---END-CHANGE---\\n"'
)
CHANGE_TEMPLATE_WITH_COMMIT = (
    'separate(";", change_id.short(), commit_id, coalesce(description, " "))'
    ' ++ "\\n---END-CHANGE---\\n"'
)

_ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")
_AUTHOR_LAYOUT_RE = re.compile(r"^[^A-Za-z0-9]*([A-Za-z0-9]+)\s+\S+@")
_TRAILING_HASH_RE = re.compile(r"([0-9a-fA-F]{8})\s*$")
_NODE_GLYPH_RE = re.compile(r"[│├└─╮╯]*\s*[◉○◆@×]+\s+([A-Za-z0-9]+)")


class ChangeCountMismatchError(RuntimeError):
    """Raised when a query returns a different number of changes than requested."""

    def __init__(self, requested: Sequence[str], received: Sequence[Change]):
        super().__init__("Could not get change information")
        self.requested = tuple(requested)
        self.received = tuple(received)


def parse_changes(output: str, *, with_commit_id: bool = False) -> List[Change]:
    """Parse structured log output into ``Change`` records.

    Only the leading id fields are separator sensitive; the description takes
    the remainder of the record verbatim, newlines and separators included.
    """

    field_count = 3 if with_commit_id else 2
    changes: List[Change] = []
    for record in output.split(RECORD_TERMINATOR):
        if not record or not record.strip():
            continue
        fields = record.split(FIELD_SEPARATOR, field_count - 1)
        if len(fields) != field_count:
            continue
        change_id = fields[0].strip()
        if not change_id:
            continue
        if with_commit_id:
            changes.append(
                Change(
                    change_id=change_id,
                    commit_id=fields[1].strip() or None,
                    description=fields[2],
                )
            )
        else:
            changes.append(Change(change_id=change_id, description=fields[1]))
    return changes


def ensure_count(requested: Sequence[str], changes: Sequence[Change]) -> List[Change]:
    if len(changes) != len(requested):
        raise ChangeCountMismatchError(requested, changes)
    return list(changes)


def strip_ansi(text: str) -> str:
    return _ANSI_RE.sub("", text)


def extract_change_id(line: str) -> Optional[str]:
    """Best-effort change id for a rendered ``jj log`` line.

    The typical layout is ``◉  mrtwmypl user@host 2026-01-03 22:53:01 02a96588``.
    """

    clean = strip_ansi(line)
    for pattern, anchored in (
        (_AUTHOR_LAYOUT_RE, True),
        (_TRAILING_HASH_RE, False),
        (_NODE_GLYPH_RE, False),
    ):
        match = pattern.match(clean) if anchored else pattern.search(clean)
        if match:
            return match.group(1)
    return None


def change_id_at(line: str) -> Optional[str]:
    """Like ``extract_change_id`` but rejects fragments too short to trust."""

    change_id = extract_change_id(line)
    if change_id and len(change_id) >= MIN_CHANGE_ID_LENGTH:
        return change_id
    return None


def find_change_line(lines: Sequence[str], start: int, step: int) -> Optional[int]:
    """Index of the next line (moving by ``step``) that carries a change id."""

    index = start + step
    while 0 <= index < len(lines):
        if change_id_at(lines[index]):
            return index
        index += step
    return None


def selected_lines(lines: Iterable[str], selection: Collection[str]) -> List[int]:
    if not selection:
        return []
    return [
        index
        for index, line in enumerate(lines)
        if (change_id := change_id_at(line)) is not None and change_id in selection
    ]


__all__ = [
    "CHANGE_TEMPLATE",
    "CHANGE_TEMPLATE_WITH_COMMIT",
    "RECORD_TERMINATOR",
    "MIN_CHANGE_ID_LENGTH",
    "ChangeCountMismatchError",
    "parse_changes",
    "ensure_count",
    "strip_ansi",
    "extract_change_id",
    "change_id_at",
    "find_change_line",
    "selected_lines",
]
