"""Protocols the flows use to talk to the host UI, plus the flow result type."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Literal, Optional, Protocol, Sequence, TypeVar

T = TypeVar("T")

FlowStatus = Literal["executed", "aborted", "failed", "noop"]

HELP_PREFIX = "JJ:"


@dataclass(frozen=True, slots=True)
class Option(Generic[T]):
    """Single-key choice shown by ``Prompter.choose``."""

    key: str
    label: str
    value: T


@dataclass(slots=True)
class FlowOutcome:
    """Result returned by every flow coroutine."""

    status: FlowStatus
    message: Optional[str] = None

    @property
    def executed(self) -> bool:
        return self.status == "executed"


class Prompter(Protocol):
    """Dialog facility provided by the host.

    Every method that waits on the user returns ``None`` (or ``False`` for
    ``confirm``) when the user cancels.
    """

    async def choose(
        self, prompt: str, options: Sequence[Option[Any]]
    ) -> Optional[Option[Any]]: ...

    async def confirm(self, prompt: str) -> bool: ...

    async def ask(self, prompt: str, default: str = "") -> Optional[str]: ...

    async def capture(self, content: str, *, title: str = "") -> Optional[str]: ...

    async def pick_change(self, prompt: str) -> Optional[str]: ...

    def notify(self, message: str, level: str = "info") -> None: ...


class LogView(Protocol):
    """The rendered log surface the flows navigate."""

    def lines(self) -> Sequence[str]: ...

    def cursor_index(self) -> int: ...

    def move_cursor(self, index: int) -> None: ...

    def show_help(self, text: str) -> None: ...

    def show_output(self, title: str, text: str) -> None: ...

    def close(self) -> None: ...


# "c", "n", "q" and "y" are left out; dialogs use them for create/no/quit/yes.
_OPTION_KEYS = "123456789abdefghijklmoprstuvwxz"


def fits_option_keys(values: Sequence[str], *, reserved: str = "") -> bool:
    return len(values) <= len(_option_keys(reserved))


def _option_keys(reserved: str) -> list[str]:
    return [key for key in _OPTION_KEYS if key not in reserved]


def keyed_options(values: Sequence[str], *, reserved: str = "") -> list[Option[str]]:
    """Assign single-key shortcuts to ``values`` skipping ``reserved`` keys.

    Raises ``ValueError`` when there are more values than keys; check with
    ``fits_option_keys`` first.
    """

    keys = _option_keys(reserved)
    if len(values) > len(keys):
        raise ValueError(f"{len(values)} options but only {len(keys)} keys")
    return [Option(key=key, label=value, value=value) for key, value in zip(keys, values)]


def strip_help_lines(text: str) -> str:
    """Drop the ``JJ:`` lines a capture buffer was seeded with."""

    kept = [line for line in text.split("\n") if not line.startswith(HELP_PREFIX)]
    return "\n".join(kept)


def plural(count: int, word: str = "change") -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def short_id(change_id: str) -> str:
    return change_id[:8]


def ids_preview(change_ids: Sequence[str]) -> str:
    if len(change_ids) <= 3:
        return ", ".join(short_id(change_id) for change_id in change_ids)
    return f"{short_id(change_ids[0])}, ... ({len(change_ids)} total)"


__all__ = [
    "Option",
    "FlowOutcome",
    "FlowStatus",
    "Prompter",
    "LogView",
    "HELP_PREFIX",
    "fits_option_keys",
    "keyed_options",
    "strip_help_lines",
    "plural",
    "short_id",
    "ids_preview",
]
