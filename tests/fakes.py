"""Test doubles shared by the flow, keymap and adapter tests."""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, List, Optional, Sequence, Tuple

from jujutsu_engine.config import EngineConfig
from jujutsu_engine.flows.prompts import Option
from jujutsu_engine.session import Session
from jujutsu_engine.vcs import CommandResult, CommandRunner, Jujutsu
from jujutsu_engine.vcs.parser import RECORD_TERMINATOR

QUERY_COMMANDS = {("log",), ("bookmark", "list")}


def record(change_id: str, description: str = " ") -> str:
    return f"{change_id};{description}{RECORD_TERMINATOR}"


def log_line(change_id: str, author: str = "dev@example.com") -> str:
    return f"\x1b[1m◉\x1b[0m  \x1b[35m{change_id}\x1b[0m {author} 2026-01-03 22:53:01 02a96588"


class FakeRunner(CommandRunner):
    """Records every argument vector and answers from a scripted table."""

    def __init__(self) -> None:
        super().__init__("jj", notify=self._record_notice)
        self.calls: List[List[str]] = []
        self.notices: List[Tuple[str, str]] = []
        self._responses: List[Tuple[Tuple[str, ...], CommandResult]] = []

    def script(
        self, *prefix: str, stdout: str = "", returncode: int = 0, stderr: str = ""
    ) -> None:
        result = CommandResult(args=prefix, returncode=returncode, stdout=stdout, stderr=stderr)
        self._responses.insert(0, (prefix, result))

    async def run(self, args: Sequence[str]) -> CommandResult:
        argv = list(args)
        self.calls.append(argv)
        for prefix, result in self._responses:
            if tuple(argv[: len(prefix)]) == prefix:
                return replace(result, args=tuple(argv))
        return CommandResult(args=tuple(argv), returncode=0)

    def mutating_calls(self) -> List[List[str]]:
        return [
            call
            for call in self.calls
            if tuple(call[:1]) not in QUERY_COMMANDS and tuple(call[:2]) not in QUERY_COMMANDS
        ]

    def _record_notice(self, message: str, level: str) -> None:
        self.notices.append((level, message))


class FakePrompter:
    """Answers prompts from a queue; ``None`` in the queue means cancel."""

    def __init__(self, *answers: Any) -> None:
        self.answers: List[Any] = list(answers)
        self.prompts: List[Tuple[str, str]] = []
        self.notices: List[Tuple[str, str]] = []
        self.captured: List[str] = []

    def _next(self, kind: str, prompt: str) -> Any:
        self.prompts.append((kind, prompt))
        if not self.answers:
            raise AssertionError(f"unexpected {kind} prompt: {prompt}")
        return self.answers.pop(0)

    async def choose(self, prompt: str, options: Sequence[Option[Any]]) -> Optional[Option[Any]]:
        key = self._next("choose", prompt)
        if key is None:
            return None
        for option in options:
            if option.key == key or option.label == key:
                return option
        raise AssertionError(f"no option {key!r} in {[o.key for o in options]}")

    async def confirm(self, prompt: str) -> bool:
        return bool(self._next("confirm", prompt))

    async def ask(self, prompt: str, default: str = "") -> Optional[str]:
        return self._next("ask", prompt)

    async def capture(self, content: str, *, title: str = "") -> Optional[str]:
        self.captured.append(content)
        answer = self._next("capture", title)
        if answer is None:
            return None
        return content if answer is True else answer

    async def pick_change(self, prompt: str) -> Optional[str]:
        return self._next("pick", prompt)

    def notify(self, message: str, level: str = "info") -> None:
        self.notices.append((level, message))


class FakeView:
    def __init__(self, lines: Sequence[str] = (), cursor: int = 0) -> None:
        self._lines = list(lines)
        self._cursor = cursor
        self.outputs: List[Tuple[str, str]] = []
        self.help: List[str] = []
        self.closed = False

    def lines(self) -> Sequence[str]:
        return self._lines

    def cursor_index(self) -> int:
        return self._cursor

    def move_cursor(self, index: int) -> None:
        self._cursor = index

    def show_help(self, text: str) -> None:
        self.help.append(text)

    def show_output(self, title: str, text: str) -> None:
        self.outputs.append((title, text))

    def close(self) -> None:
        self.closed = True


def make_session(
    *answers: Any,
    lines: Sequence[str] = (),
    cursor: int = 0,
    selected: Sequence[str] = (),
    config: Optional[EngineConfig] = None,
    extras: Optional[Dict[str, object]] = None,
) -> Tuple[Session, FakeRunner, FakePrompter]:
    runner = FakeRunner()
    prompter = FakePrompter(*answers)
    session = Session(
        jj=Jujutsu(runner),
        prompter=prompter,
        view=FakeView(lines, cursor),
        config=config or EngineConfig(),
        extras=dict(extras or {}),
    )
    for change_id in selected:
        session.selection.toggle(change_id)
    return session, runner, prompter


def track_refreshes(session: Session) -> List[object]:
    events: List[object] = []
    session.bus.subscribe("log.refresh", events.append)
    return events
