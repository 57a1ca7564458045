"""Executable Textual app hosting the jj log view."""

from __future__ import annotations

from typing import List, Optional, Sequence

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.containers import VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Footer, Header, Static

from jujutsu_engine.config import EngineConfig
from jujutsu_engine.keymaps import KeymapRegistry, build_registry
from jujutsu_engine.runtime import telemetry
from jujutsu_engine.session import Session
from jujutsu_engine.vcs import CommandRunner, Jujutsu, selected_lines

from .controller import TextualJujutsuAdapter, TextualPrompter, TextualUIHooks
from .dialogs import TextModal

SELECTED_MARK = "● "
UNSELECTED_MARK = "  "

_SEVERITY = {
    "debug": "information",
    "info": "information",
    "warning": "warning",
    "error": "error",
}


def render_log(
    lines: Sequence[str], cursor: int, selected: Sequence[int]
) -> Text:
    """Compose the log body: ANSI-colored lines, selection marks, cursor."""

    marked = set(selected)
    body = Text()
    for index, line in enumerate(lines):
        row = Text(SELECTED_MARK if index in marked else UNSELECTED_MARK, style="bold magenta")
        row.append_text(Text.from_ansi(line))
        if index == cursor:
            row.stylize("reverse")
        body.append_text(row)
        body.append("\n")
    return body


class LogScroll(VerticalScroll, can_focus=False):
    """Scroll container that leaves arrow keys to the app."""


class LogPanel:
    """``LogView`` over the lines rendered by ``JujutsuApp``."""

    def __init__(self, app: "JujutsuApp") -> None:
        self.app = app
        self._lines: List[str] = []
        self._cursor = 0

    def lines(self) -> Sequence[str]:
        return self._lines

    def set_lines(self, lines: Sequence[str]) -> None:
        self._lines = list(lines)
        self.move_cursor(self._cursor)

    def cursor_index(self) -> int:
        return self._cursor

    def move_cursor(self, index: int) -> None:
        if not self._lines:
            self._cursor = 0
        else:
            self._cursor = max(0, min(index, len(self._lines) - 1))
        self.app.redraw()
        self.app.scroll_to_line(self._cursor)

    def show_help(self, text: str) -> None:
        self.app.push_screen(TextModal("JJ Help", text))

    def show_output(self, title: str, text: str) -> None:
        self.app.push_screen(TextModal(title, text, ansi=True))

    def close(self) -> None:
        self.app.exit()


class JujutsuApp(App[None]):
    """Interactive ``jj log`` with single-key jj operations."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#log-scroll {
		height: 1fr;
		border: round $accent;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+c", "quit", "Quit"),
    ]
    TITLE = "jj log"

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        *,
        revset: Optional[str] = None,
        cwd: Optional[str] = None,
    ) -> None:
        super().__init__()
        self.config = config or EngineConfig()
        self.view = LogPanel(self)
        self._log_widget: Static | None = None
        self._status_widget: Static | None = None
        self._scroll: LogScroll | None = None

        runner = CommandRunner(self.config.jj_binary, cwd=cwd)
        hooks = TextualUIHooks(
            show_dialog=self.push_screen_wait,
            notify=self._show_notice,
            refresh_log=self._request_log,
            redraw=self.redraw,
        )
        self.registry: KeymapRegistry = build_registry(self.config.keymap)
        self.prompter = TextualPrompter(hooks, view=self.view)
        self.session = Session(
            jj=Jujutsu(runner),
            prompter=self.prompter,
            view=self.view,
            config=self.config,
            revset=revset or self.config.revset,
            extras={"keymap_registry": self.registry},
        )
        runner.notify = self.session.notify
        self.adapter = TextualJujutsuAdapter(self.session, self.registry, self.prompter, hooks)

    def compose(self) -> ComposeResult:
        yield Header()
        self._scroll = LogScroll(id="log-scroll")
        with self._scroll:
            self._log_widget = Static("", id="log-view")
            yield self._log_widget
        self._status_widget = Static("", id="status-line")
        yield self._status_widget
        yield Footer()

    def on_mount(self) -> None:
        self._request_log(self.session.revset)

    async def on_key(self, event: events.Key) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        if self._move_by_key(event.key):
            event.stop()
            return
        key = event.character if event.character and event.character.isprintable() else event.key
        coroutine = self.adapter.handle_key(key)
        if coroutine is None:
            return
        event.stop()
        self.run_worker(coroutine, group="flow", exit_on_error=False)

    def redraw(self) -> None:
        if self._log_widget is not None:
            lines = self.view.lines()
            selected = selected_lines(lines, self.session.selection)
            self._log_widget.update(render_log(lines, self.view.cursor_index(), selected))
        self._update_status()

    def scroll_to_line(self, index: int) -> None:
        if self._scroll is not None and self._scroll.is_mounted:
            half = self._scroll.size.height // 2
            self._scroll.scroll_to(y=max(0, index - half), animate=False)

    def _move_by_key(self, key: str) -> bool:
        steps = {"down": 1, "up": -1, "pagedown": 20, "pageup": -20}
        cursor = self.view.cursor_index()
        if key in steps:
            self.view.move_cursor(cursor + steps[key])
        elif key == "home":
            self.view.move_cursor(0)
        elif key == "end":
            self.view.move_cursor(len(self.view.lines()) - 1)
        else:
            return False
        return True

    def _request_log(self, revset: Optional[str]) -> None:
        self.run_worker(self._load_log(revset), group="log", exclusive=True)

    async def _load_log(self, revset: Optional[str]) -> None:
        result = await self.session.jj.log(revset)
        if result is None:
            return
        lines = result.stdout.rstrip("\n").split("\n") if result.stdout else []
        telemetry.record_event(
            "log.loaded",
            level="debug",
            data={"revset": revset or "-", "lines": len(lines)},
        )
        self.sub_title = revset or ""
        self.view.set_lines(lines)

    def _update_status(self, notice: str = "") -> None:
        if self._status_widget is None:
            return
        count = self.session.selection.count()
        parts = [f"{count} selected"] if count else []
        if self.adapter.active:
            parts.append(self.adapter.active)
        if notice:
            parts.append(notice)
        self._status_widget.update(" | ".join(parts))

    def _show_notice(self, message: str, level: str = "info") -> None:
        self._update_status(message)
        self.notify(message, severity=_SEVERITY.get(level, "information"))


def run_app(
    config: Optional[EngineConfig] = None,
    *,
    revset: Optional[str] = None,
    cwd: Optional[str] = None,
) -> None:
    JujutsuApp(config, revset=revset, cwd=cwd).run()


__all__ = ["JujutsuApp", "LogPanel", "render_log", "run_app"]
