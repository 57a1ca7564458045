"""Modal screens backing the Prompter: options, confirm, input, capture, text."""

from __future__ import annotations

from typing import Any, Optional, Sequence

from rich.text import Text
from textual import events
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Input, Static, TextArea

from jujutsu_engine.flows.prompts import HELP_PREFIX, Option

CAPTURE_HELP = (
    f"{HELP_PREFIX} ctrl+s - confirm",
    f"{HELP_PREFIX} escape - abort",
)

DIALOG_CSS = """
OptionsModal, ConfirmModal, InputModal, CaptureModal, TextModal {
    align: center middle;
}

.dialog {
    width: auto;
    min-width: 40;
    max-width: 90%;
    height: auto;
    max-height: 90%;
    border: round $accent;
    background: $surface;
    padding: 1 2;
}

CaptureModal .dialog {
    width: 90%;
    height: 80%;
}

CaptureModal TextArea {
    height: 1fr;
}

.hint {
    color: $text-muted;
}
"""


def _key_line(key: str, label: str) -> Text:
    line = Text("    ")
    line.append(key.upper(), style="bold #FFA500")
    line.append(f"  {label}")
    return line


def options_by_key(options: Sequence[Option[Any]]) -> dict[str, Option[Any]]:
    """Map each option's key, and its upper-case form as shown, to the option."""

    by_key = {option.key: option for option in options}
    for option in options:
        by_key.setdefault(option.key.upper(), option)
    return by_key


def option_lines(prompt: str, options: Sequence[Option[Any]]) -> Text:
    """Render a prompt and its single-key options."""

    body = Text()
    for line in prompt.split("\n"):
        body.append(f"  {line}\n")
    body.append("\n")
    for option in options:
        body.append_text(_key_line(option.key, option.label))
        body.append("\n")
    return body


class OptionsModal(ModalScreen[Optional[Option[Any]]]):
    """Pick one option by pressing its key; ``q`` or escape cancels."""

    DEFAULT_CSS = DIALOG_CSS

    def __init__(self, prompt: str, options: Sequence[Option[Any]]) -> None:
        super().__init__()
        self.prompt = prompt
        self.options = list(options)
        self._by_key = options_by_key(self.options)

    def compose(self) -> ComposeResult:
        with Container(classes="dialog"):
            yield Static(option_lines(self.prompt, self.options))
            yield Static("    <Esc> or q to cancel", classes="hint")

    def on_key(self, event: events.Key) -> None:
        event.stop()
        key = event.character or event.key
        option = self._by_key.get(key)
        if option is not None:
            self.dismiss(option)
        elif key in {"q", "escape"}:
            self.dismiss(None)


class ConfirmModal(OptionsModal):
    """Yes/no question built on the options dialog."""

    def __init__(self, prompt: str) -> None:
        super().__init__(
            prompt,
            [Option("y", "Yes", True), Option("n", "No", False)],
        )


class InputModal(ModalScreen[Optional[str]]):
    """Single-line text input."""

    DEFAULT_CSS = DIALOG_CSS
    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    def __init__(self, prompt: str, default: str = "") -> None:
        super().__init__()
        self.prompt = prompt
        self.default = default

    def compose(self) -> ComposeResult:
        with Container(classes="dialog"):
            yield Static(self.prompt)
            yield Input(value=self.default, id="dialog-input")
            yield Static("Enter to confirm, Escape to cancel", classes="hint")

    def on_mount(self) -> None:
        self.query_one("#dialog-input", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self.dismiss(event.value)

    def action_cancel(self) -> None:
        self.dismiss(None)


class CaptureModal(ModalScreen[Optional[str]]):
    """Multi-line editor; the returned text still contains its ``JJ:`` lines."""

    DEFAULT_CSS = DIALOG_CSS
    BINDINGS = [
        Binding("ctrl+s", "submit", "Confirm", priority=True),
        Binding("escape", "abort", "Abort", priority=True),
    ]

    def __init__(self, content: str, *, title: str = "") -> None:
        super().__init__()
        self.title_text = title
        self.content = seed_capture(content)

    def compose(self) -> ComposeResult:
        with Container(classes="dialog"):
            if self.title_text:
                yield Static(Text(self.title_text, style="bold"))
            yield TextArea(self.content, id="capture-text")

    def on_mount(self) -> None:
        area = self.query_one("#capture-text", TextArea)
        area.focus()
        area.move_cursor((0, 0))

    def action_submit(self) -> None:
        self.dismiss(self.query_one("#capture-text", TextArea).text)

    def action_abort(self) -> None:
        self.dismiss(None)


def seed_capture(content: str) -> str:
    """Editor content: the caller's text followed by the key help lines."""

    body = content.rstrip("\n")
    return "\n".join([body, "", *CAPTURE_HELP]) if body else "\n".join(["", *CAPTURE_HELP])


class TextModal(ModalScreen[None]):
    """Read-only scrollable text, used for help and command output."""

    DEFAULT_CSS = DIALOG_CSS
    BINDINGS = [
        Binding("escape", "close", "Close"),
        Binding("q", "close", "Close"),
        Binding("enter", "close", "Close"),
    ]

    def __init__(self, title: str, text: str, *, ansi: bool = False) -> None:
        super().__init__()
        self.title_text = title
        self.body = Text.from_ansi(text) if ansi else Text(text)

    def compose(self) -> ComposeResult:
        with Container(classes="dialog"):
            yield Static(Text(f" {self.title_text} ", style="bold"))
            with VerticalScroll():
                yield Static(self.body)
            yield Static("q, Enter or Escape to close", classes="hint")

    def action_close(self) -> None:
        self.dismiss(None)


__all__ = [
    "OptionsModal",
    "ConfirmModal",
    "InputModal",
    "CaptureModal",
    "TextModal",
    "option_lines",
    "options_by_key",
    "seed_capture",
    "CAPTURE_HELP",
]
