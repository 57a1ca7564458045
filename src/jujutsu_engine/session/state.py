"""Session object shared by every flow: jj client, UI hooks, selection."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

from jujutsu_engine.config import EngineConfig
from jujutsu_engine.flows.prompts import LogView, Prompter
from jujutsu_engine.runtime import telemetry
from jujutsu_engine.vcs import Jujutsu, change_id_at

from .selection import SelectionSet


class SessionBus:
    """Minimal event bus letting flows signal the host."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Callable[[object], None]]] = {}

    def subscribe(self, event: str, callback: Callable[[object], None]) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in self._subscribers.get(event, []):
            callback(payload)


@dataclass(slots=True)
class Session:
    """State owned by the application shell and passed to every flow."""

    jj: Jujutsu
    prompter: Prompter
    view: LogView
    config: EngineConfig = field(default_factory=EngineConfig)
    selection: SelectionSet = field(default_factory=SelectionSet)
    bus: SessionBus = field(default_factory=SessionBus)
    revset: Optional[str] = None
    extras: Dict[str, object] = field(default_factory=dict)

    def notify(self, message: str, level: str = "info") -> None:
        telemetry.log(level, message, logger_name="jujutsu_engine.session")
        self.prompter.notify(message, level)

    def cursor_line(self) -> str:
        lines = self.view.lines()
        index = self.view.cursor_index()
        if 0 <= index < len(lines):
            return lines[index]
        return ""

    def change_at_cursor(self) -> Optional[str]:
        """Change id under the cursor, warning when the line has none."""

        change_id = change_id_at(self.cursor_line())
        if change_id is None:
            self.notify("Could not find change ID on current line", "warning")
        return change_id

    def targets(self) -> Optional[list[str]]:
        """Selected ids when any are selected, else the cursor change."""

        if self.selection:
            return self.selection.list()
        change_id = self.change_at_cursor()
        return [change_id] if change_id else None

    def toggle(self, change_id: str) -> bool:
        selected = self.selection.toggle(change_id)
        self.bus.emit("selection.changed", self.selection.list())
        return selected

    def clear_selection(self) -> None:
        self.selection.clear()
        self.bus.emit("selection.changed", [])

    def request_refresh(self) -> None:
        self.bus.emit("log.refresh", self.revset)

    def consumed(self) -> None:
        """Bookkeeping after a successful selection-consuming command."""

        self.clear_selection()
        self.request_refresh()


__all__ = ["Session", "SessionBus"]
