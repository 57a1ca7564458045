"""Textual adapter that wires the session, key table and dialogs together."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Coroutine, Optional, Sequence

from jujutsu_engine.flows.prompts import LogView, Option
from jujutsu_engine.keymaps import KeymapRegistry, normalize_key
from jujutsu_engine.keymaps.defaults import invoke
from jujutsu_engine.keymaps.models import ActionRef
from jujutsu_engine.runtime import telemetry
from jujutsu_engine.session import Session
from jujutsu_engine.vcs import change_id_at

from .dialogs import CaptureModal, ConfirmModal, InputModal, OptionsModal

PICK_NAVIGATION = frozenset({"jump_to_next_change", "jump_to_prev_change"})


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    show_dialog: Callable[[Any], Awaitable[Any]]
    notify: Callable[[str, str], None] = _noop
    refresh_log: Callable[[Optional[str]], None] = _noop
    redraw: Callable[[], None] = _noop


class TextualPrompter:
    """Prompter implementation backed by modal screens.

    ``show_dialog`` is expected to be ``App.push_screen_wait`` so every
    method here has to be awaited from inside a worker.
    """

    def __init__(self, hooks: TextualUIHooks, view: LogView) -> None:
        self.hooks = hooks
        self.view = view
        self._pick: Optional[asyncio.Future[Optional[str]]] = None

    async def choose(self, prompt: str, options: Sequence[Option[Any]]) -> Optional[Option[Any]]:
        return await self.hooks.show_dialog(OptionsModal(prompt, options))

    async def confirm(self, prompt: str) -> bool:
        option = await self.hooks.show_dialog(ConfirmModal(prompt))
        return bool(option is not None and option.value)

    async def ask(self, prompt: str, default: str = "") -> Optional[str]:
        return await self.hooks.show_dialog(InputModal(prompt, default))

    async def capture(self, content: str, *, title: str = "") -> Optional[str]:
        return await self.hooks.show_dialog(CaptureModal(content, title=title))

    async def pick_change(self, prompt: str) -> Optional[str]:
        """Let the user move the log cursor and press Enter on a change."""

        future: asyncio.Future[Optional[str]] = asyncio.get_running_loop().create_future()
        self._pick = future
        self.notify(f"{prompt} (Enter to select, Esc to cancel)")
        try:
            return await future
        finally:
            self._pick = None

    @property
    def picking(self) -> bool:
        return self._pick is not None and not self._pick.done()

    def submit_pick(self) -> bool:
        """Resolve a pending pick with the cursor change; warn when there is none."""

        pick = self._pick
        if pick is None or pick.done():
            return False
        lines = self.view.lines()
        index = self.view.cursor_index()
        line = lines[index] if 0 <= index < len(lines) else ""
        change_id = change_id_at(line)
        if change_id is None:
            self.notify("Could not find change ID on current line", "warning")
            return False
        pick.set_result(change_id)
        return True

    def cancel_pick(self) -> None:
        pick = self._pick
        if pick is not None and not pick.done():
            pick.set_result(None)

    def notify(self, message: str, level: str = "info") -> None:
        self.hooks.notify(message, level)


class TextualJujutsuAdapter:
    """Turns key presses into flow coroutines for the host to schedule."""

    def __init__(
        self,
        session: Session,
        registry: KeymapRegistry,
        prompter: TextualPrompter,
        hooks: TextualUIHooks,
    ) -> None:
        self.session = session
        self.registry = registry
        self.prompter = prompter
        self.hooks = hooks
        self._active: Optional[str] = None
        self._subscribe_events()

    @property
    def active(self) -> Optional[str]:
        return self._active

    def handle_key(self, key: str) -> Optional[Coroutine[Any, Any, object]]:
        """Coroutine to run for ``key`` or ``None`` when nothing should run.

        Only one flow is in flight at a time. While a flow is waiting on
        ``pick_change`` the keys steer the cursor instead.
        """

        key = normalize_key(key)
        if self.prompter.picking:
            return self._handle_pick_key(key)

        action = self.registry.resolve(key)
        if action is None:
            return None
        if self._active is not None:
            self.prompter.notify(f"Still running {self._active}", "warning")
            return None
        self._active = action.id
        return self._run(action)

    def _handle_pick_key(self, key: str) -> Optional[Coroutine[Any, Any, object]]:
        if key == "enter":
            self.prompter.submit_pick()
            return None
        if key in {"escape", "q"}:
            self.prompter.cancel_pick()
            return None
        action = self.registry.resolve(key)
        if action is not None and action.id in PICK_NAVIGATION:
            return invoke(action, self.session)
        return None

    async def _run(self, action: ActionRef) -> object:
        try:
            with telemetry.span(
                "adapter::dispatch",
                logger_name="jujutsu_engine.adapters.textual",
                component="adapter",
                metadata={"action_id": action.id},
            ):
                return await invoke(action, self.session)
        except Exception as exc:
            self.session.notify(f"{action.id} failed: {exc}", "error")
            raise
        finally:
            self._active = None
            self.hooks.redraw()

    def _subscribe_events(self) -> None:
        bus = self.session.bus
        bus.subscribe("log.refresh", lambda revset: self.hooks.refresh_log(revset))
        bus.subscribe("selection.changed", lambda _payload: self.hooks.redraw())


__all__ = ["TextualUIHooks", "TextualPrompter", "TextualJujutsuAdapter", "PICK_NAVIGATION"]
