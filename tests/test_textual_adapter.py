from __future__ import annotations

import asyncio
from typing import Any, List, Tuple

from jujutsu_engine.adapters.textual.app import render_log
from jujutsu_engine.adapters.textual.controller import (
    TextualJujutsuAdapter,
    TextualPrompter,
    TextualUIHooks,
)
from jujutsu_engine.adapters.textual.dialogs import (
    CAPTURE_HELP,
    option_lines,
    options_by_key,
    seed_capture,
)
from jujutsu_engine.flows import Option
from jujutsu_engine.flows.prompts import strip_help_lines
from jujutsu_engine.keymaps import build_registry
from jujutsu_engine.session import Session
from jujutsu_engine.vcs import Jujutsu

from fakes import FakeRunner, FakeView, log_line

LINES = [log_line("mrtwmypl"), "│  first", log_line("qpvuntsm"), "│  second"]


async def no_dialog(screen: Any) -> Any:
    raise AssertionError(f"unexpected dialog {screen!r}")


def make_adapter(
    keymap: dict | None = None,
) -> Tuple[TextualJujutsuAdapter, FakeRunner, List[Tuple[str, str]], List[object]]:
    notices: List[Tuple[str, str]] = []
    refreshes: List[object] = []
    hooks = TextualUIHooks(
        show_dialog=no_dialog,
        notify=lambda message, level: notices.append((level, message)),
        refresh_log=refreshes.append,
    )
    view = FakeView(LINES)
    runner = FakeRunner()
    registry = build_registry(keymap)
    prompter = TextualPrompter(hooks, view)
    session = Session(
        jj=Jujutsu(runner),
        prompter=prompter,
        view=view,
        extras={"keymap_registry": registry},
    )
    adapter = TextualJujutsuAdapter(session, registry, prompter, hooks)
    return adapter, runner, notices, refreshes


def test_bound_key_runs_flow_and_refreshes_log() -> None:
    adapter, runner, _notices, refreshes = make_adapter()

    coroutine = adapter.handle_key("n")
    assert adapter.active == "new_change"
    asyncio.run(coroutine)

    assert runner.calls == [["new", "mrtwmypl"]]
    assert refreshes == [None]
    assert adapter.active is None


def test_unbound_key_is_ignored() -> None:
    adapter, _runner, _notices, _refreshes = make_adapter()

    assert adapter.handle_key("F12") is None


def test_second_flow_is_rejected_while_one_is_running() -> None:
    adapter, _runner, notices, _refreshes = make_adapter()

    first = adapter.handle_key("j")
    assert adapter.handle_key("k") is None
    assert notices == [("warning", "Still running jump_to_next_change")]
    asyncio.run(first)

    second = adapter.handle_key("k")
    assert second is not None
    asyncio.run(second)


def test_pick_mode_navigates_then_cancels() -> None:
    adapter, runner, notices, _refreshes = make_adapter()
    view = adapter.session.view

    async def scenario() -> object:
        task = asyncio.create_task(adapter.handle_key("S"))
        for _ in range(3):
            await asyncio.sleep(0)
        assert adapter.prompter.picking

        assert adapter.handle_key("n") is None
        await adapter.handle_key("j")
        assert view.cursor_index() == 2

        view.move_cursor(1)
        assert adapter.handle_key("enter") is None
        assert adapter.prompter.picking

        adapter.handle_key("escape")
        return await task

    outcome = asyncio.run(scenario())

    assert outcome.status == "aborted"
    assert runner.calls == []
    assert ("warning", "Could not find change ID on current line") in notices


def test_pick_change_returns_cursor_change() -> None:
    adapter, _runner, _notices, _refreshes = make_adapter()
    prompter = adapter.prompter
    adapter.session.view.move_cursor(2)

    async def scenario() -> object:
        task = asyncio.create_task(prompter.pick_change("Select target"))
        await asyncio.sleep(0)
        assert prompter.submit_pick()
        return await task

    assert asyncio.run(scenario()) == "qpvuntsm"
    assert not prompter.picking


def test_submit_and_cancel_without_pending_pick_do_nothing() -> None:
    adapter, _runner, notices, _refreshes = make_adapter()
    prompter = adapter.prompter

    assert prompter.submit_pick() is False
    prompter.cancel_pick()

    async def scenario() -> None:
        task = asyncio.create_task(prompter.pick_change("Select target"))
        await asyncio.sleep(0)
        prompter.cancel_pick()
        assert await task is None
        assert prompter.submit_pick() is False

    asyncio.run(scenario())
    assert notices == [("info", "Select target (Enter to select, Esc to cancel)")]


def test_capture_seed_appends_help_lines_that_are_stripped() -> None:
    seeded = seed_capture("subject\n")

    assert seeded.endswith("\n".join(CAPTURE_HELP))
    assert strip_help_lines(seeded).rstrip("\n") == "subject"


def test_option_lines_show_upper_case_keys() -> None:
    text = option_lines("Pick one:", [Option("a", "After", 1)]).plain

    assert "  Pick one:" in text
    assert "    A  After" in text


def test_options_accept_the_shown_upper_case_key() -> None:
    yes, no = Option("y", "Yes", True), Option("n", "No", False)
    by_key = options_by_key([yes, no])

    assert by_key["y"] is yes
    assert by_key["Y"] is yes
    assert by_key["N"] is no


def test_exact_key_wins_over_shifted_twin() -> None:
    lower, upper = Option("s", "Squash", 1), Option("S", "Squash into", 2)

    assert options_by_key([lower, upper])["S"] is upper


def test_render_log_marks_cursor_and_selection() -> None:
    text = render_log(["\x1b[1mone\x1b[0m", "two"], cursor=1, selected=[0])

    assert text.plain == "● one\n  two\n"
