import asyncio

from jujutsu_engine.config import EngineConfig
from jujutsu_engine.flows import (
    clear_selections,
    jump_to_next_change,
    jump_to_prev_change,
    open_diff,
    quit_view,
    set_revset,
    show_help,
    toggle_change,
)
from jujutsu_engine.keymaps import build_registry

from fakes import log_line, make_session, track_refreshes

LINES = [
    log_line("mrtwmypl"),
    "│  first",
    "│",
    log_line("qpvuntsm"),
    "│  second",
]


def test_jump_between_change_lines() -> None:
    session, _runner, _prompter = make_session(lines=LINES)

    asyncio.run(jump_to_next_change(session))
    assert session.view.cursor_index() == 3

    outcome = asyncio.run(jump_to_next_change(session))
    assert outcome.status == "noop"
    assert session.view.cursor_index() == 3

    asyncio.run(jump_to_prev_change(session))
    assert session.view.cursor_index() == 0


def test_toggle_change_announces_count() -> None:
    session, _runner, prompter = make_session(lines=LINES)

    asyncio.run(toggle_change(session))
    assert session.selection.list() == ["mrtwmypl"]
    assert prompter.notices[-1] == ("info", "1 change selected")

    asyncio.run(toggle_change(session))
    assert not session.selection


def test_toggle_on_description_line_warns() -> None:
    session, _runner, prompter = make_session(lines=LINES, cursor=1)

    outcome = asyncio.run(toggle_change(session))

    assert outcome.status == "noop"
    assert not session.selection
    assert prompter.notices[0][0] == "warning"


def test_clear_selections() -> None:
    session, _runner, _prompter = make_session(selected=["a1b2", "c3d4"])

    asyncio.run(clear_selections(session))

    assert not session.selection


def test_set_revset_and_reset() -> None:
    session, _runner, _prompter = make_session(" trunk().. ", "")
    refreshes = track_refreshes(session)

    asyncio.run(set_revset(session))
    assert session.revset == "trunk().."

    asyncio.run(set_revset(session))
    assert session.revset is None
    assert refreshes == ["trunk()..", None]


def test_open_diff_runs_preset_for_cursor_change() -> None:
    session, runner, _prompter = make_session(
        lines=LINES, cursor=3, config=EngineConfig(diff_preset="stat")
    )
    runner.script("diff", stdout="1 file changed")

    outcome = asyncio.run(open_diff(session))

    assert outcome.executed
    assert runner.calls == [["diff", "--stat", "--color=always", "-r", "qpvuntsm"]]
    assert session.view.outputs == [("Diff qpvuntsm", "1 file changed")]


def test_open_diff_with_unknown_preset_warns_and_does_nothing() -> None:
    session, runner, prompter = make_session(
        lines=LINES, config=EngineConfig(diff_preset="fancy")
    )

    outcome = asyncio.run(open_diff(session))

    assert outcome.status == "noop"
    assert runner.calls == []
    assert prompter.notices[0][0] == "warning"
    assert "fancy" in prompter.notices[0][1]


def test_show_help_renders_registry() -> None:
    session, _runner, _prompter = make_session(
        extras={"keymap_registry": build_registry()}
    )

    asyncio.run(show_help(session))

    (text,) = session.view.help
    assert "Basic Operations" in text


def test_quit_closes_view() -> None:
    session, _runner, _prompter = make_session()

    asyncio.run(quit_view(session))

    assert session.view.closed
