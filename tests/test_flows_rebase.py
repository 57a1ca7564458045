import asyncio

from jujutsu_engine.flows import RebasePlan, rebase_change
from jujutsu_engine.vcs import REBASE_DESTINATION_TYPES, REVISION_SOURCE

from fakes import log_line, make_session, track_refreshes

LINES = [log_line("dddddddd"), "│  destination", log_line("aaaaaaaa")]


def test_selection_rebases_revisions_relative_to_cursor() -> None:
    session, runner, prompter = make_session(
        "a", True, lines=LINES, selected=["aaaaaaaa", "bbbbbbbb"]
    )
    refreshes = track_refreshes(session)

    outcome = asyncio.run(rebase_change(session))

    assert outcome.executed
    assert runner.calls == [
        ["rebase", "-r", "aaaaaaaa", "-r", "bbbbbbbb", "-A", "dddddddd"],
    ]
    assert [kind for kind, _ in prompter.prompts] == ["choose", "confirm"]
    assert not session.selection
    assert len(refreshes) == 1


def test_single_change_picks_source_type_and_destination() -> None:
    session, runner, prompter = make_session("s", "dddddddd", "d", True, lines=LINES, cursor=2)

    asyncio.run(rebase_change(session))

    assert runner.calls == [["rebase", "-s", "aaaaaaaa", "-d", "dddddddd"]]
    assert [kind for kind, _ in prompter.prompts] == ["choose", "pick", "choose", "confirm"]


def test_cancel_at_destination_type_runs_nothing() -> None:
    session, runner, prompter = make_session(
        None, lines=LINES, selected=["aaaaaaaa", "bbbbbbbb"]
    )
    refreshes = track_refreshes(session)

    outcome = asyncio.run(rebase_change(session))

    assert outcome.status == "aborted"
    assert runner.calls == []
    assert session.selection.list() == ["aaaaaaaa", "bbbbbbbb"]
    assert refreshes == []
    assert prompter.notices == [("info", "Rebase cancelled")]


def test_cancel_while_picking_destination() -> None:
    session, runner, _prompter = make_session("r", None, lines=LINES, cursor=2)

    outcome = asyncio.run(rebase_change(session))

    assert outcome.status == "aborted"
    assert runner.calls == []


def test_declined_confirmation_runs_nothing() -> None:
    session, runner, _prompter = make_session("b", False, lines=LINES, selected=["aaaaaaaa"])

    outcome = asyncio.run(rebase_change(session))

    assert outcome.status == "aborted"
    assert runner.calls == []
    assert session.selection.list() == ["aaaaaaaa"]


def test_plan_summary_previews_ids() -> None:
    onto = REBASE_DESTINATION_TYPES[0]
    plan = RebasePlan(
        ["aaaaaaaaxx", "bbbbbbbbxx", "ccccccccxx", "eeeeeeeexx"],
        REVISION_SOURCE,
        "ddddddddxx",
        onto,
    )

    assert plan.summary() == (
        "Rebase 4 changes [aaaaaaaa, ... (4 total)] "
        "(Revision (single change)) onto dddddddd?"
    )
    assert plan.args()[:3] == ["rebase", "-r", "aaaaaaaaxx"]
