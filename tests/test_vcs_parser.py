import pytest

from jujutsu_engine.vcs import (
    Change,
    ChangeCountMismatchError,
    change_id_at,
    extract_change_id,
    find_change_line,
    parse_changes,
    selected_lines,
    strip_ansi,
)
from jujutsu_engine.vcs.parser import RECORD_TERMINATOR, ensure_count

from fakes import log_line, record


def test_parse_changes_reads_one_record_per_change() -> None:
    output = record("qpvuntsm", "first\n") + record("zzmqlkop", "second\n")

    changes = parse_changes(output)

    assert changes == [
        Change("qpvuntsm", "first\n"),
        Change("zzmqlkop", "second\n"),
    ]


def test_parse_changes_keeps_separators_and_newlines_in_description() -> None:
    description = "subject; with separator\n\nbody line;\nmore"

    (change,) = parse_changes(record("qpvuntsm", description))

    assert change.description == description


def test_blank_description_maps_to_empty_message() -> None:
    (change,) = parse_changes(record("qpvuntsm"))

    assert change.is_blank
    assert change.message == ""


def test_parse_changes_with_commit_id() -> None:
    output = f"qpvuntsm;02a96588;fix parser{RECORD_TERMINATOR}"

    (change,) = parse_changes(output, with_commit_id=True)

    assert change.commit_id == "02a96588"
    assert change.description == "fix parser"


def test_parse_changes_skips_empty_records() -> None:
    output = RECORD_TERMINATOR + record("qpvuntsm", "x") + "\n"

    assert [change.change_id for change in parse_changes(output)] == ["qpvuntsm"]


def test_ensure_count_raises_on_mismatch() -> None:
    with pytest.raises(ChangeCountMismatchError) as info:
        ensure_count(["a1b2", "c3d4"], [Change("a1b2")])

    assert str(info.value) == "Could not get change information"
    assert info.value.requested == ("a1b2", "c3d4")


def test_extract_change_id_from_colored_log_line() -> None:
    line = log_line("mrtwmypl")

    assert strip_ansi(line).startswith("◉  mrtwmypl")
    assert extract_change_id(line) == "mrtwmypl"
    assert extract_change_id(line) == extract_change_id(strip_ansi(line))


def test_extract_change_id_for_working_copy_marker() -> None:
    assert extract_change_id("@  kkmpptxz me@host 2026-01-03 12:00:00 1f2e3d4c") == "kkmpptxz"


def test_extract_change_id_trailing_hash_fallback() -> None:
    assert extract_change_id("~  (elided revisions) 0123abcd") == "0123abcd"


def test_extract_change_id_node_glyph_fallback() -> None:
    assert extract_change_id("│ ○  wqnwkozp") == "wqnwkozp"


def test_description_lines_carry_no_change_id() -> None:
    assert extract_change_id("│  refactor the parser module") is None
    assert change_id_at("") is None


def test_change_id_at_rejects_short_fragments() -> None:
    assert extract_change_id("◉  abc x@y") == "abc"
    assert change_id_at("◉  abc x@y") is None
    assert change_id_at("◉  abcd x@y") == "abcd"


def test_find_change_line_skips_description_lines() -> None:
    lines = [
        log_line("mrtwmypl"),
        "│  first description",
        "│",
        log_line("qpvuntsm"),
        "│  second description",
    ]

    assert find_change_line(lines, 0, 1) == 3
    assert find_change_line(lines, 3, -1) == 0
    assert find_change_line(lines, 3, 1) is None


def test_selected_lines_matches_selected_ids() -> None:
    lines = [log_line("mrtwmypl"), "│  desc", log_line("qpvuntsm")]

    assert selected_lines(lines, {"qpvuntsm"}) == [2]
    assert selected_lines(lines, set()) == []
