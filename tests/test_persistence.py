"""Selection log and root URL store tests."""

from __future__ import annotations

import pytest

from linkcurator.errors import SelectionLogError
from linkcurator.persistence import RootUrlStore, SelectionLog, format_entry


def test_append_writes_one_line_per_command(selection_log):
    selection_log.append(1, "3 p5")
    selection_log.append(2, "1-")

    assert selection_log.path.read_text(encoding="utf-8") == "Level 1: 3 p5\nLevel 2: 1-\n"


def test_load_groups_by_level_in_issue_order(selection_log):
    selection_log.path.write_text(
        "Level 1: 4\nLevel 2: p1\nLevel 1: 10-\n\nLevel 3: -2\n",
        encoding="utf-8",
    )
    assert selection_log.load() == {1: ["4", "10-"], 2: ["p1"], 3: ["-2"]}


def test_load_keeps_colons_inside_commands(selection_log):
    selection_log.path.write_text("Level 1: a: b\n", encoding="utf-8")
    assert selection_log.load() == {1: ["a: b"]}


def test_missing_log_loads_empty(tmp_path):
    assert SelectionLog(tmp_path / "nope.txt").load() == {}


@pytest.mark.parametrize("bad_line", ["Level one: 3", "3 4 5", "level 1: 3", "Level 1 3"])
def test_corrupt_line_is_fatal(selection_log, bad_line):
    selection_log.path.write_text(f"Level 1: 2\n{bad_line}\n", encoding="utf-8")
    with pytest.raises(SelectionLogError) as excinfo:
        selection_log.load()
    assert excinfo.value.line_no == 2


def test_format_entry():
    assert format_entry(4, "p1 2") == "Level 4: p1 2"


def test_appended_log_round_trips(selection_log):
    for level, command in [(1, "5"), (1, "p2-3"), (2, "next-ish")]:
        selection_log.append(level, command)
    assert selection_log.load() == {1: ["5", "p2-3"], 2: ["next-ish"]}


class TestRootUrlStore:

    def test_save_then_load(self, tmp_path):
        store = RootUrlStore(tmp_path / "root_url.txt")
        assert store.load() is None
        store.save("  https://example.com/start \n")
        assert store.load() == "https://example.com/start"

    def test_blank_file_counts_as_missing(self, tmp_path):
        path = tmp_path / "root_url.txt"
        path.write_text("\n", encoding="utf-8")
        assert RootUrlStore(path).load() is None
