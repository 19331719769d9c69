"""Content aggregation tests."""

from __future__ import annotations

from linkcurator.aggregate import aggregate_content, write_content


def test_texts_joined_in_fetch_order(state):
    state.record_page("https://b.example/", [], "Bravo")
    state.record_page("https://a.example/", [], "Alpha")
    state.record_page("https://b.example/", [], "ignored second write")

    assert aggregate_content(state) == "Bravo\n\nAlpha\n\n"


def test_empty_run_writes_empty_file(state, tmp_path):
    path = write_content(state, tmp_path / "out" / "result.txt")
    assert path.read_text(encoding="utf-8") == ""


def test_write_content(state, tmp_path):
    state.record_page("https://a.example/", [], "Alpha")
    path = write_content(state, tmp_path / "result.txt")
    assert path.read_text(encoding="utf-8") == "Alpha\n\n"
