"""Pytest fixtures shared across test modules."""

from __future__ import annotations

from typing import Dict, List, Tuple

import pytest

from linkcurator.checks import make_links  # noqa: F401  re-exported for test modules
from linkcurator.errors import FetchError
from linkcurator.fetcher import PageContent
from linkcurator.persistence import SelectionLog
from linkcurator.state import RunState


class FakeFetcher:
    """Serves canned pages and records every URL it was asked for."""

    def __init__(self, pages: Dict[str, List[Tuple[str, str]]], failing: Tuple[str, ...] = ()):
        self.pages = pages
        self.failing = set(failing)
        self.calls: List[str] = []

    def fetch(self, url: str) -> PageContent:
        self.calls.append(url)
        if url in self.failing or url not in self.pages:
            raise FetchError(url, "simulated failure")
        return PageContent(links=list(self.pages[url]), text=f"text of {url}")


class ScriptedPrompt:
    """Feeds queued answers to the curator; raises EOFError when exhausted."""

    def __init__(self, answers: List[str]):
        self.answers = list(answers)
        self.asked = 0

    def __call__(self, question: str) -> str:
        self.asked += 1
        if not self.answers:
            raise EOFError
        return self.answers.pop(0)


@pytest.fixture
def state() -> RunState:
    return RunState()


@pytest.fixture
def selection_log(tmp_path) -> SelectionLog:
    return SelectionLog(tmp_path / "removal_selections.txt")
