"""Fetch pool tests: ordering, failure isolation, memoization, bounded width."""

from __future__ import annotations

import threading
import time

import pytest

from linkcurator.fetcher import PageContent, PageFetcher
from linkcurator.pool import FetchPool

from .conftest import FakeFetcher

U1, U2, U3 = "https://a.example/", "https://b.example/", "https://c.example/"


def test_failed_url_keeps_its_slot(state):
    fetcher = FakeFetcher({U1: [("x", "X")], U3: [("z", "Z")]}, failing=(U2,))
    results = FetchPool(fetcher, state).fetch_all([U1, U2, U3])

    assert len(results) == 3
    assert results[0].links == [("x", "X")]
    assert results[1] is None
    assert results[2].links == [("z", "Z")]


def test_each_url_fetched_once_per_run(state):
    fetcher = FakeFetcher({U1: [], U2: []}, failing=(U3,))
    pool = FetchPool(fetcher, state)

    pool.fetch_all([U1, U2, U1, U3])
    second = pool.fetch_all([U2, U1, U3])

    assert sorted(fetcher.calls) == sorted([U1, U2, U3])
    assert second[0] is not None and second[1] is not None
    assert second[2] is None


def test_cache_insertion_follows_input_order(state):
    fetcher = FakeFetcher({U1: [], U2: [], U3: []})
    FetchPool(fetcher, state).fetch_all([U3, U1, U2])

    assert list(state.text_cache) == [U3, U1, U2]
    assert state.text_cache[U3] == f"text of {U3}"


def test_failures_are_recorded_not_cached(state):
    fetcher = FakeFetcher({}, failing=(U1,))
    FetchPool(fetcher, state).fetch_all([U1])

    assert U1 in state.failed
    assert U1 not in state.link_cache
    assert state.text_cache == {}


def test_cached_results_are_copies(state):
    fetcher = FakeFetcher({U1: [("x", "X")]})
    pool = FetchPool(fetcher, state)
    pool.fetch_all([U1])[0].links.append(("y", "Y"))

    assert state.link_cache[U1] == [("x", "X")]


class _SlowFetcher:
    """Tracks how many fetches run at the same time."""

    def __init__(self):
        self.lock = threading.Lock()
        self.active = 0
        self.peak = 0

    def fetch(self, url: str) -> PageContent:
        with self.lock:
            self.active += 1
            self.peak = max(self.peak, self.active)
        time.sleep(0.01)
        with self.lock:
            self.active -= 1
        return PageContent(text=url)


def test_concurrency_is_bounded(state):
    fetcher = _SlowFetcher()
    urls = [f"https://example.com/{i}" for i in range(12)]
    results = FetchPool(fetcher, state, concurrency=3).fetch_all(urls)

    assert fetcher.peak <= 3
    assert [r.text for r in results] == urls


def test_rejects_zero_width(state):
    with pytest.raises(ValueError):
        FetchPool(FakeFetcher({}), state, concurrency=0)


class _BrokenFetcher:
    """Raises something other than FetchError for one URL."""

    def fetch(self, url: str) -> PageContent:
        if url == U2:
            raise RuntimeError("adapter blew up")
        return PageContent(text=url)


def test_unexpected_fetcher_error_degrades_one_slot(state):
    results = FetchPool(_BrokenFetcher(), state).fetch_all([U1, U2, U3])

    assert results[0].text == U1
    assert results[1] is None
    assert results[2].text == U3
    assert U2 in state.failed
    assert list(state.text_cache) == [U1, U3]


def test_invalid_timeout_from_real_fetcher_degrades_slots(state):
    # urllib3 rejects a zero timeout with ValueError before any I/O
    with PageFetcher(timeout_s=0) as fetcher:
        results = FetchPool(fetcher, state).fetch_all([U1, U2])

    assert results == [None, None]
    assert state.failed == {U1, U2}


class _InterruptedFetcher:
    """First URL simulates Ctrl-C; the rest are slow."""

    def __init__(self):
        self.calls = []

    def fetch(self, url: str) -> PageContent:
        self.calls.append(url)
        if url.endswith("/0"):
            raise KeyboardInterrupt
        time.sleep(0.2)
        return PageContent(text=url)


def test_interrupt_cancels_queued_fetches(state):
    fetcher = _InterruptedFetcher()
    urls = [f"https://example.com/{i}" for i in range(6)]

    with pytest.raises(KeyboardInterrupt):
        FetchPool(fetcher, state, concurrency=1).fetch_all(urls)

    assert len(fetcher.calls) < len(urls)
    assert state.link_cache == {}
