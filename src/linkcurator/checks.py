"""
Built-in checks run by `linkcurator --self-test`.

They exercise the real parser, engine and fetch pool against synthetic
data, without touching the network or any files.
"""
from __future__ import annotations

from typing import Callable, List, Tuple

from linkcurator.console import echo_err
from linkcurator.errors import FetchError
from linkcurator.fetcher import PageContent
from linkcurator.frontier import Link
from linkcurator.pool import FetchPool
from linkcurator.selection import apply_selection, parse_selection
from linkcurator.state import RunState

# (command, length, expected exclude, expected preserve)
PARSE_CASES: List[Tuple[str, int, set, set]] = [
    ("16", 300, {16}, set()),
    ("1 30", 300, {1, 30}, set()),
    ("20 22-26", 300, {20, 22, 23, 24, 25, 26}, set()),
    ("200-", 300, set(range(200, 301)), set()),
    ("-111", 300, set(range(1, 112)), set()),
    ("p20", 300, set(), {20}),
    ("p20-30", 300, set(), set(range(20, 31))),
    ("p20 10-13", 300, {10, 11, 12, 13}, {20}),
    ("p3 p33-", 300, set(), {3} | set(range(33, 301))),
]

SCENARIO_COMMANDS = ["1", "2-5", "10-20", "900-", "-30", "100 200 300", "40-60", "x 5", "500-520", "750-760"]


def make_links(count: int, prefix: str = "https://example.com/page/") -> List[Link]:
    """Synthetic, already-sorted working set of `count` links."""
    return [Link(url=f"{prefix}{i:05d}", anchor_text=f"Page {i}") for i in range(count)]


def check_parse_examples() -> bool:
    for command, length, exclude, preserve in PARSE_CASES:
        selection = parse_selection(command, length)
        if selection.exclude != exclude or selection.preserve != preserve:
            echo_err(f"  parse_selection({command!r}, {length}) gave {sorted(selection.exclude)[:5]}... / "
                     f"{sorted(selection.preserve)[:5]}...")
            return False
    return True


def check_scenario() -> bool:
    """1000 links, shrinking exclusions, a preserve, then a full-range exclusion."""
    state = RunState()
    working = make_links(1000)

    for command in SCENARIO_COMMANDS:
        before = len(working)
        working = apply_selection(command, working, state)
        if len(working) >= before:
            echo_err(f"  {command!r} did not shrink the working set ({before} -> {len(working)})")
            return False

    before_set, before_registry = len(working), len(state.preserved)
    working = apply_selection("p1-3", working, state)
    if len(working) >= before_set or len(state.preserved) <= before_registry:
        echo_err("  preserve did not move links into the registry")
        return False

    before = len(working)
    working = apply_selection("1-", working, state)
    return len(working) < before and len(working) == 0


def check_preserve_registry() -> bool:
    state = RunState()
    working = make_links(10)
    target = working[4]
    working = apply_selection("p5", working, state)
    return target.url in state.preserved and target not in working and len(working) == 9


class _FlakyFetcher:
    def fetch(self, url: str) -> PageContent:
        if "fail" in url:
            raise FetchError(url, "simulated failure")
        return PageContent(links=[(url + "/child", "child")], text=url)


def check_fetch_order() -> bool:
    pool = FetchPool(_FlakyFetcher(), RunState(), concurrency=3)
    urls = ["https://a.example/", "https://fail.example/", "https://c.example/"]
    results = pool.fetch_all(urls)
    return (
        len(results) == 3
        and results[0] is not None and results[0].text == urls[0]
        and results[1] is None
        and results[2] is not None and results[2].text == urls[2]
    )


CHECKS: List[Tuple[str, Callable[[], bool]]] = [
    ("selection parser examples", check_parse_examples),
    ("1000-link curation scenario", check_scenario),
    ("preserve registers and removes", check_preserve_registry),
    ("fetch_all keeps order and isolates failures", check_fetch_order),
]


def run_checks(echo: Callable[[str], None] = echo_err) -> bool:
    """Run every built-in check. Returns True if all passed."""
    passed = 0
    for name, check in CHECKS:
        ok = check()
        echo(f"{'PASS' if ok else 'FAIL'}  {name}")
        passed += ok
    echo(f"{passed}/{len(CHECKS)} checks passed")
    return passed == len(CHECKS)
