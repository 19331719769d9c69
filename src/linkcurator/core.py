"""
Level-by-level curation loop.
"""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict, List, Optional, Set

from linkcurator.console import echo_err, read_command
from linkcurator.frontier import MAX_LINKS, Link, build_frontier
from linkcurator.persistence import SelectionLog
from linkcurator.pool import FetchPool
from linkcurator.selection import apply_selection
from linkcurator.state import RunState

PROMPT = (
    'Enter the numbers of links to exclude (space-separated, use "-" for range), '
    'preserve (prefix with "p", e.g., "p1"), "next" to move to the next level, '
    '"apply" to replay saved selections, "list" to show all links, or "done" to finish: '
)

CMD_NEXT = "next"
CMD_DONE = "done"
CMD_APPLY = "apply"
CMD_LIST = "list"


@dataclass(slots=True)
class Level:
    """One pending depth of the curation tree."""
    seeds: List[str]
    depth: int


class Curator:
    """
    Drives the curation run: fetch a level, take commands, advance or stop.

    Levels are kept on an explicit stack rather than recursing, so "done"
    simply empties the stack. Operator I/O goes through `prompt` and
    `echo` so the loop can run without a terminal.
    """

    def __init__(
        self,
        pool: FetchPool,
        state: RunState,
        log: SelectionLog,
        saved: Optional[Dict[int, List[str]]] = None,
        replay: bool = False,
        max_links: int = MAX_LINKS,
        prompt: Callable[[str], str] = read_command,
        echo: Callable[[str], None] = echo_err,
        verbose: bool = False,
    ):
        self.pool = pool
        self.state = state
        self.log = log
        self.saved = saved or {}
        self.replay = replay
        self.max_links = max_links
        self.prompt = prompt
        self.echo = echo
        self.verbose = verbose
        self.finished = False
        # Levels whose saved commands were already queued once
        self._replayed_levels: Set[int] = set()

    def run(self, root_url: str) -> None:
        """Curate from root_url until the operator stops or links run out."""
        stack: List[Level] = [Level(seeds=[root_url], depth=1)]
        while stack and not self.finished:
            level = stack.pop()
            next_level = self.process_level(level)
            if next_level is not None:
                stack.append(next_level)

    def fetch_level(self, level: Level) -> List[Link]:
        """Fetch the level's seeds and build its working set."""
        if self.verbose:
            self.echo(f"DEBUG: Level {level.depth}: fetching {len(level.seeds)} seed(s)")
        pages = self.pool.fetch_all(level.seeds)
        return build_frontier(
            level.seeds,
            [page.links if page is not None else None for page in pages],
            max_links=self.max_links,
        )

    def process_level(self, level: Level) -> Optional[Level]:
        """
        Run one level to completion.

        Returns:
            The next level to process, or None when this branch ends.
        """
        working = self.fetch_level(level)
        self.echo(f"Level {level.depth} links:")
        self.display(working)

        queue: Deque[str] = deque()
        if self.replay and self.state.applied:
            queue.extend(self._take_saved(level.depth))

        while True:
            if queue:
                command = queue.popleft()
                self.echo(f"Replaying level {level.depth} selection: {command}")
                working = apply_selection(command, working, self.state)
                if not queue:
                    self.echo("Remaining links after replay:")
                    self.display(working)
                continue

            try:
                command = self.prompt(PROMPT).strip()
            except EOFError:
                self.echo("")
                self.finished = True
                return None

            if not command:
                continue
            if command == CMD_NEXT:
                return self.advance(working, level.depth)
            if command == CMD_DONE:
                self.finished = True
                return None
            if command == CMD_APPLY:
                queue.extend(self.start_replay(level.depth))
                continue
            if command == CMD_LIST:
                self.display(working, show_all=True)
                continue

            working = apply_selection(command, working, self.state)
            self.log.append(level.depth, command)
            self.echo("Remaining links after exclusion:")
            self.display(working)

    def advance(self, working: List[Link], depth: int) -> Optional[Level]:
        """Work out the next level's seeds from what survived curation."""
        seeds = [link.url for link in working if link.url not in self.state.preserved]
        if not seeds and self.state.preserved:
            seeds = list(self.state.preserved)
        if not seeds:
            self.echo("No links to process.")
            return None
        return Level(seeds=seeds, depth=depth + 1)

    def start_replay(self, depth: int) -> List[str]:
        """
        Handle the `apply` command. Returns the commands to replay, or an
        empty list (after printing why) when replay is not possible.
        """
        if not self.replay:
            self.echo("No saved selections loaded; start with 'resume' to replay them.")
            return []
        if self.state.applied:
            self.echo("Saved selections have already been applied in this run.")
            return []
        if depth in self._replayed_levels or not self.saved.get(depth):
            self.echo(f"No saved selections for level {depth}.")
            return []

        commands = self._take_saved(depth)
        self.state.applied = True
        self.echo(f"Applying {len(commands)} saved selection(s) for level {depth}")
        return commands

    def _take_saved(self, depth: int) -> List[str]:
        if depth in self._replayed_levels:
            return []
        self._replayed_levels.add(depth)
        return list(self.saved.get(depth, []))

    def display(self, working: List[Link], show_all: bool = False) -> None:
        """
        Print numbered links not printed before in this run, then a summary.

        With show_all the whole working set is printed regardless.
        """
        for index, link in enumerate(working, start=1):
            if link.url in self.state.shown and not show_all:
                continue
            self.state.shown.add(link.url)
            self.echo(f"{index}. {link.anchor_text}")
            self.echo(f"   URL: {link.url}")
            self.echo("")
        self.echo(f"{len(working)} links remaining, {len(self.state.preserved)} preserved")
