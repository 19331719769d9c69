"""
Selection commands: parsing the operator's mini-language and applying it.

Grammar, whitespace-separated tokens, indices 1-based:

    N       exclude N
    N-M     exclude N..M (bounds swapped if N > M)
    N-      exclude N..end
    -M      exclude 1..M
    pN ...  the same forms prefixed with "p" preserve instead of exclude

Malformed and out-of-range tokens are ignored without complaint.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import FrozenSet, List, Optional, Set, Tuple

from linkcurator.frontier import Link
from linkcurator.state import RunState

PRESERVE_PREFIX = "p"

_SINGLE_RE = re.compile(r"^([0-9]+)$")
_RANGE_RE = re.compile(r"^([0-9]*)-([0-9]*)$")


@dataclass(frozen=True, slots=True)
class Selection:
    """Indices picked by one command."""
    exclude: FrozenSet[int] = frozenset()
    preserve: FrozenSet[int] = frozenset()

    @property
    def removed(self) -> FrozenSet[int]:
        """Every index that leaves the working set."""
        return self.exclude | self.preserve


def _token_bounds(token: str, length: int) -> Optional[Tuple[int, int]]:
    """Return the inclusive (start, end) a token covers before clamping, or None."""
    if match := _SINGLE_RE.match(token):
        n = int(match.group(1))
        # A lone index is not clamped: out of range means nothing
        if 1 <= n <= length:
            return n, n
        return None

    match = _RANGE_RE.match(token)
    if not match:
        return None
    start_str, end_str = match.groups()
    if not start_str and not end_str:
        return None

    start = int(start_str) if start_str else 1
    end = int(end_str) if end_str else length
    # Only an explicit N-M is reordered; "N-" past the end stays empty
    if start_str and end_str and start > end:
        start, end = end, start
    return start, end


def _add_token(token: str, length: int, target: Set[int]) -> None:
    bounds = _token_bounds(token, length)
    if bounds is None:
        return
    start, end = max(bounds[0], 1), min(bounds[1], length)
    target.update(range(start, end + 1))


def parse_selection(command: str, length: int) -> Selection:
    """
    Parse a selection command against a working set of `length` links.

    >>> parse_selection("p20 10-13", 300).exclude
    frozenset({10, 11, 12, 13})
    """
    exclude: Set[int] = set()
    preserve: Set[int] = set()

    for token in command.split():
        if token.startswith(PRESERVE_PREFIX):
            _add_token(token[len(PRESERVE_PREFIX):], length, preserve)
        else:
            _add_token(token, length, exclude)

    return Selection(exclude=frozenset(exclude), preserve=frozenset(preserve))


def apply_selection(command: str, working_set: List[Link], state: RunState) -> List[Link]:
    """
    Apply a selection command and return the new working set.

    Preserved links are registered in the run's preserved registry and,
    like excluded ones, leave the working set. Preserve wins when an index
    is both excluded and preserved: the link is still registered.
    """
    selection = parse_selection(command, len(working_set))

    for index in sorted(selection.preserve):
        state.preserve(working_set[index - 1])

    removed = selection.removed
    return [link for position, link in enumerate(working_set, start=1) if position not in removed]
