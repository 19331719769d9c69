"""
Interactive multi-level link curation: fetch a page, let an operator prune
its links, recurse into what survives, and collect the text of every page.
"""
from linkcurator.core import Curator, Level
from linkcurator.frontier import Link, build_frontier
from linkcurator.selection import Selection, apply_selection, parse_selection
from linkcurator.state import RunState

__version__ = "1.0.0"
__all__ = [
    "Curator",
    "Level",
    "Link",
    "RunState",
    "Selection",
    "apply_selection",
    "build_frontier",
    "parse_selection",
]
