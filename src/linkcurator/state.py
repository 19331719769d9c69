"""
Run context shared by every stage of one curation run.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Set, Tuple

from linkcurator.frontier import Link


@dataclass(slots=True)
class RunState:
    """
    Mutable state that lives exactly as long as one run.

    Only the main thread mutates it; fetch workers hand their results back
    through the pool instead of writing here.
    """
    # url -> (href, anchor_text) pairs extracted from that page
    link_cache: Dict[str, List[Tuple[str, str]]] = field(default_factory=dict)
    # url -> page plain text, same insertion order as link_cache
    text_cache: Dict[str, str] = field(default_factory=dict)
    failed: Set[str] = field(default_factory=set)
    # Keyed by resolved URL, so indices reused across levels cannot collide
    preserved: Dict[str, Link] = field(default_factory=dict)
    applied: bool = False
    shown: Set[str] = field(default_factory=set)

    def is_known(self, url: str) -> bool:
        """True if url was already fetched (successfully or not) this run."""
        return url in self.link_cache or url in self.failed

    def record_page(self, url: str, links: List[Tuple[str, str]], text: str) -> None:
        """Store a successful fetch; first write wins."""
        if url in self.link_cache:
            return
        self.link_cache[url] = list(links)
        self.text_cache[url] = text

    def preserve(self, link: Link) -> bool:
        """Register a preserved link. Returns False if it was already registered."""
        if link.url in self.preserved:
            return False
        self.preserved[link.url] = link
        return True
