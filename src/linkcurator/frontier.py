"""
Frontier building: turn a level's raw page links into its working set.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from linkcurator.urls import resolve_url

# Safety cap on distinct links per level; the remainder is dropped silently
MAX_LINKS = 2000


@dataclass(frozen=True, slots=True)
class Link:
    """A resolved outbound link and the anchor text it was found under."""
    url: str
    anchor_text: str


def build_frontier(
    seeds: Sequence[str],
    results: Sequence[Optional[Sequence[Tuple[str, str]]]],
    max_links: int = MAX_LINKS,
) -> List[Link]:
    """
    Merge the links found on every seed page into one sorted working set.

    Args:
        seeds: Seed URLs of this level, in order.
        results: For each seed, its (href, anchor_text) pairs, or None when
                 the fetch failed.
        max_links: Maximum number of distinct links to keep.

    Returns:
        Distinct links sorted by URL. Display indices are derived from this
        order, so it must be reproducible for identical inputs.
    """
    merged: Dict[str, Link] = {}

    for seed, pairs in zip(seeds, results):
        if not pairs:
            continue
        for href, anchor_text in pairs:
            if not anchor_text:
                continue
            url = resolve_url(seed, href)
            if url is None or url in merged:
                continue
            if len(merged) >= max_links:
                break
            merged[url] = Link(url=url, anchor_text=anchor_text)
        if len(merged) >= max_links:
            break

    return sorted(merged.values(), key=lambda link: link.url)
