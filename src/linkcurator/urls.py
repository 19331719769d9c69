"""
URL resolution helpers.
"""
from __future__ import annotations

from typing import Optional
from urllib.parse import urljoin, urlsplit


def resolve_url(base: str, href: str) -> Optional[str]:
    """
    Resolve an href against the page it was found on.

    - Joins relative hrefs against base (standard RFC 3986 resolution)
    - Keeps query strings and fragments untouched
    - Returns None for anything that does not yield an absolute URL

    Scraped markup is full of junk hrefs, so None is the normal way of
    saying "skip this one" rather than an error.
    """
    if not href or not href.strip():
        return None

    try:
        resolved = urljoin(base, href.strip())
        parsed = urlsplit(resolved)
        # Accessing .port validates the netloc (raises on garbage ports)
        _ = parsed.port
    except ValueError:
        return None

    if not parsed.scheme:
        return None
    if parsed.scheme in ("http", "https") and not parsed.hostname:
        return None

    return resolved
