"""
Page fetching and link/text extraction.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple
from urllib.parse import urlparse

import requests
from bs4 import BeautifulSoup, FeatureNotFound
from requests.adapters import HTTPAdapter

from linkcurator.console import echo_err
from linkcurator.errors import FetcherStartupError, FetchError

DEFAULT_TIMEOUT_S = 30.0
DEFAULT_USER_AGENT = "LinkCurator/1.0"

# Content root per host; anything not listed uses <body>
CONTENT_SELECTORS: dict[str, str] = {
    "paper.dropbox.com": "#editor-1",
    "scrapbox.io": "#editor",
}

# Navigation chrome whose links are never offered for curation
CHROME_IDS: Tuple[str, ...] = ("header", "footer")


@dataclass(slots=True)
class PageContent:
    """What one page yields: its (href, anchor_text) pairs and its plain text."""
    links: List[Tuple[str, str]] = field(default_factory=list)
    text: str = ""


def content_selector(url: str) -> str:
    """Pick the CSS selector of the element holding the page's content."""
    hostname = (urlparse(url).hostname or "").lower()
    for host, selector in CONTENT_SELECTORS.items():
        if hostname == host or hostname.endswith("." + host):
            return selector
    return "body"


def parse_page(html: str, url: str) -> PageContent:
    """
    Extract links and plain text from a page's HTML.

    Links inside #header and #footer are dropped before extraction. Only
    anchors with both a non-empty href and non-empty text are kept.

    Raises:
        FetchError: If the page has no content element for its host.
    """
    soup = BeautifulSoup(html, "lxml")

    for chrome_id in CHROME_IDS:
        chrome = soup.find(id=chrome_id)
        if chrome is not None:
            for anchor in chrome.select("a[href]"):
                anchor.decompose()

    selector = content_selector(url)
    root = soup.select_one(selector)
    if root is None:
        raise FetchError(url, f"content element {selector!r} not found")

    links = [
        (href, anchor_text)
        for a in root.select("a[href]")
        if (href := (a.get("href") or "").strip()) and (anchor_text := a.get_text(strip=True))
    ]
    text = root.get_text(separator="\n", strip=True)

    return PageContent(links=links, text=text)


class PageFetcher:
    """
    Fetches pages over HTTP and extracts their content.

    Safe to call from several worker threads at once; the shared session's
    connection pool is sized to the number of workers.
    """

    def __init__(
        self,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        user_agent: str = DEFAULT_USER_AGENT,
        pool_size: int = 10,
        verbose: bool = False,
    ):
        self.timeout_s = timeout_s
        self.user_agent = user_agent
        self.pool_size = pool_size
        self.verbose = verbose
        self._session: Optional[requests.Session] = None

    def open(self) -> "PageFetcher":
        """
        Start the backend.

        Raises:
            FetcherStartupError: If the HTML parser or HTTP session cannot be set up.
        """
        try:
            BeautifulSoup("<html></html>", "lxml")
        except FeatureNotFound as e:
            raise FetcherStartupError("lxml parser is not available to BeautifulSoup") from e

        session = requests.Session()
        session.headers["User-Agent"] = self.user_agent
        adapter = HTTPAdapter(pool_connections=self.pool_size, pool_maxsize=self.pool_size)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        self._session = session
        if self.verbose:
            echo_err("DEBUG: HTTP session started")
        return self

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None

    def __enter__(self) -> "PageFetcher":
        return self.open()

    def __exit__(self, *exc_info) -> None:
        self.close()

    def fetch(self, url: str) -> PageContent:
        """
        Fetch one page and extract its links and text.

        Raises:
            FetchError: On network errors, timeouts, HTTP errors, non-HTML
                        responses or pages without a content element.
        """
        if self._session is None:
            raise FetchError(url, "fetcher is not open")

        try:
            resp = self._session.get(url, timeout=self.timeout_s, allow_redirects=True)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise FetchError(url, str(e)) from e

        content_type = (resp.headers.get("content-type") or "").lower()
        if "html" not in content_type:
            raise FetchError(url, f"not an HTML page ({content_type or 'no content-type'})")

        page = parse_page(resp.text, url)
        if self.verbose:
            echo_err(f"DEBUG: Extracted {len(page.links)} links from {url}")
        return page
