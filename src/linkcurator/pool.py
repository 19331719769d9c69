"""
Bounded concurrent fetching with a per-run cache.
"""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Protocol, Sequence

from linkcurator.console import echo_err
from linkcurator.errors import FetchError
from linkcurator.fetcher import PageContent
from linkcurator.state import RunState

DEFAULT_CONCURRENCY = 10


class Fetcher(Protocol):
    def fetch(self, url: str) -> PageContent: ...


class FetchPool:
    """
    Runs a fetcher over batches of URLs, at most `concurrency` at a time.

    Every URL reaches the fetcher at most once per run. Failed URLs are
    remembered too and are not retried.
    """

    def __init__(self, fetcher: Fetcher, state: RunState, concurrency: int = DEFAULT_CONCURRENCY):
        if concurrency < 1:
            raise ValueError(f"concurrency must be at least 1, got {concurrency}")
        self.fetcher = fetcher
        self.state = state
        self.concurrency = concurrency

    def _fetch_one(self, url: str) -> Optional[PageContent]:
        # Runs on a worker thread: must not touch self.state
        echo_err(f"Fetching {url}")
        try:
            return self.fetcher.fetch(url)
        except FetchError as e:
            echo_err(f"Error: {e}")
            return None
        except Exception as e:
            # Any adapter fault degrades this URL only, never the batch
            echo_err(f"Error: failed to fetch {url}: {type(e).__name__}: {e}")
            return None

    def fetch_all(self, urls: Sequence[str]) -> List[Optional[PageContent]]:
        """
        Fetch every URL, returning one result per input in input order.

        A slot is None when its URL failed, now or earlier in the run.
        """
        pending: List[str] = []
        for url in urls:
            if not self.state.is_known(url) and url not in pending:
                pending.append(url)

        fetched: Dict[str, Optional[PageContent]] = {}
        if pending:
            workers = min(self.concurrency, len(pending))
            executor = ThreadPoolExecutor(max_workers=workers)
            try:
                # map() yields in submission order; draining it is the join barrier
                for url, page in zip(pending, executor.map(self._fetch_one, pending)):
                    fetched[url] = page
            except KeyboardInterrupt:
                # Drop queued fetches instead of waiting for all of them
                executor.shutdown(wait=False, cancel_futures=True)
                raise
            executor.shutdown()

        # Cache updates happen here, on the calling thread, in input order
        for url in pending:
            page = fetched[url]
            if page is None:
                self.state.failed.add(url)
            else:
                self.state.record_page(url, page.links, page.text)

        return [self._cached(url) for url in urls]

    def _cached(self, url: str) -> Optional[PageContent]:
        if url in self.state.link_cache:
            return PageContent(
                links=list(self.state.link_cache[url]),
                text=self.state.text_cache.get(url, ""),
            )
        return None
