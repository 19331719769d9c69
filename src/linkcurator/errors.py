"""
Exception types raised by the curator.
"""
from __future__ import annotations


class CuratorError(Exception):
    """Base class for all curator errors."""


class FetchError(CuratorError):
    """A single page could not be fetched or parsed. Recoverable."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"failed to fetch {url}: {reason}")


class FetcherStartupError(CuratorError):
    """The fetch backend cannot be started at all. Fatal."""


class SelectionLogError(CuratorError):
    """The persisted selection log is corrupt. Fatal."""

    def __init__(self, path: str, line_no: int, line: str):
        self.path = path
        self.line_no = line_no
        self.line = line
        super().__init__(f"{path}:{line_no}: malformed selection line: {line!r}")
