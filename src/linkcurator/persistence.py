"""
Files that survive between runs: the root URL and the selection log.
"""
from __future__ import annotations

import re
from collections import defaultdict
from pathlib import Path
from typing import Dict, List, Optional

from linkcurator.console import echo_err
from linkcurator.errors import SelectionLogError

DEFAULT_ROOT_URL_FILE = "root_url.txt"
DEFAULT_SELECTION_FILE = "removal_selections.txt"

_LINE_RE = re.compile(r"^Level ([0-9]+): ?(.*)$")


def format_entry(level: int, command: str) -> str:
    """Render one selection log line (without newline)."""
    return f"Level {level}: {command}"


class SelectionLog:
    """
    Append-only log of every selection command, one `Level <n>: <command>`
    line per command in the order they were issued.
    """

    def __init__(self, path: Path | str = DEFAULT_SELECTION_FILE):
        self.path = Path(path)

    def load(self) -> Dict[int, List[str]]:
        """
        Read the log and group commands by level, keeping issue order.

        Raises:
            SelectionLogError: If a non-blank line does not match the format.
        """
        if not self.path.exists():
            return {}

        grouped: Dict[int, List[str]] = defaultdict(list)
        text = self.path.read_text(encoding="utf-8")
        for line_no, raw in enumerate(text.splitlines(), start=1):
            if not raw.strip():
                continue
            match = _LINE_RE.match(raw)
            if not match:
                raise SelectionLogError(str(self.path), line_no, raw)
            grouped[int(match.group(1))].append(match.group(2))

        return dict(grouped)

    def append(self, level: int, command: str) -> None:
        entry = format_entry(level, command)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as fh:
            fh.write(entry + "\n")
        echo_err(f"Selection saved: {entry}")


class RootUrlStore:
    """Remembers the seed URL so later runs start from the same place."""

    def __init__(self, path: Path | str = DEFAULT_ROOT_URL_FILE):
        self.path = Path(path)

    def load(self) -> Optional[str]:
        if not self.path.exists():
            return None
        url = self.path.read_text(encoding="utf-8").strip()
        if not url:
            return None
        echo_err(f"Loaded root URL from {self.path}: {url}")
        return url

    def save(self, url: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(url.strip(), encoding="utf-8")
        echo_err(f"Root URL saved to {self.path}")
