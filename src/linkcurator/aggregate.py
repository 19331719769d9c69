"""
Concatenate the text of every fetched page into one file.
"""
from __future__ import annotations

from pathlib import Path

from linkcurator.console import echo_err
from linkcurator.state import RunState

DEFAULT_OUTPUT_FILE = "result.txt"


def aggregate_content(state: RunState) -> str:
    """Join page texts in fetch order, one blank line between pages."""
    return "".join(f"{text}\n\n" for text in state.text_cache.values())


def write_content(state: RunState, path: Path | str = DEFAULT_OUTPUT_FILE) -> Path:
    """Write the aggregated text once the run is over."""
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(aggregate_content(state), encoding="utf-8")
    echo_err(f"Concatenated content of {len(state.text_cache)} pages saved to {output_path}")
    return output_path
