"""
Command-line interface for the curator.
"""
from __future__ import annotations

import argparse
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from linkcurator.aggregate import DEFAULT_OUTPUT_FILE, write_content
from linkcurator.checks import run_checks
from linkcurator.console import echo_err, read_command
from linkcurator.core import Curator
from linkcurator.errors import CuratorError
from linkcurator.fetcher import DEFAULT_TIMEOUT_S, DEFAULT_USER_AGENT, PageFetcher
from linkcurator.frontier import MAX_LINKS
from linkcurator.persistence import (
    DEFAULT_ROOT_URL_FILE,
    DEFAULT_SELECTION_FILE,
    RootUrlStore,
    SelectionLog,
)
from linkcurator.pool import DEFAULT_CONCURRENCY, FetchPool
from linkcurator.state import RunState

MODE_RESUME = "resume"


@dataclass(slots=True)
class CuratorConfig:
    """Settings for one run, as given on the command line."""
    resume: bool = False
    root_url_file: Path = Path(DEFAULT_ROOT_URL_FILE)
    selection_file: Path = Path(DEFAULT_SELECTION_FILE)
    output_file: Path = Path(DEFAULT_OUTPUT_FILE)
    concurrency: int = DEFAULT_CONCURRENCY
    max_links: int = MAX_LINKS
    timeout_s: float = DEFAULT_TIMEOUT_S
    user_agent: str = DEFAULT_USER_AGENT
    verbose: bool = False


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="linkcurator",
        description="Interactively curate the links of a site level by level and collect the text of every visited page.",
    )
    parser.add_argument(
        "mode",
        nargs="?",
        choices=[MODE_RESUME],
        help="'resume' loads saved selections so they can be replayed with the 'apply' command",
    )
    parser.add_argument("--self-test", action="store_true", help="Run built-in checks and exit")
    parser.add_argument("--root-url-file", default=DEFAULT_ROOT_URL_FILE,
                        help=f"File holding the root URL (default: {DEFAULT_ROOT_URL_FILE})")
    parser.add_argument("--selection-file", default=DEFAULT_SELECTION_FILE,
                        help=f"Selection log file (default: {DEFAULT_SELECTION_FILE})")
    parser.add_argument("--out", default=DEFAULT_OUTPUT_FILE,
                        help=f"Output file for concatenated page text (default: {DEFAULT_OUTPUT_FILE})")
    parser.add_argument("--concurrency", type=int, default=DEFAULT_CONCURRENCY,
                        help=f"Pages fetched in parallel (default: {DEFAULT_CONCURRENCY})")
    parser.add_argument("--max-links", type=int, default=MAX_LINKS,
                        help=f"Maximum distinct links per level (default: {MAX_LINKS})")
    parser.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT_S,
                        help=f"Request timeout in seconds (default: {DEFAULT_TIMEOUT_S:g})")
    parser.add_argument("--user-agent", default=DEFAULT_USER_AGENT, help="User-Agent header")
    parser.add_argument("--verbose", action="store_true", help="Show debug output")
    return parser


def config_from_args(args: argparse.Namespace) -> CuratorConfig:
    return CuratorConfig(
        resume=args.mode == MODE_RESUME,
        root_url_file=Path(args.root_url_file),
        selection_file=Path(args.selection_file),
        output_file=Path(args.out),
        concurrency=args.concurrency,
        max_links=args.max_links,
        timeout_s=args.timeout,
        user_agent=args.user_agent,
        verbose=args.verbose,
    )


def load_root_url(store: RootUrlStore) -> str:
    """Return the saved root URL, asking for it (and saving it) on first use."""
    url = store.load()
    if url:
        return url
    try:
        url = read_command("Enter the root URL: ").strip()
    except EOFError:
        url = ""
    if not url:
        raise CuratorError("no root URL given")
    store.save(url)
    return url


def run(config: CuratorConfig) -> None:
    """
    Run one curation session end to end.

    Raises:
        CuratorError: On fatal problems (corrupt selection log, fetch
                      backend unavailable, no root URL).
    """
    log = SelectionLog(config.selection_file)
    # Load before anything else so a corrupt log aborts before fetching
    saved = log.load() if config.resume else {}
    if config.resume:
        echo_err(f"Resuming with saved selections for {len(saved)} level(s)...")

    root_url = load_root_url(RootUrlStore(config.root_url_file))
    state = RunState()

    with PageFetcher(
        timeout_s=config.timeout_s,
        user_agent=config.user_agent,
        pool_size=config.concurrency,
        verbose=config.verbose,
    ) as fetcher:
        curator = Curator(
            pool=FetchPool(fetcher, state, concurrency=config.concurrency),
            state=state,
            log=log,
            saved=saved,
            replay=config.resume,
            max_links=config.max_links,
            verbose=config.verbose,
        )
        curator.run(root_url)

    write_content(state, config.output_file)
    echo_err("Tree building complete.")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the curator CLI."""
    args = build_parser().parse_args(argv)

    if args.self_test:
        return 0 if run_checks() else 1

    if args.concurrency < 1:
        echo_err("Error: --concurrency must be at least 1")
        return 2
    if args.max_links < 1:
        echo_err("Error: --max-links must be at least 1")
        return 2
    if args.timeout <= 0:
        echo_err("Error: --timeout must be greater than 0")
        return 2

    try:
        run(config_from_args(args))
    except CuratorError as e:
        echo_err(f"Error: {e}")
        return 1
    except KeyboardInterrupt:
        echo_err("\nInterrupted.")
        return 130

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
