"""
Diagnostic output. Everything goes to stderr; stdout is never used.
"""
from __future__ import annotations

import sys


def echo_err(message: str = "") -> None:
    """Write one line to stderr."""
    sys.stderr.write(f"{message}\n")
    sys.stderr.flush()


def read_command(question: str) -> str:
    """
    Prompt on stderr and read one line from stdin.

    Raises:
        EOFError: When stdin is exhausted.
    """
    sys.stderr.write(question)
    sys.stderr.flush()
    line = sys.stdin.readline()
    if not line:
        raise EOFError
    return line.rstrip("\r\n")
