"""
Operator console output for provisioning runs.

Progress lines use the `[+]` / `[!]` prefixes. When running under GitHub
Actions (`GITHUB_ACTIONS=true`) the helpers also emit workflow commands so
groups fold in the job log and notices/errors surface as annotations.
"""

from __future__ import annotations

import os
import sys
from contextlib import contextmanager
from typing import Iterator, Optional, TextIO


def in_actions() -> bool:
    return os.environ.get("GITHUB_ACTIONS", "").lower() == "true"


def _escape_data(text: str) -> str:
    # Workflow command values must not contain raw newlines or percent signs.
    return text.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def _emit(line: str, stream: Optional[TextIO] = None) -> None:
    print(line, file=stream or sys.stdout, flush=True)


def info(message: str) -> None:
    _emit(f"[+] {message}")


def warn(message: str) -> None:
    _emit(f"[!] {message}")


def debug(message: str) -> None:
    if in_actions():
        _emit(f"::debug::{_escape_data(message)}")
    elif os.environ.get("SETUP_POWERPOINT_DEBUG"):
        _emit(f"[debug] {message}")


def notice(message: str) -> None:
    if in_actions():
        _emit(f"::notice::{_escape_data(message)}")
    else:
        _emit(f"[+] {message}")


def error(message: str) -> None:
    if in_actions():
        _emit(f"::error::{_escape_data(message)}")
    else:
        _emit(f"[!] {message}", sys.stderr)


def set_failed(message: str) -> None:
    """Report the terminating error of a run; callers pick the exit code."""
    error(message)


@contextmanager
def group(title: str) -> Iterator[None]:
    if in_actions():
        _emit(f"::group::{title}")
    else:
        _emit(f"== {title} ==")
    try:
        yield
    finally:
        if in_actions():
            _emit("::endgroup::")
