"""Shared command execution record helpers."""

from __future__ import annotations

import os
import subprocess
import time
from pathlib import Path
from typing import Callable, Dict, Optional, Sequence

from provision.api import path_utils

# Signature shared by `run_command` and the fakes used in tests.
CommandRunner = Callable[..., Dict[str, object]]

# Child processes block without a deadline unless the environment asks for one.
try:
    DEFAULT_TIMEOUT_S: Optional[float] = float(os.environ["SETUP_POWERPOINT_CMD_TIMEOUT_S"])
except (KeyError, ValueError):
    DEFAULT_TIMEOUT_S = None


def _decode(data: Optional[bytes]) -> str:
    if not data:
        return ""
    return data.decode("utf-8", errors="replace")


def run_command(
    cmd: Sequence[str],
    *,
    input_bytes: Optional[bytes] = None,
    cwd: Optional[Path] = None,
    timeout_s: Optional[float] = DEFAULT_TIMEOUT_S,
) -> Dict[str, object]:
    """
    Run `cmd` and return a structured record.

    The record always carries `command`, `exit_code`, `stdout` and `stderr`.
    Spawn failures and timeouts never raise: they come back with
    `exit_code=None` and an `error` string so callers decide what is fatal.
    """
    started_at_unix_s = time.time()
    try:
        res = subprocess.run(
            list(cmd),
            input=input_bytes,
            capture_output=True,
            cwd=str(cwd) if cwd else None,
            timeout=timeout_s,
        )
        finished_at_unix_s = time.time()
        return {
            "command": path_utils.displayable_command(cmd),
            "exit_code": res.returncode,
            "stdout": _decode(res.stdout),
            "stderr": _decode(res.stderr),
            "timeout_s": timeout_s,
            "cmd_started_at_unix_s": started_at_unix_s,
            "cmd_finished_at_unix_s": finished_at_unix_s,
            "cmd_duration_s": finished_at_unix_s - started_at_unix_s,
        }
    except subprocess.TimeoutExpired as exc:
        finished_at_unix_s = time.time()
        return {
            "command": path_utils.displayable_command(cmd),
            "exit_code": None,
            "stdout": _decode(exc.stdout),
            "stderr": _decode(exc.stderr),
            "error": "timeout",
            "timed_out": True,
            "timeout_s": timeout_s,
            "cmd_started_at_unix_s": started_at_unix_s,
            "cmd_finished_at_unix_s": finished_at_unix_s,
            "cmd_duration_s": finished_at_unix_s - started_at_unix_s,
        }
    except OSError as exc:
        finished_at_unix_s = time.time()
        return {
            "command": path_utils.displayable_command(cmd),
            "exit_code": None,
            "stdout": "",
            "stderr": "",
            "error": f"{type(exc).__name__}: {exc}",
            "timeout_s": timeout_s,
            "cmd_started_at_unix_s": started_at_unix_s,
            "cmd_finished_at_unix_s": finished_at_unix_s,
            "cmd_duration_s": finished_at_unix_s - started_at_unix_s,
        }


def record_ok(record: Dict[str, object]) -> bool:
    return record.get("exit_code") == 0


def record_diagnostic(record: Dict[str, object], placeholder: str = "") -> str:
    """Prefer stderr, then stdout, then the spawn error, then `placeholder`."""
    for key in ("stderr", "stdout", "error"):
        value = record.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return placeholder
