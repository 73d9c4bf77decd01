#!/usr/bin/env python3
"""
Unified test driver for setup-powerpoint.

Supported entrypoint: `python -m provision.tests.ci` from the repo root.

This driver runs:
1) pytest (unit tests; `system` tests run only on macOS hosts)
2) `bash -n` over the shipped policy scripts
"""

from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[2]
POLICIES_DIR = REPO_ROOT / "provision" / "api" / "powerpoint" / "policies"


def run_python_harness() -> None:
    env = os.environ.copy()
    env["PYTHONPATH"] = str(REPO_ROOT)
    cmd = [sys.executable, "-m", "pytest"]
    print(f"[ci] python-harness: running {' '.join(cmd)}", flush=True)
    subprocess.check_call(cmd, cwd=REPO_ROOT, env=env)


def run_policy_syntax_check() -> None:
    scripts = sorted(POLICIES_DIR.glob("*.sh"))
    for script in scripts:
        print(f"[ci] policy-syntax: bash -n {script.name}", flush=True)
        subprocess.check_call(["bash", "-n", str(script)])


def main() -> None:
    run_python_harness()
    run_policy_syntax_check()


if __name__ == "__main__":
    main()
