"""Apply the static configuration-policy scripts shipped with the tool."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence

from provision.api import console, exec_record
from provision.api.errors import PolicyFailed
from provision.api.exec_record import CommandRunner, record_diagnostic, record_ok
from provision.api.powerpoint.paths import POLICIES_DIR, POLICY_SCRIPTS


def apply_policies(
    policies_dir: Path = POLICIES_DIR,
    *,
    scripts: Sequence[str] = POLICY_SCRIPTS,
    runner: Optional[CommandRunner] = None,
) -> List[str]:
    """Run each present script with bash in order; missing scripts are skipped."""
    runner = runner or exec_record.run_command
    applied: List[str] = []
    for script in scripts:
        script_path = policies_dir / script
        if not script_path.exists():
            console.info(f"Skipping policy script '{script}' as it does not exist.")
            continue
        console.info(f"Applying policy script '{script}'...")
        console.debug(f"Executing script at path: '{script_path}'")
        record = runner(["bash", str(script_path)], cwd=policies_dir)
        if not record_ok(record):
            raise PolicyFailed(script, record.get("exit_code"), record_diagnostic(record))  # type: ignore[arg-type]
        applied.append(script)
    return applied
