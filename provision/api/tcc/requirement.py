"""
Designated-requirement extraction for code-signed bundles.

`codesign -d -r-` prints the bundle's requirement set as text; the line
`designated => <expr>` carries the designated requirement. `csreq` compiles
that expression into the binary form stored in TCC's `csreq` column.

The bundle must already be installed and signed. Signature validity is not
checked here beyond what `codesign` reports through its exit code.
"""

from __future__ import annotations

import re
import tempfile
from pathlib import Path
from typing import Optional

from provision.api import console, exec_record
from provision.api.errors import RequirementExtractionFailed
from provision.api.exec_record import CommandRunner, record_diagnostic, record_ok
from provision.api.tcc.paths import CODESIGN, CSREQ, CSREQ_BLOB_NAME

# Horizontal whitespace only: a blank designated line must not swallow the next line.
DESIGNATED_RE = re.compile(r"designated[ \t]*=>[ \t]*(.*)")


def parse_designated_requirement(text: str) -> Optional[str]:
    """Return the designated requirement expression from codesign output, if any."""
    match = DESIGNATED_RE.search(text or "")
    if match is None:
        return None
    expr = match.group(1).strip()
    return expr or None


def display_requirement(bundle_path: Path, *, runner: Optional[CommandRunner] = None) -> str:
    """Run `codesign -d -r-` and return the designated requirement source text."""
    runner = runner or exec_record.run_command
    record = runner([CODESIGN, "-d", "-r-", str(bundle_path)])
    if not record_ok(record):
        raise RequirementExtractionFailed(
            f"Failed to get code signature designation for '{bundle_path}'.",
            bundle_path=str(bundle_path),
            exit_code=record.get("exit_code"),  # type: ignore[arg-type]
            diagnostic=record_diagnostic(record),
        )
    # Requirement text goes to stdout; older codesign builds mix it into stderr.
    for stream in ("stdout", "stderr"):
        expr = parse_designated_requirement(str(record.get(stream) or ""))
        if expr is not None:
            return expr
    raise RequirementExtractionFailed(
        f"No designated requirement found in code signature of '{bundle_path}'.",
        bundle_path=str(bundle_path),
        exit_code=0,
    )


def compile_requirement(
    expr: str,
    out_path: Path,
    *,
    bundle_path: Path,
    runner: Optional[CommandRunner] = None,
) -> bytes:
    """Compile `expr` with `csreq -r- -b out_path` and return the written bytes."""
    runner = runner or exec_record.run_command
    record = runner([CSREQ, "-r-", "-b", str(out_path)], input_bytes=expr.encode("utf-8"))
    if not record_ok(record):
        raise RequirementExtractionFailed(
            f"Failed to compile designated requirement for '{bundle_path}'.",
            bundle_path=str(bundle_path),
            exit_code=record.get("exit_code"),  # type: ignore[arg-type]
            diagnostic=record_diagnostic(record),
        )
    try:
        blob = out_path.read_bytes()
    except FileNotFoundError:
        blob = b""
    if not blob:
        raise RequirementExtractionFailed(
            f"csreq produced no compiled requirement for '{bundle_path}'.",
            bundle_path=str(bundle_path),
            exit_code=0,
        )
    return blob


def extract_compiled_requirement(bundle_path: Path, *, runner: Optional[CommandRunner] = None) -> bytes:
    """
    Return the compiled designated requirement of an installed bundle.

    The scratch directory holding csreq's output is removed on every exit
    path, including failures raised by either tool.
    """
    bundle_path = Path(bundle_path)
    with tempfile.TemporaryDirectory(prefix="setup_powerpoint_csreq.") as td:
        expr = display_requirement(bundle_path, runner=runner)
        console.debug(f"designated requirement for {bundle_path}: {expr}")
        return compile_requirement(expr, Path(td) / CSREQ_BLOB_NAME, bundle_path=bundle_path, runner=runner)
