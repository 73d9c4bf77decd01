"""
Unattended UI-automation grant.

Extraction runs first because the write consumes its output:

    START -> REQUIREMENT_EXTRACTED -> RECORD_WRITTEN

Any failure moves to FAILED and re-raises; there is no retry edge, since a
missing signature or a denied escalation will not change on a second attempt.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from provision.api.exec_record import CommandRunner
from provision.api.tcc.access import (
    UI_AUTOMATION_GRANT,
    AccessGrant,
    AuthorizationRecord,
    grant_automation_access,
)
from provision.api.tcc.paths import TCC_DB, TERMINAL_APP
from provision.api.tcc.requirement import extract_compiled_requirement


class GrantState(str, Enum):
    START = "start"
    REQUIREMENT_EXTRACTED = "requirement_extracted"
    RECORD_WRITTEN = "record_written"
    FAILED = "failed"


_TRANSITIONS = {
    GrantState.START: {GrantState.REQUIREMENT_EXTRACTED, GrantState.FAILED},
    GrantState.REQUIREMENT_EXTRACTED: {GrantState.RECORD_WRITTEN, GrantState.FAILED},
    GrantState.RECORD_WRITTEN: set(),
    GrantState.FAILED: set(),
}


@dataclass
class GrantProgress:
    state: GrantState = GrantState.START
    history: List[GrantState] = field(default_factory=lambda: [GrantState.START])
    error: Optional[BaseException] = None

    def advance(self, new_state: GrantState) -> None:
        if new_state not in _TRANSITIONS[self.state]:
            raise ValueError(f"illegal grant transition {self.state.value} -> {new_state.value}")
        self.state = new_state
        self.history.append(new_state)

    def fail(self, exc: BaseException) -> None:
        self.error = exc
        self.advance(GrantState.FAILED)


def enable_ui_automation(
    *,
    app_path: Path = TERMINAL_APP,
    grant: AccessGrant = UI_AUTOMATION_GRANT,
    db_path: Path = TCC_DB,
    runner: Optional[CommandRunner] = None,
    progress: Optional[GrantProgress] = None,
) -> AuthorizationRecord:
    """Pin `app_path`'s code identity into a TCC grant for `grant.client`."""
    progress = progress if progress is not None else GrantProgress()
    if progress.state is not GrantState.START:
        raise ValueError(f"grant progress must start at {GrantState.START.value}, not {progress.state.value}")
    try:
        csreq = extract_compiled_requirement(app_path, runner=runner)
        progress.advance(GrantState.REQUIREMENT_EXTRACTED)
        record = grant_automation_access(csreq, grant=grant, db_path=db_path, runner=runner)
        progress.advance(GrantState.RECORD_WRITTEN)
    except Exception as exc:
        progress.fail(exc)
        raise
    return record
