"""
TCC access rows for pre-authorizing a client application.

Only one record shape is produced: a bundle-identifier client allowed to use
one service, pinned to a compiled code requirement. The row is written with a
single `INSERT OR REPLACE`, keyed by `(service, client)` in the store, so
repeated or concurrent grants leave one row and need no locking here.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from provision.api import console, exec_record
from provision.api.errors import AuthorizationWriteFailed
from provision.api.exec_record import CommandRunner, record_diagnostic, record_ok
from provision.api.tcc.paths import SQLITE3, SUDO, TCC_DB

CLIENT_TYPE_BUNDLE_ID = 0
AUTH_VALUE_ALLOWED = 2
AUTH_REASON_ADMIN_OVERRIDE = 4
AUTH_VERSION = 1

ACCESS_COLUMNS = (
    "service",
    "client",
    "client_type",
    "auth_value",
    "auth_reason",
    "auth_version",
    "csreq",
)

UNKNOWN_SQLITE_ERROR = "(unknown SQLite error)"


@dataclass(frozen=True)
class AccessGrant:
    """The fixed authorization parameters of a grant (everything except csreq)."""

    service: str
    client: str
    client_type: int = CLIENT_TYPE_BUNDLE_ID
    auth_value: int = AUTH_VALUE_ALLOWED
    auth_reason: int = AUTH_REASON_ADMIN_OVERRIDE
    auth_version: int = AUTH_VERSION


UI_AUTOMATION_GRANT = AccessGrant(service="kTCCServiceAccessibility", client="com.apple.Terminal")


@dataclass(frozen=True)
class AuthorizationRecord:
    grant: AccessGrant
    csreq: bytes

    @property
    def csreq_hex(self) -> str:
        return self.csreq.hex()


def _sql_text(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def build_insert_statement(record: AuthorizationRecord) -> str:
    """Render the upsert for `record` as one sqlite3 statement."""
    g = record.grant
    values = ",".join(
        [
            _sql_text(g.service),
            _sql_text(g.client),
            str(int(g.client_type)),
            str(int(g.auth_value)),
            str(int(g.auth_reason)),
            str(int(g.auth_version)),
            f"X'{record.csreq_hex}'",
        ]
    )
    return f"INSERT OR REPLACE INTO access ({', '.join(ACCESS_COLUMNS)}) VALUES ({values});"


def write_record(
    record: AuthorizationRecord,
    *,
    db_path: Path = TCC_DB,
    runner: Optional[CommandRunner] = None,
) -> None:
    """Apply `record` through `sudo sqlite3`; raise AuthorizationWriteFailed on failure."""
    runner = runner or exec_record.run_command
    statement = build_insert_statement(record)
    res = runner([SUDO, SQLITE3, str(db_path), statement])
    if not record_ok(res):
        raise AuthorizationWriteFailed(
            res.get("exit_code"),  # type: ignore[arg-type]
            record_diagnostic(res, UNKNOWN_SQLITE_ERROR),
            db_path=str(db_path),
        )


def grant_automation_access(
    compiled_requirement: bytes,
    *,
    grant: AccessGrant = UI_AUTOMATION_GRANT,
    db_path: Path = TCC_DB,
    runner: Optional[CommandRunner] = None,
) -> AuthorizationRecord:
    record = AuthorizationRecord(grant=grant, csreq=bytes(compiled_requirement))
    write_record(record, db_path=db_path, runner=runner)
    console.info(f"Granted {grant.service} to {grant.client}.")
    return record
