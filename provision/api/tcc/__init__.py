"""
TCC grant tooling surface (stable API exports).

Re-exports the small API used by the provisioning pipeline and the CLI.
"""

from provision.api.errors import AuthorizationWriteFailed, RequirementExtractionFailed
from provision.api.tcc.access import (
    UI_AUTOMATION_GRANT,
    AccessGrant,
    AuthorizationRecord,
    build_insert_statement,
    grant_automation_access,
)
from provision.api.tcc.automation import GrantProgress, GrantState, enable_ui_automation
from provision.api.tcc.paths import TCC_DB, TERMINAL_APP
from provision.api.tcc.requirement import extract_compiled_requirement, parse_designated_requirement

__all__ = [
    "AccessGrant",
    "AuthorizationRecord",
    "AuthorizationWriteFailed",
    "GrantProgress",
    "GrantState",
    "RequirementExtractionFailed",
    "TCC_DB",
    "TERMINAL_APP",
    "UI_AUTOMATION_GRANT",
    "build_insert_statement",
    "enable_ui_automation",
    "extract_compiled_requirement",
    "grant_automation_access",
    "parse_designated_requirement",
]
