"""
Pinned installer and install locations for Microsoft PowerPoint.

The updater package is pinned to one build; bump POWERPOINT_PACKAGE_NAME to
move the provisioned version.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

POWERPOINT_PACKAGE_NAME = "Microsoft_PowerPoint_16.102.25101829_Updater.pkg"
INSTALLER_URL = (
    "https://officecdn.microsoft.com/pr/C1297A47-86C4-4C1F-97FA-950631F94777/MacAutoupdate/"
    f"{POWERPOINT_PACKAGE_NAME}"
)

INSTALL_TARGET = Path("/Applications")
POWERPOINT_APP = INSTALL_TARGET / "Microsoft PowerPoint.app"

# Repo-local policy scripts (configuration profiles applied via `defaults`).
POLICIES_DIR = Path(__file__).resolve().parent / "policies"
POLICY_SCRIPTS = (
    "policy_ms_autoupdate.sh",
    "policy_ms_office.sh",
    "policy_ms_powerpoint.sh",
)


def runner_temp() -> Path:
    """Scratch root for downloads: $RUNNER_TEMP on CI, the system temp dir elsewhere."""
    return Path(os.environ.get("RUNNER_TEMP") or tempfile.gettempdir())
