"""
Package installation and version reporting.

`installer` needs root, so it runs through sudo; CI runners grant
passwordless sudo to the job user.
"""

from __future__ import annotations

import plistlib
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from provision.api import console, exec_record
from provision.api.errors import InstallFailed
from provision.api.exec_record import CommandRunner, record_diagnostic, record_ok
from provision.api.powerpoint.paths import INSTALL_TARGET, POWERPOINT_APP

UNKNOWN = "(unknown)"


def install_package(
    pkg_path: Path,
    *,
    target: Path = INSTALL_TARGET,
    app_path: Path = POWERPOINT_APP,
    runner: Optional[CommandRunner] = None,
) -> Path:
    runner = runner or exec_record.run_command
    console.info("Installing Microsoft PowerPoint application...")
    record = runner(["sudo", "installer", "-pkg", str(pkg_path), "-target", str(target)])
    if not record_ok(record):
        raise InstallFailed(record.get("exit_code"), record_diagnostic(record))  # type: ignore[arg-type]
    return app_path


@dataclass(frozen=True)
class BundleVersion:
    version: str
    build: str

    def describe(self, name: str = "Microsoft PowerPoint") -> str:
        return f"{name} version {self.version} ({self.build})"


def _read_info_plist(app_path: Path) -> dict:
    plist_path = app_path / "Contents" / "Info.plist"
    try:
        with plist_path.open("rb") as fh:
            doc = plistlib.load(fh)
    except (OSError, plistlib.InvalidFileException, ValueError) as exc:
        console.error(f"Failed to read '{plist_path}'. Error: {exc}")
        return {}
    if not isinstance(doc, dict):
        console.error(f"Failed to read '{plist_path}'. Error: top-level object is not a dict")
        return {}
    return doc


def read_bundle_version(app_path: Path) -> BundleVersion:
    """Read the marketing version and build number; missing values become `(unknown)`."""
    doc = _read_info_plist(app_path)
    version = doc.get("CFBundleShortVersionString")
    build_raw = doc.get("CFBundleVersion")
    for key, value in (("CFBundleShortVersionString", version), ("CFBundleVersion", build_raw)):
        if doc and not isinstance(value, str):
            console.error(f"Failed to read '{app_path}' key '{key}'.")
    version = version.strip() if isinstance(version, str) and version.strip() else UNKNOWN
    # CFBundleVersion looks like 16.102.25101829; the last component is the build.
    build = build_raw.strip().split(".")[-1] if isinstance(build_raw, str) and build_raw.strip() else UNKNOWN
    return BundleVersion(version=version, build=build)


def report_installed_version(app_path: Path = POWERPOINT_APP) -> BundleVersion:
    version = read_bundle_version(app_path)
    console.notice(version.describe())
    return version
