"""
End-to-end provisioning of Microsoft PowerPoint on a macOS CI runner.

Steps run strictly in order and each runs inside a console group:

1. platform gate (darwin only)
2. download the pinned updater package (skipped with an explicit installer)
3. install it with `sudo installer`
4. report the installed version as a notice
5. apply the configuration-policy scripts
6. grant Terminal.app UI automation through TCC

The first ProvisionError aborts the run.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from provision.api import console
from provision.api.errors import UnsupportedPlatform
from provision.api.exec_record import CommandRunner
from provision.api.powerpoint.download import download_installer
from provision.api.powerpoint.installer import BundleVersion, install_package, report_installed_version
from provision.api.powerpoint.paths import INSTALL_TARGET, INSTALLER_URL, POLICIES_DIR
from provision.api.powerpoint.policies import apply_policies
from provision.api.tcc.access import UI_AUTOMATION_GRANT, AccessGrant, AuthorizationRecord
from provision.api.tcc.automation import enable_ui_automation
from provision.api.tcc.paths import TCC_DB, TERMINAL_APP


def require_macos(platform_name: str = sys.platform) -> None:
    if platform_name != "darwin":
        raise UnsupportedPlatform(platform_name)


@dataclass
class ProvisionOptions:
    installer_url: str = INSTALLER_URL
    installer_path: Optional[Path] = None
    install_target: Path = INSTALL_TARGET
    policies_dir: Path = POLICIES_DIR
    automation_app: Path = TERMINAL_APP
    grant: AccessGrant = UI_AUTOMATION_GRANT
    tcc_db: Path = TCC_DB
    skip_grant: bool = False


@dataclass
class ProvisionResult:
    installer_path: Path
    app_path: Path
    version: BundleVersion
    policies: List[str] = field(default_factory=list)
    authorization: Optional[AuthorizationRecord] = None


def provision(
    options: Optional[ProvisionOptions] = None,
    *,
    runner: Optional[CommandRunner] = None,
    platform_name: str = sys.platform,
) -> ProvisionResult:
    options = options or ProvisionOptions()
    require_macos(platform_name)
    console.info("Setting up Microsoft PowerPoint for Mac")

    if options.installer_path is not None:
        installer_path = options.installer_path
        console.info(f"Using installer package {installer_path}")
    else:
        with console.group("Download Installer"):
            installer_path = download_installer(options.installer_url)

    with console.group("Install Microsoft PowerPoint"):
        app_path = install_package(
            installer_path,
            target=options.install_target,
            app_path=options.install_target / "Microsoft PowerPoint.app",
            runner=runner,
        )

    version = report_installed_version(app_path)

    with console.group("Configure Microsoft PowerPoint policies"):
        applied = apply_policies(options.policies_dir, runner=runner)

    result = ProvisionResult(installer_path=installer_path, app_path=app_path, version=version, policies=applied)
    if options.skip_grant:
        console.warn("Skipping UI automation grant (--skip-grant).")
        return result

    with console.group("Enable user interface automation"):
        result.authorization = enable_ui_automation(
            app_path=options.automation_app,
            grant=options.grant,
            db_path=options.tcc_db,
            runner=runner,
        )
    return result
