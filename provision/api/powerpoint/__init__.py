"""
PowerPoint provisioning surface.

Re-exports the pipeline entry points used by the CLI and tests.
"""

from provision.api.powerpoint.download import download_installer
from provision.api.powerpoint.installer import BundleVersion, install_package, read_bundle_version, report_installed_version
from provision.api.powerpoint.paths import INSTALLER_URL, POLICY_SCRIPTS, POWERPOINT_APP
from provision.api.powerpoint.pipeline import ProvisionOptions, ProvisionResult, provision, require_macos
from provision.api.powerpoint.policies import apply_policies

__all__ = [
    "BundleVersion",
    "INSTALLER_URL",
    "POLICY_SCRIPTS",
    "POWERPOINT_APP",
    "ProvisionOptions",
    "ProvisionResult",
    "apply_policies",
    "download_installer",
    "install_package",
    "provision",
    "read_bundle_version",
    "report_installed_version",
    "require_macos",
]
