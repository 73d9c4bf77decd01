"""Error types shared by the provisioning steps."""

from __future__ import annotations

from typing import Dict, Optional


class ProvisionError(RuntimeError):
    """Base class for failures that terminate a provisioning run."""

    code = "provision_error"

    def __init__(self, message: str, *, details: Optional[Dict[str, object]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, object]:
        payload: Dict[str, object] = {
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            payload["details"] = self.details
        return payload


class UnsupportedPlatform(ProvisionError):
    code = "unsupported_platform"

    def __init__(self, platform_name: str) -> None:
        super().__init__(
            f"The setup-powerpoint action supports macOS runner only. Detected platform: '{platform_name}'.",
            details={"platform": platform_name},
        )
        self.platform_name = platform_name


class RequirementExtractionFailed(ProvisionError):
    """codesign/csreq could not produce a compiled designated requirement."""

    code = "requirement_extraction_failed"

    def __init__(
        self,
        message: str,
        *,
        bundle_path: str,
        exit_code: Optional[int] = None,
        diagnostic: str = "",
    ) -> None:
        details: Dict[str, object] = {"bundle_path": bundle_path, "exit_code": exit_code}
        if diagnostic:
            details["diagnostic"] = diagnostic
            message = f"{message} {diagnostic}"
        super().__init__(message, details=details)
        self.bundle_path = bundle_path
        self.exit_code = exit_code
        self.diagnostic = diagnostic


class AuthorizationWriteFailed(ProvisionError):
    """The elevated sqlite3 write to the TCC store exited non-zero."""

    code = "authorization_write_failed"

    def __init__(self, exit_code: Optional[int], diagnostic: str, *, db_path: str) -> None:
        super().__init__(
            f"Failed to apply changes to TCC.db database. Exit code {exit_code}. {diagnostic}",
            details={"exit_code": exit_code, "diagnostic": diagnostic, "db_path": db_path},
        )
        self.exit_code = exit_code
        self.diagnostic = diagnostic
        self.db_path = db_path


class DownloadFailed(ProvisionError):
    code = "download_failed"


class InstallFailed(ProvisionError):
    code = "install_failed"

    def __init__(self, exit_code: Optional[int], diagnostic: str = "") -> None:
        message = f"Microsoft PowerPoint installation failed with code {exit_code}."
        if diagnostic:
            message = f"{message} {diagnostic}"
        super().__init__(message, details={"exit_code": exit_code})
        self.exit_code = exit_code


class PolicyFailed(ProvisionError):
    code = "policy_failed"

    def __init__(self, script: str, exit_code: Optional[int], diagnostic: str = "") -> None:
        message = f"Policy script '{script}' failed with code {exit_code}."
        if diagnostic:
            message = f"{message} {diagnostic}"
        super().__init__(message, details={"script": script, "exit_code": exit_code})
        self.script = script
        self.exit_code = exit_code
