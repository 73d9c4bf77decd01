"""Installer package download."""

from __future__ import annotations

import shutil
import urllib.error
import urllib.request
import uuid
from pathlib import Path
from typing import Optional

from provision.api import console
from provision.api.errors import DownloadFailed
from provision.api.powerpoint.paths import INSTALLER_URL, POWERPOINT_PACKAGE_NAME, runner_temp

CHUNK_SIZE = 1024 * 1024


def download_installer(
    url: str = INSTALLER_URL,
    *,
    temp_root: Optional[Path] = None,
    package_name: str = POWERPOINT_PACKAGE_NAME,
    timeout_s: Optional[float] = 600.0,
) -> Path:
    """Download `url` to `<temp_root>/<uuid4>/<package_name>` and return the path."""
    target = (temp_root or runner_temp()) / str(uuid.uuid4()) / package_name
    target.parent.mkdir(parents=True, exist_ok=True)
    console.info("Downloading Microsoft PowerPoint installer package...")
    try:
        with urllib.request.urlopen(url, timeout=timeout_s) as resp, target.open("wb") as fh:
            shutil.copyfileobj(resp, fh, CHUNK_SIZE)
    except (urllib.error.URLError, OSError) as exc:
        shutil.rmtree(target.parent, ignore_errors=True)
        raise DownloadFailed(
            f"Failed to download installer from {url}: {type(exc).__name__}: {exc}",
            details={"url": url},
        ) from exc
    console.info("Installer package downloaded successfully.")
    return target
