#!/usr/bin/env python3
"""
`setup-powerpoint` command-line interface.

Usage:
  python -m provision.api.powerpoint [--installer PKG] [--policies-dir DIR] [--tcc-db PATH] [--skip-grant]

Runs the full provisioning pipeline (see `provision.api.powerpoint.pipeline`).
Failures are reported as the terminating error of the run and exit 1.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path

from provision.api import console, path_utils
from provision.api.errors import ProvisionError
from provision.api.powerpoint.paths import INSTALL_TARGET, INSTALLER_URL, POLICIES_DIR
from provision.api.powerpoint.pipeline import ProvisionOptions, provision
from provision.api.tcc.access import UI_AUTOMATION_GRANT
from provision.api.tcc.paths import TCC_DB, TERMINAL_APP


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Install Microsoft PowerPoint and pre-authorize UI automation.")
    ap.add_argument("--installer", type=Path, help="Use a local .pkg instead of downloading")
    ap.add_argument("--installer-url", default=INSTALLER_URL, help="Updater package URL")
    ap.add_argument("--target", type=Path, default=INSTALL_TARGET, help="Install target volume/folder")
    ap.add_argument("--policies-dir", type=Path, default=POLICIES_DIR, help="Directory with policy_*.sh scripts")
    ap.add_argument("--app", type=Path, default=TERMINAL_APP, help="Bundle whose identity is pinned into the grant")
    ap.add_argument("--service", default=UI_AUTOMATION_GRANT.service, help="TCC service to grant")
    ap.add_argument("--client", default=UI_AUTOMATION_GRANT.client, help="Client bundle id to authorize")
    ap.add_argument("--tcc-db", type=Path, default=TCC_DB, help="TCC store path")
    ap.add_argument("--skip-grant", action="store_true", help="Install and configure only")
    return ap


def options_from_args(args: argparse.Namespace) -> ProvisionOptions:
    return ProvisionOptions(
        installer_url=args.installer_url,
        installer_path=path_utils.ensure_absolute(args.installer) if args.installer else None,
        install_target=args.target,
        policies_dir=path_utils.ensure_absolute(args.policies_dir),
        automation_app=args.app,
        grant=replace(UI_AUTOMATION_GRANT, service=args.service, client=args.client),
        tcc_db=args.tcc_db,
        skip_grant=args.skip_grant,
    )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        provision(options_from_args(args))
    except ProvisionError as exc:
        console.set_failed(exc.message)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
