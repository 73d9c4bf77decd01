#!/usr/bin/env python3
"""
`provision.api.tcc` command-line interface.

Grants a client application a TCC service by pinning the code identity of an
installed bundle. Defaults reproduce the provisioning grant: Terminal.app may
use kTCCServiceAccessibility.

Usage:
  python -m provision.api.tcc grant [--app PATH] [--tcc-db PATH] [--service S] [--client C]
  python -m provision.api.tcc csreq [--app PATH] [--out PATH]
  python -m provision.api.tcc statement [--app PATH] [--service S] [--client C]
"""

from __future__ import annotations

import argparse
import json
from dataclasses import replace
from pathlib import Path

from provision.api import console
from provision.api.errors import ProvisionError
from provision.api.tcc.access import UI_AUTOMATION_GRANT, AccessGrant, AuthorizationRecord, build_insert_statement
from provision.api.tcc.automation import GrantProgress, enable_ui_automation
from provision.api.tcc.paths import TCC_DB, TERMINAL_APP
from provision.api.tcc.requirement import extract_compiled_requirement


def _grant_from_args(args: argparse.Namespace) -> AccessGrant:
    grant = UI_AUTOMATION_GRANT
    if args.service:
        grant = replace(grant, service=args.service)
    if args.client:
        grant = replace(grant, client=args.client)
    return grant


def grant_command(args: argparse.Namespace) -> int:
    """`tcc grant`: extract the requirement and write the access row."""
    progress = GrantProgress()
    with console.group("Enable user interface automation"):
        record = enable_ui_automation(
            app_path=args.app,
            grant=_grant_from_args(args),
            db_path=args.tcc_db,
            progress=progress,
        )
    if args.json:
        print(
            json.dumps(
                {
                    "state": progress.state.value,
                    "service": record.grant.service,
                    "client": record.grant.client,
                    "csreq_hex": record.csreq_hex,
                },
                indent=2,
            )
        )
    return 0


def csreq_command(args: argparse.Namespace) -> int:
    """`tcc csreq`: print (or write) the compiled designated requirement."""
    blob = extract_compiled_requirement(args.app)
    if args.out:
        args.out.parent.mkdir(parents=True, exist_ok=True)
        args.out.write_bytes(blob)
        console.info(f"wrote {args.out} ({len(blob)} bytes)")
    else:
        print(blob.hex())
    return 0


def statement_command(args: argparse.Namespace) -> int:
    """`tcc statement`: print the upsert without executing it."""
    blob = extract_compiled_requirement(args.app)
    print(build_insert_statement(AuthorizationRecord(grant=_grant_from_args(args), csreq=blob)))
    return 0


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Pre-authorize a client application in the TCC store.")
    sub = ap.add_subparsers(dest="command", required=True)

    def _common(p: argparse.ArgumentParser) -> None:
        p.add_argument("--app", type=Path, default=TERMINAL_APP, help="Signed bundle whose identity is pinned")
        p.add_argument("--service", help=f"TCC service (default {UI_AUTOMATION_GRANT.service})")
        p.add_argument("--client", help=f"Client bundle id (default {UI_AUTOMATION_GRANT.client})")

    ap_grant = sub.add_parser("grant", help="Write the access row through sudo sqlite3.")
    _common(ap_grant)
    ap_grant.add_argument("--tcc-db", type=Path, default=TCC_DB, help="TCC store path")
    ap_grant.add_argument("--json", action="store_true", help="Emit a JSON summary after the grant")
    ap_grant.set_defaults(func=grant_command)

    ap_csreq = sub.add_parser("csreq", help="Compile the bundle's designated requirement.")
    ap_csreq.add_argument("--app", type=Path, default=TERMINAL_APP, help="Signed bundle to inspect")
    ap_csreq.add_argument("--out", type=Path, help="Write the blob here instead of printing hex")
    ap_csreq.set_defaults(func=csreq_command)

    ap_stmt = sub.add_parser("statement", help="Print the access upsert without running it.")
    _common(ap_stmt)
    ap_stmt.set_defaults(func=statement_command)

    args = ap.parse_args(argv)
    try:
        return args.func(args)
    except ProvisionError as exc:
        console.set_failed(str(exc))
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
