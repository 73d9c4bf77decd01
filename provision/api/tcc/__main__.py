"""
`python -m provision.api.tcc` entrypoint.

The CLI implementation lives in `provision/api/tcc/cli.py` so importing
`provision.api.tcc` from library code does not pull in argparse wiring.
"""

from __future__ import annotations

from . import cli


def main() -> int:
    """Delegate to `provision.api.tcc.cli.main`."""
    return cli.main()


if __name__ == "__main__":
    raise SystemExit(main())
