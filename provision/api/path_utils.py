"""
Helpers for consistent path handling in command records and console output.

Provisioning commands run against absolute system paths (`/Applications/...`,
`/Library/Application Support/...`), but runner-scoped paths under the user's
home are rendered as `$HOME/...` hints so logs stay stable across CI hosts.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence, Union

Pathish = Union[str, Path]


def ensure_absolute(path: Pathish, base: Path | None = None) -> Path:
    """Return an absolute Path, resolving relative paths against `base` (or cwd)."""
    p = Path(path).expanduser()
    if p.is_absolute():
        return p
    return ((base or Path.cwd()) / p).resolve()


def home_hint(path: Pathish) -> str:
    """Return `$HOME/<rel>` for paths under the home directory, else the path string."""
    p = Path(path)
    try:
        rel = p.relative_to(Path.home())
    except ValueError:
        return str(p)
    return f"$HOME/{rel}"


def displayable_command(parts: Sequence[Pathish]) -> list[str]:
    """Convert argv entries that live under $HOME to their hint form."""
    out: list[str] = []
    for part in parts:
        text = str(part)
        # Only path-looking arguments are rewritten; SQL and flags pass through.
        if text.startswith("/"):
            out.append(home_hint(text))
        else:
            out.append(text)
    return out
