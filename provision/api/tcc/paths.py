"""
Fixed system paths used by the UI-automation grant.

Import these instead of reconstructing them so the extractor, the writer and
the CLIs stay aligned on one set of locations.
"""

from __future__ import annotations

from pathlib import Path

# System-wide TCC store; writes require root.
TCC_DB = Path("/Library/Application Support/com.apple.TCC/TCC.db")

# The application whose code identity is pinned into the grant.
TERMINAL_APP = Path("/System/Applications/Utilities/Terminal.app")

CODESIGN = "codesign"
CSREQ = "csreq"
SQLITE3 = "sqlite3"
SUDO = "sudo"

# Name of the compiled requirement inside the scratch directory.
CSREQ_BLOB_NAME = "csreq.bin"
