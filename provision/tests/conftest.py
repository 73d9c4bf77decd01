from __future__ import annotations

import sqlite3
import sys
import tempfile
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

import pytest

DESIGNATED = 'identifier "com.example.x" and anchor apple generic'
CODESIGN_OUTPUT = f"Executable=/Applications/X.app\n# designated => {DESIGNATED}\n"

TCC_SCHEMA = """
CREATE TABLE access (
    service TEXT NOT NULL,
    client TEXT NOT NULL,
    client_type INTEGER NOT NULL,
    auth_value INTEGER NOT NULL,
    auth_reason INTEGER NOT NULL,
    auth_version INTEGER NOT NULL,
    csreq BLOB,
    PRIMARY KEY (service, client, client_type)
);
"""


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "system: needs a macOS host with codesign/csreq")


def pytest_collection_modifyitems(config: pytest.Config, items: List[pytest.Item]) -> None:
    if sys.platform == "darwin":
        return
    skip = pytest.mark.skip(reason="macOS host required")
    for item in items:
        if "system" in item.keywords:
            item.add_marker(skip)


def _record(cmd: Sequence[str], exit_code: Optional[int], stdout: str = "", stderr: str = "") -> Dict[str, object]:
    return {"command": list(cmd), "exit_code": exit_code, "stdout": stdout, "stderr": stderr}


class FakeRunner:
    """
    Stand-in for `run_command`.

    codesign answers with canned output, csreq copies its stdin to the `-b`
    path, and `sudo sqlite3 DB SQL` executes SQL against DB with the sqlite3
    module. Each behavior can be overridden per test.
    """

    def __init__(
        self,
        *,
        codesign_stdout: str = CODESIGN_OUTPUT,
        codesign_exit: int = 0,
        csreq_exit: int = 0,
        csreq_writes: bool = True,
        sqlite_exit: Optional[int] = None,
        sqlite_stderr: str = "",
        sqlite_stdout: str = "",
    ) -> None:
        self.codesign_stdout = codesign_stdout
        self.codesign_exit = codesign_exit
        self.csreq_exit = csreq_exit
        self.csreq_writes = csreq_writes
        self.sqlite_exit = sqlite_exit
        self.sqlite_stderr = sqlite_stderr
        self.sqlite_stdout = sqlite_stdout
        self.calls: List[List[str]] = []
        self.inputs: List[Optional[bytes]] = []
        self.csreq_out_paths: List[Path] = []
        self.extra: Dict[str, Callable[..., Dict[str, object]]] = {}

    def __call__(self, cmd: Sequence[str], *, input_bytes: Optional[bytes] = None, **kwargs) -> Dict[str, object]:
        cmd = [str(c) for c in cmd]
        self.calls.append(cmd)
        self.inputs.append(input_bytes)
        tool = cmd[1] if cmd[0] == "sudo" else cmd[0]
        if tool in self.extra:
            return self.extra[tool](cmd, input_bytes=input_bytes, **kwargs)
        if tool == "codesign":
            return _record(cmd, self.codesign_exit, stdout=self.codesign_stdout if self.codesign_exit == 0 else "")
        if tool == "csreq":
            out_path = Path(cmd[cmd.index("-b") + 1])
            self.csreq_out_paths.append(out_path)
            if self.csreq_exit == 0 and self.csreq_writes:
                out_path.write_bytes(input_bytes or b"")
            return _record(cmd, self.csreq_exit, stderr="csreq: bad requirement" if self.csreq_exit else "")
        if tool == "sqlite3":
            if self.sqlite_exit is not None:
                return _record(cmd, self.sqlite_exit, stdout=self.sqlite_stdout, stderr=self.sqlite_stderr)
            db_path, statement = cmd[-2], cmd[-1]
            with sqlite3.connect(db_path) as conn:
                conn.executescript(statement)
            return _record(cmd, 0)
        raise AssertionError(f"unexpected command: {cmd}")

    def tools(self) -> List[str]:
        return [c[1] if c[0] == "sudo" else c[0] for c in self.calls]


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def tcc_db(tmp_path: Path) -> Path:
    db_path = tmp_path / "TCC.db"
    with sqlite3.connect(db_path) as conn:
        conn.executescript(TCC_SCHEMA)
    return db_path


@pytest.fixture
def scratch_tmp(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Route tempfile's default directory to an empty, inspectable folder."""
    scratch = tmp_path / "scratch"
    scratch.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(scratch))
    return scratch


@pytest.fixture(autouse=True)
def _plain_console(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GITHUB_ACTIONS", raising=False)
