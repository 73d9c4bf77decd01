import plistlib
import sqlite3
from pathlib import Path

import pytest

from conftest import FakeRunner
from provision.api import exec_record
from provision.api.errors import InstallFailed, PolicyFailed, ProvisionError, UnsupportedPlatform
from provision.api.powerpoint import cli as powerpoint_cli
from provision.api.powerpoint import download, installer, pipeline, policies
from provision.api.powerpoint.paths import POLICIES_DIR, POLICY_SCRIPTS


def _ok(cmd, **kwargs):
    return {"command": list(cmd), "exit_code": 0, "stdout": "", "stderr": ""}


def _write_app(root: Path, info: dict) -> Path:
    app = root / "Microsoft PowerPoint.app"
    (app / "Contents").mkdir(parents=True)
    (app / "Contents" / "Info.plist").write_bytes(plistlib.dumps(info))
    return app


def test_require_macos():
    pipeline.require_macos("darwin")
    with pytest.raises(UnsupportedPlatform, match="Detected platform: 'linux'"):
        pipeline.require_macos("linux")


def test_install_package_runs_installer_through_sudo(tmp_path):
    runner = FakeRunner()
    runner.extra["installer"] = _ok
    pkg = tmp_path / "p.pkg"

    app = installer.install_package(pkg, target=tmp_path, app_path=tmp_path / "X.app", runner=runner)

    assert app == tmp_path / "X.app"
    assert runner.calls == [["sudo", "installer", "-pkg", str(pkg), "-target", str(tmp_path)]]


def test_install_failure_carries_exit_code(tmp_path):
    runner = FakeRunner()
    runner.extra["installer"] = lambda cmd, **kw: {"command": cmd, "exit_code": 1, "stdout": "", "stderr": "bad pkg"}
    with pytest.raises(InstallFailed) as excinfo:
        installer.install_package(tmp_path / "p.pkg", runner=runner)
    assert excinfo.value.exit_code == 1
    assert "failed with code 1" in str(excinfo.value)


def test_read_bundle_version_uses_last_build_component(tmp_path):
    app = _write_app(tmp_path, {"CFBundleShortVersionString": "16.102", "CFBundleVersion": "16.102.25101829"})
    version = installer.read_bundle_version(app)
    assert version == installer.BundleVersion(version="16.102", build="25101829")
    assert version.describe() == "Microsoft PowerPoint version 16.102 (25101829)"


def test_read_bundle_version_tolerates_missing_values(tmp_path, capsys):
    app = _write_app(tmp_path, {"CFBundleShortVersionString": "16.102"})
    assert installer.read_bundle_version(app).build == "(unknown)"

    missing = installer.read_bundle_version(tmp_path / "Nope.app")
    assert missing == installer.BundleVersion(version="(unknown)", build="(unknown)")
    assert "Failed to read" in capsys.readouterr().err


def test_apply_policies_skips_missing_scripts(tmp_path, capsys):
    (tmp_path / "policy_ms_office.sh").write_text("exit 0\n")
    runner = FakeRunner()
    runner.extra["bash"] = _ok

    applied = policies.apply_policies(tmp_path, runner=runner)

    assert applied == ["policy_ms_office.sh"]
    assert runner.calls == [["bash", str(tmp_path / "policy_ms_office.sh")]]
    out = capsys.readouterr().out
    assert "Skipping policy script 'policy_ms_autoupdate.sh'" in out
    assert "Skipping policy script 'policy_ms_powerpoint.sh'" in out


def test_policy_failure_stops_the_run(tmp_path):
    for name in POLICY_SCRIPTS:
        (tmp_path / name).write_text("exit 1\n")
    runner = FakeRunner()
    runner.extra["bash"] = lambda cmd, **kw: {"command": cmd, "exit_code": 1, "stdout": "", "stderr": "defaults: denied"}

    with pytest.raises(PolicyFailed) as excinfo:
        policies.apply_policies(tmp_path, runner=runner)

    assert excinfo.value.script == POLICY_SCRIPTS[0]
    assert len(runner.calls) == 1


def test_shipped_policy_scripts_exist():
    for name in POLICY_SCRIPTS:
        assert (POLICIES_DIR / name).is_file()


def test_download_writes_under_runner_temp(tmp_path, monkeypatch):
    source = tmp_path / "src.pkg"
    source.write_bytes(b"xar!")
    monkeypatch.setenv("RUNNER_TEMP", str(tmp_path / "runner"))

    path = download.download_installer(source.as_uri(), package_name="pp.pkg")

    assert path.name == "pp.pkg"
    assert path.parent.parent == tmp_path / "runner"
    assert path.read_bytes() == b"xar!"


def test_download_failure_cleans_up(tmp_path):
    with pytest.raises(ProvisionError, match="Failed to download"):
        download.download_installer((tmp_path / "missing.pkg").as_uri(), temp_root=tmp_path / "dl")
    assert list((tmp_path / "dl").iterdir()) == []


def _pipeline_runner() -> FakeRunner:
    runner = FakeRunner()
    runner.extra["installer"] = _ok
    runner.extra["bash"] = _ok
    return runner


def test_provision_runs_steps_in_order(tmp_path, tcc_db, scratch_tmp):
    _write_app(tmp_path, {"CFBundleShortVersionString": "16.102", "CFBundleVersion": "16.102.25101829"})
    runner = _pipeline_runner()
    options = pipeline.ProvisionOptions(
        installer_path=tmp_path / "p.pkg",
        install_target=tmp_path,
        policies_dir=POLICIES_DIR,
        automation_app=Path("/Applications/X.app"),
        tcc_db=tcc_db,
    )

    result = pipeline.provision(options, runner=runner, platform_name="darwin")

    assert runner.tools() == ["installer", "bash", "bash", "bash", "codesign", "csreq", "sqlite3"]
    assert result.version.build == "25101829"
    assert result.policies == list(POLICY_SCRIPTS)
    assert result.authorization is not None
    with sqlite3.connect(tcc_db) as conn:
        assert conn.execute("SELECT service, client FROM access").fetchall() == [
            ("kTCCServiceAccessibility", "com.apple.Terminal")
        ]


def test_provision_skip_grant(tmp_path, tcc_db):
    runner = _pipeline_runner()
    options = pipeline.ProvisionOptions(
        installer_path=tmp_path / "p.pkg", install_target=tmp_path, policies_dir=tmp_path, tcc_db=tcc_db, skip_grant=True
    )
    result = pipeline.provision(options, runner=runner, platform_name="darwin")
    assert result.authorization is None
    assert runner.tools() == ["installer"]


def test_provision_refuses_non_macos(tmp_path):
    runner = _pipeline_runner()
    with pytest.raises(UnsupportedPlatform):
        pipeline.provision(pipeline.ProvisionOptions(installer_path=tmp_path / "p.pkg"), runner=runner, platform_name="win32")
    assert runner.calls == []


def test_cli_exit_code_on_failure(tmp_path, tcc_db, monkeypatch, capsys):
    runner = _pipeline_runner()
    runner.sqlite_exit = 1
    runner.sqlite_stderr = "Error: unable to open database file"
    monkeypatch.setattr(exec_record, "run_command", runner)
    monkeypatch.setattr(pipeline, "require_macos", lambda platform_name=None: None)

    rc = powerpoint_cli.main(
        [
            "--installer", str(tmp_path / "p.pkg"),
            "--target", str(tmp_path),
            "--policies-dir", str(tmp_path),
            "--app", "/Applications/X.app",
            "--tcc-db", str(tcc_db),
        ]
    )

    assert rc == 1
    err = capsys.readouterr().err
    assert "Exit code 1. Error: unable to open database file" in err
