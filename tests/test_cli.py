from __future__ import annotations

import importlib

import pytest
from typer.testing import CliRunner

import smartdmt.cli.commands.dashboard as dashboard_cmd
import smartdmt.cli.commands.devices as devices_cmd
import smartdmt.cli.commands.report as report_cmd
from smartdmt import __version__
from smartdmt.cli import app
from smartdmt.config import DisplayConfig, Settings, write_settings
from smartdmt.core.preflight import PreflightError
from smartdmt.models import Device, DiagnosticReport, ReportMode

app_module = importlib.import_module("smartdmt.cli.app")

runner = CliRunner()


@pytest.fixture(autouse=True)
def _no_logging_setup(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(app_module, "setup_logging", lambda *args, **kwargs: None)


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert f"smartdmt version {__version__}" in result.stdout


def test_devices_lists_table(monkeypatch: pytest.MonkeyPatch):
    async def _fake_list_devices(_commands):
        return [
            Device(name="sda", path="/dev/sda", model="Samsung SSD", serial=""),
        ]

    monkeypatch.setattr(devices_cmd, "list_devices", _fake_list_devices)

    result = runner.invoke(app, ["devices"])

    assert result.exit_code == 0
    assert "/dev/sda" in result.stdout
    assert "Samsung SSD" in result.stdout
    assert "Found 1 device(s)" in result.stdout


def test_devices_empty(monkeypatch: pytest.MonkeyPatch):
    async def _fake_list_devices(_commands):
        return []

    monkeypatch.setattr(devices_cmd, "list_devices", _fake_list_devices)

    result = runner.invoke(app, ["devices"])

    assert result.exit_code == 0
    assert "No devices found." in result.stdout


def test_report_prints_text(monkeypatch: pytest.MonkeyPatch):
    calls = []

    async def _fake_fetch(path, mode, _commands):
        calls.append((path, mode))
        return DiagnosticReport(device_path=path, mode=mode, text="SMART OK\n")

    monkeypatch.setattr(report_cmd, "fetch_report", _fake_fetch)

    result = runner.invoke(app, ["report", "/dev/sda", "--full"])

    assert result.exit_code == 0
    assert "SMART OK" in result.stdout
    assert calls == [("/dev/sda", ReportMode.FULL)]


def test_report_failure_exits_nonzero(monkeypatch: pytest.MonkeyPatch):
    async def _fake_fetch(path, mode, _commands):
        return DiagnosticReport(
            device_path=path,
            mode=mode,
            text="Smartctl open device: /dev/sdz failed",
            failed=True,
            returncode=2,
        )

    monkeypatch.setattr(report_cmd, "fetch_report", _fake_fetch)

    result = runner.invoke(app, ["report", "/dev/sdz"])

    assert result.exit_code == 1
    assert "/dev/sdz failed" in result.output


def test_config_show_and_init(tmp_path, monkeypatch: pytest.MonkeyPatch):
    path = tmp_path / "config.toml"
    monkeypatch.setenv("SMARTDMT_CONFIG", str(path))

    result = runner.invoke(app, ["config", "init"])
    assert result.exit_code == 0
    assert path.exists()

    result = runner.invoke(app, ["config", "init"])
    assert "already exists" in result.stdout

    result = runner.invoke(app, ["config", "show"])
    assert result.exit_code == 0
    assert f"Config source: {path}" in result.stdout
    assert 'mode = "table"' in result.stdout


def test_invalid_config_exits_with_message(tmp_path, monkeypatch: pytest.MonkeyPatch):
    path = tmp_path / "config.toml"
    path.write_text("[display]\nrefresh_interval = -1\n")
    monkeypatch.setenv("SMARTDMT_CONFIG", str(path))

    result = runner.invoke(app, ["devices"])

    assert result.exit_code == 1
    assert "Invalid config file" in result.output


def test_missing_config_file_exits_with_hint(
    tmp_path, monkeypatch: pytest.MonkeyPatch
):
    monkeypatch.setenv("SMARTDMT_CONFIG", str(tmp_path / "absent.toml"))

    result = runner.invoke(app, ["devices"])

    assert result.exit_code == 1
    assert "Error: SMARTDMT_CONFIG points to missing file" in result.output
    assert "smartdmt config init" in result.output


def test_dashboard_receives_overridden_settings(
    tmp_path, monkeypatch: pytest.MonkeyPatch
):
    path = tmp_path / "config.toml"
    write_settings(Settings(display=DisplayConfig(refresh_interval=30.0)), path)
    monkeypatch.setenv("SMARTDMT_CONFIG", str(path))
    received: list[Settings] = []
    monkeypatch.setattr(app_module, "run_dashboard", received.append)

    result = runner.invoke(app, ["--mode", "full", "--parser", "pairs"])

    assert result.exit_code == 0
    assert received[0].display.mode is ReportMode.FULL
    assert received[0].display.refresh_interval == 30.0
    assert received[0].commands.parser == "pairs"


def test_dashboard_rejects_bad_interval(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(app_module, "run_dashboard", lambda settings: None)

    result = runner.invoke(app, ["--interval", "0"])

    assert result.exit_code == 1
    assert "Invalid option" in result.output


def test_missing_dependency_is_fatal(monkeypatch: pytest.MonkeyPatch):
    async def _fail(_commands):
        raise PreflightError("smartctl", "No such file or directory")

    monkeypatch.setattr(dashboard_cmd, "check_dependencies", _fail)

    result = runner.invoke(app, [])

    assert result.exit_code == 1
    assert "Error: smartctl not available" in result.output
