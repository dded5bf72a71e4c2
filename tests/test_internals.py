"""Tests for configuration and small helpers."""

from __future__ import annotations

import logging

import pytest

from smartdmt.config import (
    CommandsConfig,
    DisplayConfig,
    LoggingConfig,
    Settings,
    get_settings,
    load_settings,
    with_overrides,
    write_settings,
)
from smartdmt.models import ReportMode
from smartdmt.utils.logging import setup_logging
from smartdmt.utils.text import placeholder, truncate


def test_config_roundtrip(tmp_path):
    path = tmp_path / "config.toml"
    settings = Settings(
        commands=CommandsConfig(smartctl="/usr/sbin/smartctl", parser="pairs"),
        display=DisplayConfig(mode=ReportMode.FULL, refresh_interval=15.0),
        logging=LoggingConfig(level="DEBUG", file="~/smartdmt.log"),
    )
    write_settings(settings, path)

    assert load_settings(path) == settings


def test_default_config_roundtrip(tmp_path):
    path = tmp_path / "nested" / "config.toml"
    write_settings(Settings(), path)

    assert load_settings(path) == Settings()


def test_invalid_values_are_rejected(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text('[display]\nmode = "sideways"\n')

    with pytest.raises(ValueError, match="Invalid config file"):
        load_settings(path)


def test_invalid_toml_is_rejected(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text("[display\n")

    with pytest.raises(ValueError, match="Invalid TOML"):
        load_settings(path)


def test_unknown_keys_are_rejected(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text("[commands]\nfdisk = 'fdisk'\n")

    with pytest.raises(ValueError):
        load_settings(path)


def test_get_settings_from_env(tmp_path, monkeypatch: pytest.MonkeyPatch):
    path = tmp_path / "config.toml"
    path.write_text("[display]\nrefresh_interval = 5.0\n")
    monkeypatch.setenv("SMARTDMT_CONFIG", str(path))

    assert get_settings().display.refresh_interval == 5.0


def test_get_settings_env_missing_file(tmp_path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("SMARTDMT_CONFIG", str(tmp_path / "missing.toml"))

    with pytest.raises(FileNotFoundError):
        get_settings()


def test_get_settings_defaults_without_file():
    assert get_settings() == Settings()


def test_with_overrides():
    settings = with_overrides(
        Settings(), mode=ReportMode.FULL, refresh_interval=10, parser="pairs"
    )

    assert settings.display.mode is ReportMode.FULL
    assert settings.display.refresh_interval == 10
    assert settings.commands.parser == "pairs"
    assert with_overrides(settings) == settings


@pytest.mark.parametrize(
    "overrides", [{"refresh_interval": 0}, {"parser": "xml"}]
)
def test_with_overrides_validates(overrides):
    with pytest.raises(ValueError, match="Invalid option"):
        with_overrides(Settings(), **overrides)


@pytest.mark.parametrize(
    ("value", "width", "expected"),
    [
        ("", 20, "-"),
        ("short", 20, "short"),
        ("exactly-ten", 11, "exactly-ten"),
        ("a-rather-long-serial-number", 10, "a-rathe..."),
        ("abcdef", 3, "abc"),
    ],
)
def test_truncate(value, width, expected):
    assert truncate(value, width) == expected


def test_placeholder():
    assert placeholder("") == "-"
    assert placeholder("WD") == "WD"


def test_report_mode_toggle():
    assert ReportMode.TABLE.toggled() is ReportMode.FULL
    assert ReportMode.FULL.toggled() is ReportMode.TABLE
    assert ReportMode.FULL.label == "Full View"


def test_setup_logging_keeps_one_log_file(tmp_path):
    root = logging.getLogger()
    before, level = list(root.handlers), root.level
    first, second = tmp_path / "first.log", tmp_path / "logs" / "second.log"
    try:
        setup_logging("DEBUG", first)
        setup_logging("DEBUG", second)
        logging.getLogger("smartdmt.test").info("hello %s", "file")

        file_handlers = [
            h for h in root.handlers if isinstance(h, logging.FileHandler)
        ]
        assert [h.baseFilename for h in file_handlers] == [str(second)]
    finally:
        for handler in list(root.handlers):
            if handler not in before:
                root.removeHandler(handler)
                handler.close()
        root.setLevel(level)

    assert "hello file" in second.read_text(encoding="utf-8")
