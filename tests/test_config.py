from __future__ import annotations

from pathlib import Path

import allure
import pytest

from meanwhile.config import LOG_LEVELS, Settings

pytestmark = [
    allure.epic("Configuration"),
    allure.feature("Settings"),
]


def test_from_env_defaults(monkeypatch) -> None:
    for name in (
        "MEANWHILE_TASKS_FILE",
        "MEANWHILE_DELAY_SECONDS",
        "MEANWHILE_GRACE_SECONDS",
        "MEANWHILE_OUTDIR",
        "MEANWHILE_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = Settings.from_env()

    assert settings.tasks_file == Path("meanwhile.toml")
    assert settings.delay_seconds == 1.0
    assert settings.grace_seconds == 0.5
    assert settings.outdir == Path(".")
    assert settings.log_level == "INFO"


def test_from_env_reads_overrides(monkeypatch) -> None:
    monkeypatch.setenv("MEANWHILE_TASKS_FILE", "/etc/helpers.toml")
    monkeypatch.setenv("MEANWHILE_DELAY_SECONDS", "0.25")
    monkeypatch.setenv("MEANWHILE_GRACE_SECONDS", "2")
    monkeypatch.setenv("MEANWHILE_OUTDIR", "logs")
    monkeypatch.setenv("MEANWHILE_LOG_LEVEL", "debug")

    settings = Settings.from_env()

    assert settings.tasks_file == Path("/etc/helpers.toml")
    assert settings.delay_seconds == 0.25
    assert settings.grace_seconds == 2.0
    assert settings.outdir == Path("logs")
    assert settings.log_level == "DEBUG"


def test_from_env_rejects_non_numeric_delay(monkeypatch) -> None:
    monkeypatch.setenv("MEANWHILE_DELAY_SECONDS", "soon")

    with pytest.raises(ValueError, match="MEANWHILE_DELAY_SECONDS"):
        Settings.from_env()


def test_validate_rejects_negative_delays() -> None:
    with pytest.raises(ValueError, match="Settling delay"):
        Settings(delay_seconds=-1).validate()
    with pytest.raises(ValueError, match="Grace delay"):
        Settings(grace_seconds=-0.1).validate()


def test_validate_rejects_unknown_log_level() -> None:
    with pytest.raises(ValueError, match="Invalid log level"):
        Settings(log_level="LOUD").validate()


def test_validate_accepts_every_cli_log_level() -> None:
    for level in LOG_LEVELS:
        Settings(log_level=level).validate()
