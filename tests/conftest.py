"""Shared test fixtures."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from meanwhile.logging_setup import LOGGER_NAME

from .fakes import FakeSignaller


@pytest.fixture(autouse=True)
def _reset_meanwhile_logger():
    """Drop CLI-installed handlers so they never outlive CliRunner's streams."""

    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture()
def events() -> list[str]:
    return []


@pytest.fixture()
def signaller(events: list[str]) -> FakeSignaller:
    return FakeSignaller(events)


@pytest.fixture()
def write_tasks_file(tmp_path: Path):
    """Write a declaration file into tmp_path and return its path."""

    def _write(content: str, name: str = "meanwhile.toml") -> Path:
        path = tmp_path / name
        path.write_text(content, "utf-8")
        return path

    return _write
