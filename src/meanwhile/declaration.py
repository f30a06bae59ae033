"""Load background task declarations from a TOML file.

Expected shape::

    [[tasks]]
    cmd = "redis-server"
    args = ["--port", "7777"]
    stdout-suffix = ".redis.out"
    stderr-suffix = ".redis.err"

``cmd`` and ``args`` are required; the suffixes are optional and a missing
suffix discards that stream.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from meanwhile.orchestrator.errors import DeclarationError
from meanwhile.orchestrator.models import BackgroundTaskSpec

logger = logging.getLogger(__name__)

_ALLOWED_KEYS = frozenset({"cmd", "args", "stdout-suffix", "stderr-suffix"})


def load_declaration(path: Path) -> tuple[BackgroundTaskSpec, ...]:
    try:
        raw = path.read_text("utf-8")
    except FileNotFoundError as error:
        raise DeclarationError(path, "file not found") from error
    except OSError as error:
        raise DeclarationError(path, str(error)) from error
    try:
        data = tomllib.loads(raw)
    except tomllib.TOMLDecodeError as error:
        raise DeclarationError(path, f"invalid TOML: {error}") from error

    specs = parse_declaration(data, path=path)
    logger.debug("Loaded %d background task(s) from %s", len(specs), path)
    return specs


def parse_declaration(data: dict[str, Any], *, path: Path) -> tuple[BackgroundTaskSpec, ...]:
    entries = data.get("tasks", [])
    if not isinstance(entries, list):
        raise DeclarationError(path, "'tasks' must be an array of tables")
    return tuple(_parse_entry(entry, index=index, path=path) for index, entry in enumerate(entries))


def _parse_entry(entry: object, *, index: int, path: Path) -> BackgroundTaskSpec:
    where = f"tasks[{index}]"
    if not isinstance(entry, dict):
        raise DeclarationError(path, f"{where} must be a table")

    unknown = sorted(set(entry) - _ALLOWED_KEYS)
    if unknown:
        raise DeclarationError(path, f"{where} has unknown key(s): {', '.join(unknown)}")

    command = entry.get("cmd")
    if not isinstance(command, str) or not command.strip():
        raise DeclarationError(path, f"{where}.cmd must be a non-empty string")

    if "args" not in entry:
        raise DeclarationError(path, f"{where}.args is required")
    arguments = entry["args"]
    if not isinstance(arguments, list) or not all(isinstance(arg, str) for arg in arguments):
        raise DeclarationError(path, f"{where}.args must be an array of strings")

    return BackgroundTaskSpec(
        command=command,
        arguments=tuple(arguments),
        stdout_suffix=_optional_str(entry, "stdout-suffix", where=where, path=path),
        stderr_suffix=_optional_str(entry, "stderr-suffix", where=where, path=path),
    )


def _optional_str(entry: dict[str, Any], key: str, *, where: str, path: Path) -> str | None:
    value = entry.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise DeclarationError(path, f"{where}.{key} must be a string")
    return value
