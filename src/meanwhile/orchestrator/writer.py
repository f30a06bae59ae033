"""Persist captured output streams as `{prefix}{suffix}` files."""

from __future__ import annotations

import logging
from pathlib import Path

from meanwhile.orchestrator.errors import DirectoryError, WriteError

logger = logging.getLogger(__name__)


def ensure_outdir(outdir: Path) -> Path:
    """Create the output directory if absent. Raises ``DirectoryError``."""

    try:
        outdir.mkdir(parents=True, exist_ok=True)
    except OSError as error:
        raise DirectoryError(outdir, str(error)) from error
    if not outdir.is_dir():
        raise DirectoryError(outdir, "not a directory")
    return outdir


class OutputWriter:
    """Best-effort writer: each file is independent of the others."""

    def __init__(self, outdir: Path, prefix: str = "") -> None:
        self.outdir = outdir
        self.prefix = prefix
        self.written: list[Path] = []
        self.errors: list[WriteError] = []

    def target(self, suffix: str) -> Path:
        return self.outdir / f"{self.prefix}{suffix}"

    def write(self, suffix: str | None, data: bytes) -> Path | None:
        """Write ``data`` unless ``suffix`` is None (stream discarded).

        Failures are logged and kept in ``errors``; they never raise.
        """

        if suffix is None:
            logger.debug("No suffix; discarding %d bytes of output", len(data))
            return None
        path = self.target(suffix)
        try:
            path.write_bytes(data)
        except OSError as error:
            failure = WriteError(path, str(error))
            logger.warning("%s", failure)
            self.errors.append(failure)
            return None
        logger.info("Wrote %d bytes to %s", len(data), path)
        self.written.append(path)
        return path


def write_output(outdir: Path, prefix: str, suffix: str | None, data: bytes) -> Path | None:
    """One-shot form of ``OutputWriter.write``."""

    return OutputWriter(outdir, prefix).write(suffix, data)
