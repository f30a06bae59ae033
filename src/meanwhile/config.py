"""Runtime configuration for orchestrated runs."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_TASKS_FILE = Path("meanwhile.toml")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(slots=True)
class Settings:
    """Settings for one run; CLI options override the environment."""

    tasks_file: Path = DEFAULT_TASKS_FILE
    delay_seconds: float = 1.0
    grace_seconds: float = 0.5
    outdir: Path = Path(".")
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from ``MEANWHILE_*`` environment variables."""

        return cls(
            tasks_file=Path(os.getenv("MEANWHILE_TASKS_FILE", str(DEFAULT_TASKS_FILE))),
            delay_seconds=_env_float("MEANWHILE_DELAY_SECONDS", 1.0),
            grace_seconds=_env_float("MEANWHILE_GRACE_SECONDS", 0.5),
            outdir=Path(os.getenv("MEANWHILE_OUTDIR", ".")),
            log_level=os.getenv("MEANWHILE_LOG_LEVEL", "INFO").strip().upper(),
        )

    def validate(self) -> None:
        """Raise configuration error if any value is out of range."""

        if self.delay_seconds < 0:
            raise ValueError(f"Settling delay must be >= 0, got {self.delay_seconds}.")
        if self.grace_seconds < 0:
            raise ValueError(f"Grace delay must be >= 0, got {self.grace_seconds}.")
        if self.log_level not in LOG_LEVELS:
            raise ValueError(
                f"Invalid log level {self.log_level!r}. Expected one of: {', '.join(LOG_LEVELS)}.",
            )


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError as error:
        raise ValueError(f"Invalid number for {name}: {value!r}") from error
