"""Error taxonomy for process lifecycle orchestration."""

from __future__ import annotations

from pathlib import Path


class MeanwhileError(RuntimeError):
    """Base error for the orchestrator."""


class SpawnError(MeanwhileError):
    """A process could not be started. Fatal to the whole run."""

    def __init__(self, command: str, reason: str) -> None:
        super().__init__(f"Failed to spawn {command!r}: {reason}")
        self.command = command
        self.reason = reason


class SignalError(MeanwhileError):
    """An interrupt could not be delivered to a process."""

    def __init__(self, pid: int, reason: str) -> None:
        super().__init__(f"Failed to interrupt pid={pid}: {reason}")
        self.pid = pid
        self.reason = reason


class KillError(MeanwhileError):
    """A process could not be force-terminated and had not exited on its own."""

    def __init__(self, pid: int, reason: str) -> None:
        super().__init__(f"Failed to kill pid={pid}: {reason}")
        self.pid = pid
        self.reason = reason


class CollectionError(MeanwhileError):
    """A process handle could not be waited on."""

    def __init__(self, pid: int, reason: str) -> None:
        super().__init__(f"Failed to collect output of pid={pid}: {reason}")
        self.pid = pid
        self.reason = reason


class WriteError(MeanwhileError):
    """A captured stream could not be persisted."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Failed to write {path}: {reason}")
        self.path = path
        self.reason = reason


class DirectoryError(MeanwhileError):
    """The output directory could not be created."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Failed to create output directory {path}: {reason}")
        self.path = path
        self.reason = reason


class DeclarationError(MeanwhileError):
    """The background task declaration file is missing or malformed."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Invalid task declaration {path}: {reason}")
        self.path = path
        self.reason = reason
