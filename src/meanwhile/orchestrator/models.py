"""Domain models for background and primary task lifecycles."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from meanwhile.orchestrator.spawner import ProcessHandle


class TaskState(str, Enum):
    """Background task lifecycle states."""

    SPAWNED = "spawned"
    RUNNING = "running"
    INTERRUPTED = "interrupted"
    KILLED = "killed"
    COLLECTED = "collected"
    COLLECTION_FAILED = "collection_failed"
    DROPPED = "dropped"


@dataclass(frozen=True, slots=True)
class BackgroundTaskSpec:
    """One declared background helper process."""

    command: str
    arguments: tuple[str, ...] = ()
    stdout_suffix: str | None = None
    stderr_suffix: str | None = None

    def describe(self) -> str:
        return " ".join((self.command, *self.arguments))


@dataclass(frozen=True, slots=True)
class ProcessResult:
    """Captured output of a terminated process."""

    stdout: bytes
    stderr: bytes
    exit_status: int


@dataclass(slots=True)
class BackgroundTaskRecord:
    """Tracks one background process from spawn until collection."""

    spec: BackgroundTaskSpec
    handle: ProcessHandle | None
    pid: int | None = None
    state: TaskState = TaskState.SPAWNED
    result: ProcessResult | None = None
    failure: str | None = None
    force_killed: bool = False

    @property
    def stdout_suffix(self) -> str | None:
        return self.spec.stdout_suffix

    @property
    def stderr_suffix(self) -> str | None:
        return self.spec.stderr_suffix


@dataclass(frozen=True, slots=True)
class PrimaryTaskRecord:
    """Completed primary task with its top-level suffixes."""

    command: tuple[str, ...]
    pid: int
    result: ProcessResult
    stdout_suffix: str | None = None
    stderr_suffix: str | None = None


@dataclass(frozen=True, slots=True)
class RunPlan:
    """Everything one orchestrated run needs up front."""

    primary_command: tuple[str, ...]
    background: tuple[BackgroundTaskSpec, ...]
    outdir: Path
    stdout_suffix: str | None = None
    stderr_suffix: str | None = None


@dataclass(slots=True)
class RunReport:
    """Outcome of one orchestrated run."""

    primary: PrimaryTaskRecord
    collected: list[BackgroundTaskRecord] = field(default_factory=list)
    failed: list[BackgroundTaskRecord] = field(default_factory=list)
    written: list[Path] = field(default_factory=list)
    prefix: str = ""
    non_fatal_errors: list[str] = field(default_factory=list)
