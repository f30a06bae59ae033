"""Process lifecycle orchestration.

A run spawns every declared background task, waits a fixed settling delay,
runs the primary command to completion, interrupts the background tasks,
waits a fixed grace delay, kills whatever is left, collects all captured
output and writes the selected streams to ``{prefix}{suffix}`` files.
"""

from meanwhile.orchestrator.errors import (
    CollectionError,
    DeclarationError,
    DirectoryError,
    KillError,
    MeanwhileError,
    SignalError,
    SpawnError,
    WriteError,
)
from meanwhile.orchestrator.models import (
    BackgroundTaskRecord,
    BackgroundTaskSpec,
    PrimaryTaskRecord,
    ProcessResult,
    RunPlan,
    RunReport,
    TaskState,
)
from meanwhile.orchestrator.runner import Orchestrator
from meanwhile.orchestrator.signals import KillOutcome, KillResult, PosixSignaller, ProcessSignaller
from meanwhile.orchestrator.spawner import ProcessHandle, spawn_process

__all__ = [
    "BackgroundTaskRecord",
    "BackgroundTaskSpec",
    "CollectionError",
    "DeclarationError",
    "DirectoryError",
    "KillError",
    "KillOutcome",
    "KillResult",
    "MeanwhileError",
    "Orchestrator",
    "PosixSignaller",
    "PrimaryTaskRecord",
    "ProcessHandle",
    "ProcessResult",
    "ProcessSignaller",
    "RunPlan",
    "RunReport",
    "SignalError",
    "SpawnError",
    "TaskState",
    "WriteError",
    "spawn_process",
]
