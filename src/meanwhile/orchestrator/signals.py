"""Interrupt/kill capability used to shut background tasks down."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from meanwhile.orchestrator.errors import SignalError
from meanwhile.orchestrator.spawner import ProcessHandle


class KillOutcome(str, Enum):
    KILLED = "killed"
    ALREADY_EXITED = "already_exited"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class KillResult:
    outcome: KillOutcome
    reason: str | None = None


class ProcessSignaller(Protocol):
    """Platform capability for stopping a process."""

    def interrupt(self, handle: ProcessHandle) -> bool:
        """Ask the process to stop; return False if it had already exited.

        Raises ``SignalError`` when the request cannot be delivered.
        """

    def kill(self, handle: ProcessHandle) -> KillResult:
        """Force the process to stop."""


class PosixSignaller:
    """SIGINT for interrupt, SIGKILL for kill."""

    def interrupt(self, handle: ProcessHandle) -> bool:
        if handle.has_exited():
            return False
        try:
            handle.interrupt()
        except ProcessLookupError:
            return False
        except OSError as error:
            raise SignalError(handle.pid, str(error)) from error
        return True

    def kill(self, handle: ProcessHandle) -> KillResult:
        # A zombie still accepts signals, so reap-check before sending.
        if handle.has_exited():
            return KillResult(KillOutcome.ALREADY_EXITED)
        try:
            handle.kill()
        except ProcessLookupError:
            return KillResult(KillOutcome.ALREADY_EXITED)
        except OSError as error:
            return KillResult(KillOutcome.FAILED, reason=str(error))
        return KillResult(KillOutcome.KILLED)
