"""Launch external commands with captured output."""

from __future__ import annotations

import logging
import os
import signal
import subprocess
from collections.abc import Sequence

from meanwhile.orchestrator.errors import CollectionError, SpawnError
from meanwhile.orchestrator.models import ProcessResult

logger = logging.getLogger(__name__)


class ProcessHandle:
    """Exclusive reference to one spawned process.

    Stdout and stderr are pipes owned by the handle; stdin is ``/dev/null``.
    ``wait_for_exit`` consumes the handle and can only succeed once.
    """

    def __init__(self, process: subprocess.Popen[bytes], command: str) -> None:
        self._process = process
        self._consumed = False
        self.command = command

    @property
    def pid(self) -> int:
        return self._process.pid

    def has_exited(self) -> bool:
        return self._process.poll() is not None

    def interrupt(self) -> None:
        """Send SIGINT. Raises ``OSError`` when delivery fails."""

        os.kill(self.pid, signal.SIGINT)

    def kill(self) -> None:
        """Send SIGKILL. Raises ``ProcessLookupError`` if the process is gone."""

        os.kill(self.pid, signal.SIGKILL)

    def wait_for_exit(self) -> ProcessResult:
        if self._consumed:
            raise CollectionError(self.pid, "handle was already collected")
        self._consumed = True
        try:
            stdout, stderr = self._process.communicate()
        except (OSError, ValueError) as error:
            raise CollectionError(self.pid, str(error)) from error
        return ProcessResult(
            stdout=stdout or b"",
            stderr=stderr or b"",
            exit_status=self._process.returncode,
        )


def spawn_process(command: str, arguments: Sequence[str] = ()) -> ProcessHandle:
    """Start ``command`` with piped stdout/stderr and a null stdin."""

    try:
        process = subprocess.Popen(  # noqa: S603
            [command, *arguments],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
    except FileNotFoundError as error:
        raise SpawnError(command, "command not found") from error
    except PermissionError as error:
        raise SpawnError(command, "permission denied") from error
    except OSError as error:
        raise SpawnError(command, str(error)) from error

    logger.debug("Spawned %r pid=%d", command, process.pid)
    return ProcessHandle(process, command)
