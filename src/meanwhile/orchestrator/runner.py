"""Run a primary command while declared background tasks run alongside it.

One run is a strict sequence on a single thread:
spawn -> settle -> run primary -> interrupt -> grace -> kill -> collect -> write.

The settling and grace delays are blind timers. They give helpers a chance to
become ready (or to exit after an interrupt) but nothing is probed; a slow
helper is not waited for.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence

from meanwhile.orchestrator.collector import collect_output
from meanwhile.orchestrator.errors import (
    CollectionError,
    KillError,
    MeanwhileError,
    SignalError,
    SpawnError,
)
from meanwhile.orchestrator.models import (
    BackgroundTaskRecord,
    BackgroundTaskSpec,
    PrimaryTaskRecord,
    RunPlan,
    RunReport,
    TaskState,
)
from meanwhile.orchestrator.signals import KillOutcome, PosixSignaller, ProcessSignaller
from meanwhile.orchestrator.spawner import ProcessHandle, spawn_process
from meanwhile.orchestrator.writer import OutputWriter, ensure_outdir

logger = logging.getLogger(__name__)

Spawner = Callable[[str, Sequence[str]], ProcessHandle]
PrefixResolver = Callable[[], str]


def _empty_prefix() -> str:
    return ""


class Orchestrator:
    """Drives background and primary task lifecycles for one run."""

    def __init__(  # noqa: PLR0913
        self,
        *,
        settle_seconds: float = 1.0,
        grace_seconds: float = 0.5,
        spawner: Spawner = spawn_process,
        signaller: ProcessSignaller | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.settle_seconds = settle_seconds
        self.grace_seconds = grace_seconds
        self.spawner = spawner
        self.signaller = signaller or PosixSignaller()
        self._sleep = sleep

    def run(self, plan: RunPlan, resolve_prefix: PrefixResolver = _empty_prefix) -> RunReport:
        """Execute the full lifecycle.

        Raises ``SpawnError``, ``CollectionError`` (primary task only) or
        ``DirectoryError``; everything confined to one background task is
        logged and reported in ``RunReport.non_fatal_errors`` instead.
        """

        records = self.spawn_background(plan.background)

        non_fatal: list[str] = []
        try:
            logger.debug("Waiting %.3fs for background tasks to settle", self.settle_seconds)
            self._sleep(self.settle_seconds)
            for record in records:
                record.state = TaskState.RUNNING

            primary = self.run_primary(plan, records)

            self.interrupt_all(records, non_fatal)
            if records:
                logger.debug("Waiting %.3fs grace period after interrupt", self.grace_seconds)
                self._sleep(self.grace_seconds)
            self.kill_all(records, non_fatal)
            self.collect_all(records, non_fatal)
        except BaseException:
            self._abandon(records, reason="run interrupted")
            raise

        prefix = resolve_prefix()
        ensure_outdir(plan.outdir)

        writer = OutputWriter(plan.outdir, prefix)
        writer.write(primary.stdout_suffix, primary.result.stdout)
        writer.write(primary.stderr_suffix, primary.result.stderr)
        collected = [record for record in records if record.state is TaskState.COLLECTED]
        for record in collected:
            if record.result is None:
                continue
            writer.write(record.stdout_suffix, record.result.stdout)
            writer.write(record.stderr_suffix, record.result.stderr)
        non_fatal.extend(str(error) for error in writer.errors)

        return RunReport(
            primary=primary,
            collected=collected,
            failed=[r for r in records if r.state is TaskState.COLLECTION_FAILED],
            written=list(writer.written),
            prefix=prefix,
            non_fatal_errors=non_fatal,
        )

    def spawn_background(self, specs: Sequence[BackgroundTaskSpec]) -> list[BackgroundTaskRecord]:
        """Spawn every declared task or none: a failure tears down the ones already started."""

        records: list[BackgroundTaskRecord] = []
        for spec in specs:
            try:
                handle = self.spawner(spec.command, spec.arguments)
            except SpawnError as error:
                logger.error("Background task %r: %s", spec.describe(), error)
                self._abandon(records, reason=f"spawn of {spec.command!r} failed")
                raise
            logger.info("Background task %r started pid=%d", spec.describe(), handle.pid)
            records.append(BackgroundTaskRecord(spec=spec, handle=handle, pid=handle.pid))
        return records

    def run_primary(self, plan: RunPlan, records: list[BackgroundTaskRecord]) -> PrimaryTaskRecord:
        command, *arguments = plan.primary_command
        try:
            handle = self.spawner(command, arguments)
            logger.info("Primary task %r started pid=%d", " ".join(plan.primary_command), handle.pid)
            result = handle.wait_for_exit()
        except MeanwhileError as error:
            logger.error("Primary task %r: %s", " ".join(plan.primary_command), error)
            self._abandon(records, reason="primary task could not be run")
            raise
        logger.info("Primary task exited with status %d", result.exit_status)
        return PrimaryTaskRecord(
            command=plan.primary_command,
            pid=handle.pid,
            result=result,
            stdout_suffix=plan.stdout_suffix,
            stderr_suffix=plan.stderr_suffix,
        )

    def interrupt_all(self, records: list[BackgroundTaskRecord], non_fatal: list[str]) -> None:
        for record in records:
            if record.handle is None:
                continue
            try:
                delivered = self.signaller.interrupt(record.handle)
            except SignalError as error:
                logger.warning("%s (command=%r); will still kill", error, record.spec.describe())
                non_fatal.append(str(error))
                continue
            if delivered:
                record.state = TaskState.INTERRUPTED
            else:
                logger.debug("pid=%d exited before interrupt", record.pid)

    def kill_all(self, records: list[BackgroundTaskRecord], non_fatal: list[str]) -> None:
        for record in records:
            if record.handle is None:
                continue
            outcome = self.signaller.kill(record.handle)
            if outcome.outcome is KillOutcome.KILLED:
                record.force_killed = True
                record.state = TaskState.KILLED
                logger.info(
                    "Background task %r pid=%d still running after grace period; force-killed",
                    record.spec.describe(),
                    record.pid,
                )
            elif outcome.outcome is KillOutcome.ALREADY_EXITED:
                record.state = TaskState.KILLED
                logger.debug("pid=%d already exited before kill", record.pid)
            else:
                error = KillError(record.handle.pid, outcome.reason or "unknown error")
                logger.error("%s (command=%r); output discarded", error, record.spec.describe())
                record.state = TaskState.COLLECTION_FAILED
                record.failure = str(error)
                record.handle = None
                non_fatal.append(str(error))

    def collect_all(self, records: list[BackgroundTaskRecord], non_fatal: list[str]) -> None:
        for record in records:
            if record.state is not TaskState.KILLED:
                continue
            if not collect_output(record):
                non_fatal.append(record.failure or f"collection of pid={record.pid} failed")

    def _abandon(self, records: list[BackgroundTaskRecord], *, reason: str) -> None:
        for record in records:
            handle = record.handle
            if handle is None:
                continue
            logger.warning(
                "Dropping background task %r pid=%d: %s",
                record.spec.describe(),
                handle.pid,
                reason,
            )
            if self.signaller.kill(handle).outcome is not KillOutcome.FAILED:
                try:
                    handle.wait_for_exit()
                except CollectionError as error:
                    logger.warning("%s", error)
            record.handle = None
            record.state = TaskState.DROPPED
            record.failure = reason
