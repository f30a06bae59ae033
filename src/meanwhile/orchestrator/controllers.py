"""Controller for the meanwhile CLI command."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace
from pathlib import Path

from meanwhile.config import Settings
from meanwhile.declaration import load_declaration
from meanwhile.orchestrator.models import RunPlan, RunReport
from meanwhile.orchestrator.runner import Orchestrator


@dataclass(slots=True)
class RunCommand:
    """CLI input for one orchestrated run."""

    command: tuple[str, ...]
    tasks_file: Path | None = None
    delay_seconds: float | None = None
    grace_seconds: float | None = None
    prefix: str | None = None
    interactive_prefix: bool = False
    stdout_suffix: str | None = None
    stderr_suffix: str | None = None
    outdir: Path | None = None


@dataclass(slots=True)
class RunSummary:
    """Run report to render in CLI."""

    lines: list[str]
    report: RunReport


class MeanwhileCliController:
    """Resolves settings and declarations, then drives the orchestrator."""

    def __init__(
        self,
        *,
        prompt_prefix: Callable[[], str] | None = None,
        orchestrator_factory: Callable[[Settings], Orchestrator] | None = None,
    ) -> None:
        self._prompt_prefix = prompt_prefix
        self._orchestrator_factory = orchestrator_factory or _default_orchestrator

    def resolve_settings(self, command: RunCommand, settings: Settings | None = None) -> Settings:
        settings = settings or Settings.from_env()
        overrides: dict[str, object] = {}
        if command.tasks_file is not None:
            overrides["tasks_file"] = command.tasks_file
        if command.delay_seconds is not None:
            overrides["delay_seconds"] = command.delay_seconds
        if command.grace_seconds is not None:
            overrides["grace_seconds"] = command.grace_seconds
        if command.outdir is not None:
            overrides["outdir"] = command.outdir
        resolved = replace(settings, **overrides)
        resolved.validate()
        return resolved

    def run(self, command: RunCommand, settings: Settings | None = None) -> RunSummary:
        if not command.command:
            raise ValueError("A primary command is required.")
        resolved = self.resolve_settings(command, settings)
        background = load_declaration(resolved.tasks_file)
        plan = RunPlan(
            primary_command=command.command,
            background=background,
            outdir=resolved.outdir,
            stdout_suffix=command.stdout_suffix,
            stderr_suffix=command.stderr_suffix,
        )
        orchestrator = self._orchestrator_factory(resolved)
        report = orchestrator.run(plan, resolve_prefix=self._prefix_resolver(command))
        return RunSummary(lines=render_summary_lines(report), report=report)

    def _prefix_resolver(self, command: RunCommand) -> Callable[[], str]:
        if command.prefix is not None:
            prefix = command.prefix
            return lambda: prefix
        if command.interactive_prefix and self._prompt_prefix is not None:
            return self._prompt_prefix
        return lambda: ""


def render_summary_lines(report: RunReport) -> list[str]:
    primary = report.primary
    lines = [
        "Run summary: "
        f"primary_exit={primary.result.exit_status} "
        f"background_collected={len(report.collected)} "
        f"background_failed={len(report.failed)} "
        f"files_written={len(report.written)} "
        f"non_fatal_errors={len(report.non_fatal_errors)}",
    ]
    lines.extend(f"Wrote: {path}" for path in report.written)
    lines.extend(
        f"Failed: pid={record.pid} command={record.spec.describe()!r} reason={record.failure}"
        for record in report.failed
    )
    return lines


def _default_orchestrator(settings: Settings) -> Orchestrator:
    return Orchestrator(
        settle_seconds=settings.delay_seconds,
        grace_seconds=settings.grace_seconds,
    )
