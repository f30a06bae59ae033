"""CLI entrypoint for meanwhile."""

from __future__ import annotations

import logging
from pathlib import Path

import rich_click as click

from meanwhile import __version__
from meanwhile.config import LOG_LEVELS
from meanwhile.logging_setup import setup_logging
from meanwhile.orchestrator.controllers import MeanwhileCliController, RunCommand
from meanwhile.orchestrator.errors import MeanwhileError

click.rich_click.USE_MARKDOWN = True
logger = logging.getLogger(__name__)


def _prompt_prefix() -> str:
    return click.prompt("Output file prefix", default="", show_default=False)


CONTROLLER = MeanwhileCliController(prompt_prefix=_prompt_prefix)


@click.command(context_settings={"allow_interspersed_args": False})
@click.version_option(version=__version__, prog_name="meanwhile")
@click.option(
    "-t",
    "--tasks-file",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Background task declaration file. Defaults to MEANWHILE_TASKS_FILE or ./meanwhile.toml.",
)
@click.option(
    "-d",
    "--delay",
    "delay_seconds",
    type=click.FloatRange(min=0),
    default=None,
    help="Seconds to wait after starting background tasks (default 1.0).",
)
@click.option(
    "--grace",
    "grace_seconds",
    type=click.FloatRange(min=0),
    default=None,
    help="Seconds to wait between interrupting and killing background tasks (default 0.5).",
)
@click.option("-p", "--prefix", default=None, help="Shared name prefix for output files.")
@click.option(
    "-i",
    "--interactive-prefix",
    is_flag=True,
    default=False,
    help="Ask for the output file prefix after the run. Ignored when --prefix is given.",
)
@click.option("--stdout-suffix", default=None, help="Save the primary command's stdout as {prefix}{suffix}.")
@click.option("--stderr-suffix", default=None, help="Save the primary command's stderr as {prefix}{suffix}.")
@click.option(
    "-o",
    "--outdir",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Directory for output files. Defaults to MEANWHILE_OUTDIR or the current directory.",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Log verbosity. Defaults to MEANWHILE_LOG_LEVEL or INFO.",
)
@click.argument("command", nargs=-1, required=True, type=click.UNPROCESSED)
def meanwhile(  # noqa: PLR0913
    tasks_file: Path | None,
    delay_seconds: float | None,
    grace_seconds: float | None,
    prefix: str | None,
    interactive_prefix: bool,
    stdout_suffix: str | None,
    stderr_suffix: str | None,
    outdir: Path | None,
    log_level: str | None,
    command: tuple[str, ...],
) -> None:
    """Run COMMAND while the declared background tasks run alongside it.

    Background tasks are interrupted and then killed once COMMAND exits, and
    the captured output of every process is written to `{prefix}{suffix}` files.
    """

    run_command = RunCommand(
        command=command,
        tasks_file=tasks_file,
        delay_seconds=delay_seconds,
        grace_seconds=grace_seconds,
        prefix=prefix,
        interactive_prefix=interactive_prefix,
        stdout_suffix=stdout_suffix,
        stderr_suffix=stderr_suffix,
        outdir=outdir,
    )
    try:
        settings = CONTROLLER.resolve_settings(run_command)
    except ValueError as error:
        raise click.UsageError(str(error)) from error
    setup_logging((log_level or settings.log_level).upper())

    try:
        summary = CONTROLLER.run(run_command, settings=settings)
    except MeanwhileError as error:
        logger.error("%s", error)
        raise click.ClickException(str(error)) from error
    _emit_lines(summary.lines)


def _emit_lines(lines: list[str]) -> None:
    for line in lines:
        click.echo(line)


if __name__ == "__main__":  # pragma: no cover
    meanwhile()
