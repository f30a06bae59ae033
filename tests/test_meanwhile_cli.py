from __future__ import annotations

import logging
from pathlib import Path

import allure
from click.testing import CliRunner

from meanwhile.main import meanwhile

pytestmark = [
    allure.epic("CLI"),
    allure.feature("End-to-end Runs"),
]


def _invoke(tasks_file: Path, outdir: Path, *args: str, **kwargs):
    runner = CliRunner()
    return runner.invoke(
        meanwhile,
        ["-t", str(tasks_file), "-o", str(outdir), *args],
        **kwargs,
    )


def test_scenario_background_sleep_with_echo(write_tasks_file, tmp_path: Path) -> None:
    tasks = write_tasks_file('[[tasks]]\ncmd = "sleep"\nargs = ["5"]\nstdout-suffix = ".bg.out"\n')
    outdir = tmp_path / "out"

    result = _invoke(
        tasks,
        outdir,
        "-d",
        "0.01",
        "--grace",
        "0.2",
        "-p",
        "run",
        "--stdout-suffix",
        ".out",
        "echo",
        "hi",
    )

    assert result.exit_code == 0, result.output
    assert sorted(path.name for path in outdir.iterdir()) == ["run.bg.out", "run.out"]
    assert (outdir / "run.out").read_bytes() == b"hi\n"
    assert (outdir / "run.bg.out").read_bytes() == b""
    assert "non_fatal_errors=0" in result.output


def test_scenario_missing_background_executable_aborts(write_tasks_file, tmp_path: Path) -> None:
    tasks = write_tasks_file('[[tasks]]\ncmd = "meanwhile-no-such-helper"\nargs = []\nstdout-suffix = ".bg"\n')
    outdir = tmp_path / "out"
    marker = tmp_path / "primary-started"

    result = _invoke(
        tasks,
        outdir,
        "-d",
        "0.01",
        "--stdout-suffix",
        ".out",
        "touch",
        str(marker),
    )

    assert result.exit_code != 0
    assert "meanwhile-no-such-helper" in result.output
    assert not marker.exists()
    assert not outdir.exists()


def test_scenario_interrupt_ignored_is_force_killed(write_tasks_file, tmp_path: Path, caplog) -> None:
    tasks = write_tasks_file(
        "[[tasks]]\n"
        'cmd = "sh"\n'
        "args = [\"-c\", \"trap '' INT; echo ready; exec sleep 30\"]\n"
        'stdout-suffix = ".bg.out"\n',
    )
    outdir = tmp_path / "out"

    with caplog.at_level(logging.INFO, logger="meanwhile"):
        result = _invoke(tasks, outdir, "-d", "0.3", "--grace", "0.2", "-p", "c", "true")

    assert result.exit_code == 0, result.output
    assert (outdir / "c.bg.out").read_bytes() == b"ready\n"
    assert "force-killed" in caplog.text


def test_primary_arguments_pass_through_untouched(write_tasks_file, tmp_path: Path) -> None:
    tasks = write_tasks_file("")
    outdir = tmp_path / "out"

    result = _invoke(
        tasks,
        outdir,
        "-d",
        "0",
        "--stdout-suffix",
        ".out",
        "--stderr-suffix",
        ".err",
        "sh",
        "-c",
        "echo to-out; echo to-err >&2; exit 4",
    )

    assert result.exit_code == 0, result.output
    assert (outdir / ".out").read_bytes() == b"to-out\n"
    assert (outdir / ".err").read_bytes() == b"to-err\n"
    assert "primary_exit=4" in result.output


def test_interactive_prefix_is_prompted(write_tasks_file, tmp_path: Path) -> None:
    tasks = write_tasks_file("")
    outdir = tmp_path / "out"

    result = _invoke(
        tasks,
        outdir,
        "-d",
        "0",
        "-i",
        "--stdout-suffix",
        ".log",
        "echo",
        "prompted",
        input="nightly-\n",
    )

    assert result.exit_code == 0, result.output
    assert (outdir / "nightly-.log").read_bytes() == b"prompted\n"


def test_explicit_prefix_wins_over_interactive(write_tasks_file, tmp_path: Path) -> None:
    tasks = write_tasks_file("")
    outdir = tmp_path / "out"

    result = _invoke(tasks, outdir, "-d", "0", "-i", "-p", "fixed", "--stdout-suffix", ".log", "echo", "x")

    assert result.exit_code == 0, result.output
    assert (outdir / "fixed.log").exists()


def test_missing_declaration_file_is_fatal(tmp_path: Path) -> None:
    result = _invoke(tmp_path / "absent.toml", tmp_path / "out", "-d", "0", "echo", "hi")

    assert result.exit_code == 1
    assert "file not found" in result.output


def test_command_is_required(write_tasks_file, tmp_path: Path) -> None:
    result = _invoke(write_tasks_file(""), tmp_path / "out")

    assert result.exit_code == 2


def test_invalid_env_delay_is_a_usage_error(write_tasks_file, tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("MEANWHILE_GRACE_SECONDS", "later")

    result = _invoke(write_tasks_file(""), tmp_path / "out", "echo", "hi")

    assert result.exit_code == 2
    assert "MEANWHILE_GRACE_SECONDS" in result.output


def test_unusable_output_directory_exits_non_zero(write_tasks_file, tmp_path: Path) -> None:
    outdir = tmp_path / "not-a-dir"
    outdir.write_text("occupied", "utf-8")
    marker = tmp_path / "primary-ran"

    result = _invoke(write_tasks_file(""), outdir, "-d", "0", "--stdout-suffix", ".out", "touch", str(marker))

    assert result.exit_code == 1
    assert marker.exists()
    assert "Failed to create output directory" in result.output


def test_write_failure_still_exits_zero(write_tasks_file, tmp_path: Path) -> None:
    outdir = tmp_path / "out"
    (outdir / "w.out").mkdir(parents=True)

    result = _invoke(
        write_tasks_file(""),
        outdir,
        "-d",
        "0",
        "-p",
        "w",
        "--stdout-suffix",
        ".out",
        "--stderr-suffix",
        ".err",
        "sh",
        "-c",
        "echo out; echo err >&2",
    )

    assert result.exit_code == 0, result.output
    assert (outdir / "w.out").is_dir()
    assert (outdir / "w.err").read_bytes() == b"err\n"
    assert "non_fatal_errors=1" in result.output


def test_critical_log_level_is_accepted(write_tasks_file, tmp_path: Path) -> None:
    result = _invoke(write_tasks_file(""), tmp_path / "out", "--log-level", "critical", "-d", "0", "true")

    assert result.exit_code == 0, result.output
