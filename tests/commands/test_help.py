"""Parametrized help and --examples tests for all CLI commands."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from scopectl import __version__
from scopectl.cli import cli
from tests.conftest import write_workspace

# (CLI args, expected keywords in output)
HELP_COMMANDS: list[tuple[list[str], list[str]]] = [
    (["--help"], ["affected", "run", "--json", "--input", "--config"]),
    (["affected", "--help"], ["--base", "--changed-file", "--changes-from"]),
    (["run", "--help"], ["test", "nextest", "build", "bench", "exec"]),
    (["run", "test", "--help"], ["--no-run", "--base", "ARGS"]),
    (["run", "nextest", "--help"], ["cargo nextest run"]),
    (["run", "exec", "--help"], ["--command", "--template", "--no-run"]),
]

EXAMPLES_COMMANDS: list[tuple[list[str], list[str]]] = [
    (["--examples"], ["scopectl affected", "scopectl -i"]),
    (["affected", "--examples"], ["--changes-from -", "--base origin/main"]),
    (["run", "--examples"], ["scopectl run test --no-run"]),
    (["run", "build", "--examples"], ["scopectl run build --no-run"]),
    (["run", "exec", "--examples"], ["--template bench --no-run", "--command"]),
]


@pytest.mark.parametrize(("args", "keywords"), HELP_COMMANDS)
def test_help(cli_runner: CliRunner, args: list[str], keywords: list[str]) -> None:
    result = cli_runner.invoke(cli, args)
    assert result.exit_code == 0, result.output
    for keyword in keywords:
        assert keyword in result.output


@pytest.mark.parametrize(("args", "keywords"), EXAMPLES_COMMANDS)
def test_examples(cli_runner: CliRunner, args: list[str], keywords: list[str]) -> None:
    result = cli_runner.invoke(cli, args)
    assert result.exit_code == 0, result.output
    assert "Usage examples for" in result.output
    for keyword in keywords:
        assert keyword in result.output


def test_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


@pytest.mark.usefixtures("_isolated_workspace")
def test_bare_invocation_prints_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage" in result.output


def test_exec_examples_list_configured_templates(
    cli_runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv("SCOPECTL_CONFIG", raising=False)
    write_workspace(tmp_path, config='[commands.templates]\nlint = "cargo clippy"\n')
    result = cli_runner.invoke(cli, ["-i", str(tmp_path), "run", "exec", "--examples"])
    assert result.exit_code == 0, result.output
    assert "scopectl run exec --template lint --no-run" in result.output
    assert "scopectl run exec --template test --no-run" in result.output
