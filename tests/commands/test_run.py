"""Tests for the run command group."""

from __future__ import annotations

import json
import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from scopectl.cli import cli


@pytest.mark.usefixtures("_isolated_workspace")
class TestRunNoRun:
    def test_test_exclude(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["-q", "run", "test", "--no-run", "--changed-file", "libs/core/lib.rs"]
        )
        assert result.exit_code == 0, result.output
        assert result.stdout.strip() == "cargo test --workspace --exclude util"

    def test_passthrough_args(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli,
            [
                "-q",
                "run",
                "build",
                "--no-run",
                "--changed-file",
                "apps/tools/main.rs",
                "--",
                "--release",
                "--features",
                "a b",
            ],
        )
        assert result.stdout.strip() == "cargo build -p tools --release --features 'a b'"

    @pytest.mark.parametrize(
        ("name", "prefix"),
        [
            ("test", ["cargo", "test"]),
            ("nextest", ["cargo", "nextest", "run"]),
            ("build", ["cargo", "build"]),
            ("bench", ["cargo", "bench"]),
        ],
    )
    def test_builtin_full_run(self, cli_runner: CliRunner, name: str, prefix: list[str]) -> None:
        result = cli_runner.invoke(
            cli, ["--json", "run", name, "--no-run", "--changed-file", "rust-toolchain.toml"]
        )
        data = json.loads(result.stdout)
        assert data["op"] == "plan"
        assert data["data"]["argv"] == [*prefix, "--workspace"]

    def test_human_output(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["run", "test", "--no-run", "--changed-file", "libs/util/lib.rs"]
        )
        assert "command: cargo test -p util" in result.stdout


@pytest.mark.usefixtures("_isolated_workspace")
class TestRunExec:
    def test_inline_command(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli,
            [
                "-q",
                "run",
                "exec",
                "--no-run",
                "--command",
                "make{% for p in packages %} test-{{ p }}{% endfor %}"
                "{% for p in excludes %} skip-{{ p }}{% endfor %}",
                "--changed-file",
                "libs/core/lib.rs",
            ],
        )
        assert result.exit_code == 0, result.output
        assert result.stdout.strip() == "make skip-util"

    def test_builtin_template_by_name(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli,
            ["-q", "run", "exec", "-t", "bench", "--no-run", "--changed-file", "libs/util/x"],
        )
        assert result.stdout.strip() == "cargo bench -p util"

    def test_unsupported_variable_fails(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["run", "exec", "--no-run", "-c", "run {{ nope }}", "--changed-file", "x"]
        )
        assert result.exit_code == 1
        assert "ERROR" in result.stderr
        assert "nope" in result.stderr

    def test_missing_template_and_command(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["run", "exec", "--changed-file", "x"])
        assert result.exit_code == 1
        assert "ERROR" in result.stderr


@pytest.mark.usefixtures("_isolated_workspace")
class TestRunExecute:
    def test_exit_code_propagates(self, cli_runner: CliRunner) -> None:
        with patch(
            "scopectl.commands.run.subprocess.run",
            return_value=MagicMock(returncode=3),
        ) as run:
            result = cli_runner.invoke(
                cli, ["run", "test", "--changed-file", "libs/util/lib.rs"]
            )
        assert result.exit_code == 3
        assert run.call_args.args[0] == ["cargo", "test", "-p", "util"]
        assert "Running: cargo test -p util" in result.stderr

    def test_quiet_suppresses_banner(self, cli_runner: CliRunner) -> None:
        with patch(
            "scopectl.commands.run.subprocess.run",
            return_value=MagicMock(returncode=0),
        ):
            result = cli_runner.invoke(
                cli, ["-q", "run", "test", "--changed-file", "libs/util/lib.rs"]
            )
        assert result.exit_code == 0
        assert "Running:" not in result.stderr

    def test_warnings_before_execution(self, cli_runner: CliRunner) -> None:
        with patch(
            "scopectl.commands.run.subprocess.run",
            return_value=MagicMock(returncode=0),
        ):
            result = cli_runner.invoke(cli, ["run", "test", "--changed-file", "Cargo.lock"])
        assert "WARNING:" in result.stderr

    def test_command_not_found(self, cli_runner: CliRunner) -> None:
        with patch(
            "scopectl.commands.run.subprocess.run",
            side_effect=FileNotFoundError("cargo"),
        ):
            result = cli_runner.invoke(cli, ["run", "test", "--changed-file", "libs/util/x"])
        assert result.exit_code == 1
        assert "Command not found: cargo" in result.stderr

    def test_runs_in_workspace_root(self, cli_runner: CliRunner, workspace_root: Path) -> None:
        with patch(
            "scopectl.commands.run.subprocess.run",
            return_value=subprocess.CompletedProcess(args=[], returncode=0),
        ) as run:
            cli_runner.invoke(cli, ["run", "build", "--changed-file", "libs/util/x"])
        assert run.call_args.kwargs["cwd"] == workspace_root.resolve()
