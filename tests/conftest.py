"""Shared pytest fixtures and test helpers for scopectl tests."""

from __future__ import annotations

import json
import subprocess
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from scopectl.config.settings import ScopeSettings
from scopectl.infrastructure.workspace import Workspace

# core <- app <- tools, util stands alone.
SAMPLE_PACKAGES: list[dict[str, Any]] = [
    {"id": "core", "root": "libs/core"},
    {"id": "util", "root": "libs/util"},
    {"id": "app", "root": "apps/app", "dependencies": ["core"]},
    {"id": "tools", "root": "apps/tools", "dependencies": ["app"]},
]


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def workspace_root(tmp_path: Path) -> Path:
    """Temporary manifest-backed workspace with the sample packages.

    This is the single source of truth for the workspace layout.
    """
    return write_workspace(tmp_path)


@pytest.fixture
def workspace(workspace_root: Path) -> Workspace:
    """Workspace over the sample packages."""
    return Workspace(ScopeSettings.from_cli(workspace_root=workspace_root))


@pytest.fixture
def _isolated_workspace(workspace_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to the temp workspace so the CLI discovers its scopectl.toml.

    Use via ``@pytest.mark.usefixtures("_isolated_workspace")`` on command test
    classes.
    """
    monkeypatch.delenv("SCOPECTL_CONFIG", raising=False)
    monkeypatch.chdir(workspace_root)


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """Temporary git repository with an initial commit."""
    git(tmp_path, "init")
    git(tmp_path, "config", "user.email", "test@test.com")
    git(tmp_path, "config", "user.name", "Test")
    (tmp_path / ".keep").write_text("", encoding="utf-8")
    git(tmp_path, "add", ".")
    git(tmp_path, "commit", "-m", "init")
    return tmp_path


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def write_workspace(
    root: Path,
    packages: list[dict[str, Any]] | None = None,
    *,
    config: str = "",
) -> Path:
    """Lay out package directories, a JSON manifest and a scopectl.toml."""
    packages = SAMPLE_PACKAGES if packages is None else packages
    for pkg in packages:
        (root / pkg["root"]).mkdir(parents=True, exist_ok=True)
    (root / "scopectl-packages.json").write_text(
        json.dumps({"packages": packages}), encoding="utf-8"
    )
    (root / "scopectl.toml").write_text(
        '[workspace]\nmetadata_source = "manifest"\n' + config, encoding="utf-8"
    )
    return root


def make_workspace(root: Path, **cli_flags: Any) -> Workspace:
    """Workspace for *root* with extra settings overrides."""
    return Workspace(ScopeSettings.from_cli(workspace_root=root, **cli_flags))


def git(cwd: Path, *args: str) -> str:
    """Run git in *cwd*, returning stdout."""
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout


def commit_files(repo: Path, files: dict[str, str], message: str = "change") -> None:
    """Write *files* (relative path -> content) and commit them."""
    for rel, content in files.items():
        path = repo / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    git(repo, "add", "-A")
    git(repo, "commit", "-m", message)
