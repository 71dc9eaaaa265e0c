"""Tests for Workspace — plugin wiring for metadata and change sources."""

from __future__ import annotations

from pathlib import Path

import pluggy

from scopectl.config.settings import ScopeSettings
from scopectl.domain.packages import Package
from scopectl.infrastructure.workspace import Workspace
from scopectl.plugins.manager import PluginManager
from tests.conftest import commit_files, write_workspace

hookimpl = pluggy.HookimplMarker("scopectl")


class _StaticChanges:
    def __init__(self, paths: list[Path] | None) -> None:
        self.paths = paths
        self.calls: list[tuple[Path, str]] = []

    @hookimpl
    def list_changed_files(self, root: Path, base: str) -> list[Path] | None:
        self.calls.append((root, base))
        return self.paths


class TestPluginWiring:
    def test_manifest_source_selected(self, workspace: Workspace) -> None:
        names = workspace.plugins.list_plugin_names()
        assert "manifest" in names
        assert "cargo" not in names
        assert "git" in names

    def test_cargo_is_default(self, tmp_path: Path) -> None:
        ws = Workspace(ScopeSettings.from_cli(workspace_root=tmp_path))
        assert "cargo" in ws.plugins.list_plugin_names()

    def test_plugins_created_once(self, workspace: Workspace) -> None:
        assert workspace.plugins is workspace.plugins


class TestListPackages:
    def test_reads_manifest(self, workspace: Workspace, workspace_root: Path) -> None:
        packages = {pkg.id: pkg for pkg in workspace.list_packages()}
        assert set(packages) == {"core", "util", "app", "tools"}
        assert packages["app"] == Package.create(
            "app", workspace_root / "apps" / "app", ["core"]
        )

    def test_unanswered_hook_is_empty(self, tmp_path: Path) -> None:
        ws = Workspace(
            ScopeSettings.from_cli(workspace_root=tmp_path),
            plugin_manager=PluginManager(),
        )
        assert ws.list_packages() == []


class TestListChangedFiles:
    def test_uses_configured_base(self, workspace: Workspace) -> None:
        source = _StaticChanges([Path("/x")])
        workspace.plugins.register_plugin(source, name="static")
        assert workspace.list_changed_files() == [Path("/x")]
        assert source.calls == [(workspace.root, "HEAD~1")]

    def test_explicit_base(self, workspace: Workspace) -> None:
        source = _StaticChanges([])
        workspace.plugins.register_plugin(source, name="static")
        assert workspace.list_changed_files("origin/main") == []
        assert source.calls[0][1] == "origin/main"

    def test_not_a_repository(self, workspace: Workspace) -> None:
        assert workspace.list_changed_files() is None

    def test_git_source(self, git_repo: Path) -> None:
        write_workspace(git_repo)
        commit_files(git_repo, {}, "layout")
        commit_files(git_repo, {"libs/core/src/lib.rs": "pub fn a() {}\n"})
        ws = Workspace(ScopeSettings.from_cli(workspace_root=git_repo))
        assert ws.list_changed_files() == [git_repo / "libs" / "core" / "src" / "lib.rs"]
