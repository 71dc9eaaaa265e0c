"""Tests for PluginManager — discovery, registration, and hook relay."""

from __future__ import annotations

from pathlib import Path

import pluggy
import pytest

from scopectl.domain.packages import Package
from scopectl.plugins.manager import PluginManager

hookimpl = pluggy.HookimplMarker("scopectl")


class _StaticPackages:
    """Minimal metadata source."""

    def __init__(self, package_id: str = "static") -> None:
        self.package_id = package_id

    @hookimpl
    def list_workspace_packages(self, root: Path) -> list[Package]:
        return [Package.create(self.package_id, root / self.package_id)]


class _Abstains:
    @hookimpl
    def list_workspace_packages(self, root: Path) -> list[Package] | None:
        return None


class _NoChanges:
    @hookimpl
    def list_changed_files(self, root: Path, base: str) -> list[Path]:
        return []


class _Broken:
    def __init__(self) -> None:
        raise RuntimeError("boom")


@pytest.fixture
def no_entry_points(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        pluggy.PluginManager, "load_setuptools_entrypoints", lambda self, group, name=None: 0
    )


class TestPluginManager:
    """Tests for the PluginManager class."""

    @pytest.mark.parametrize("hook_name", ["list_workspace_packages", "list_changed_files"])
    def test_all_hookspecs_registered(self, hook_name: str) -> None:
        assert hasattr(PluginManager().hook, hook_name)

    def test_register_plugin(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_StaticPackages(), name="static")
        assert "static" in pm.list_plugin_names()

    def test_register_plugin_default_name(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_NoChanges())
        assert "_NoChanges" in pm.list_plugin_names()

    @pytest.mark.usefixtures("no_entry_points")
    def test_discover_returns_registered_names(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_NoChanges(), name="git")
        assert pm.discover_and_load() == ["git"]


class TestFirstResult:
    def test_latest_registration_wins(self, tmp_path: Path) -> None:
        pm = PluginManager()
        pm.register_plugin(_StaticPackages("builtin"), name="builtin")
        pm.register_plugin(_StaticPackages("override"), name="override")
        (pkg,) = pm.hook.list_workspace_packages(root=tmp_path)
        assert pkg.id == "override"

    def test_none_falls_through(self, tmp_path: Path) -> None:
        pm = PluginManager()
        pm.register_plugin(_StaticPackages("builtin"), name="builtin")
        pm.register_plugin(_Abstains(), name="abstains")
        (pkg,) = pm.hook.list_workspace_packages(root=tmp_path)
        assert pkg.id == "builtin"

    def test_no_implementation_returns_none(self, tmp_path: Path) -> None:
        pm = PluginManager()
        assert pm.hook.list_changed_files(root=tmp_path, base="HEAD~1") is None


@pytest.mark.usefixtures("no_entry_points")
class TestEntryPointNormalization:
    def test_class_plugin_is_instantiated(self, tmp_path: Path) -> None:
        pm = PluginManager()
        pm._pm.register(_NoChanges, name="class-plugin")
        pm.discover_and_load()
        assert "class-plugin" in pm.list_plugin_names()
        assert pm.hook.list_changed_files(root=tmp_path, base="HEAD") == []

    def test_failed_instantiation_is_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        pm = PluginManager()
        pm._pm.register(_Broken, name="broken")
        with caplog.at_level("WARNING"):
            pm.discover_and_load()
        assert "broken" not in pm.list_plugin_names()
        assert "Failed to instantiate" in caplog.text
