"""Workspace — the single dependency injected into every service.

Owns the workspace root and the plugin manager that answers the two
input questions of the impact engine: which packages exist, and which
files changed. Nothing is cached across invocations.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from scopectl.plugins.builtins.cargo import CargoPlugin
from scopectl.plugins.builtins.git import GitPlugin
from scopectl.plugins.builtins.manifest import ManifestPlugin
from scopectl.plugins.manager import PluginManager

if TYPE_CHECKING:
    from scopectl.config.settings import ScopeSettings
    from scopectl.domain.packages import Package

logger = logging.getLogger(__name__)


class Workspace:
    """A multi-package workspace rooted at ``settings.workspace_root``."""

    def __init__(
        self,
        settings: ScopeSettings,
        *,
        plugin_manager: PluginManager | None = None,
    ) -> None:
        self.settings = settings
        self.root: Path = settings.workspace_root
        self._plugins = plugin_manager

    @property
    def plugins(self) -> PluginManager:
        """Plugin manager with built-ins and entry-point plugins (created lazily)."""
        if self._plugins is None:
            self._plugins = self._init_plugins()
        return self._plugins

    def _init_plugins(self) -> PluginManager:
        pm = PluginManager()
        source = self.settings.workspace.metadata_source
        if source == "manifest":
            pm.register_plugin(ManifestPlugin(self.settings.workspace), name="manifest")
        else:
            pm.register_plugin(CargoPlugin(self.settings.workspace), name="cargo")
        pm.register_plugin(GitPlugin(), name="git")
        loaded = pm.discover_and_load()
        logger.debug("Plugins loaded: %s", ", ".join(loaded))
        return pm

    def list_packages(self) -> list[Package]:
        """Ask the metadata source for workspace members.

        Exceptions from the source propagate; an unanswered hook yields
        an empty list.
        """
        packages = self.plugins.hook.list_workspace_packages(root=self.root)
        return list(packages or [])

    def list_changed_files(self, base: str | None = None) -> list[Path] | None:
        """Ask the change source for files changed since *base*.

        Returns None when no change source could answer.
        """
        revision = base or self.settings.changes.base
        return self.plugins.hook.list_changed_files(root=self.root, base=revision)
