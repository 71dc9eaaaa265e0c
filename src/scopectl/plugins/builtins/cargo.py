"""Built-in Cargo metadata source.

Runs ``cargo metadata --no-deps`` and keeps only path dependencies that
point at another workspace member. Registry and git dependencies never
reach the core.
"""

from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path
from typing import Any

import pluggy

from scopectl.config.models import WorkspaceConfig
from scopectl.domain.packages import Package
from scopectl.domain.paths import normalize_path

hookimpl = pluggy.HookimplMarker("scopectl")

logger = logging.getLogger(__name__)


class CargoMetadataError(RuntimeError):
    """``cargo metadata`` could not be run or returned unusable output."""


class CargoPlugin:
    """Metadata source for Cargo workspaces."""

    def __init__(self, config: WorkspaceConfig | None = None) -> None:
        self._config = config or WorkspaceConfig()

    @hookimpl
    def list_workspace_packages(self, root: Path) -> list[Package]:
        """Return workspace members keyed by crate name.

        Raises:
            CargoMetadataError: If cargo is missing or fails.
        """
        return self.packages_from_metadata(self._read_metadata(root))

    def packages_from_metadata(self, metadata: dict[str, Any]) -> list[Package]:
        """Convert a ``cargo metadata`` document into packages."""
        kinds = set(self._config.dependency_kinds)
        members = metadata.get("packages", [])

        roots: dict[Path, str] = {}
        for pkg in members:
            roots[normalize_path(Path(pkg["manifest_path"]).parent)] = pkg["name"]

        packages: list[Package] = []
        for pkg in members:
            deps: set[str] = set()
            for dep in pkg.get("dependencies", []):
                # cargo reports ordinary dependencies with kind = null
                if (dep.get("kind") or "normal") not in kinds:
                    continue
                dep_path = dep.get("path")
                if not dep_path:
                    continue
                dep_id = roots.get(normalize_path(dep_path))
                if dep_id is not None and dep_id != pkg["name"]:
                    deps.add(dep_id)
            packages.append(
                Package.create(pkg["name"], Path(pkg["manifest_path"]).parent, deps)
            )
        logger.debug("cargo metadata: %d workspace members", len(packages))
        return packages

    @staticmethod
    def _read_metadata(root: Path) -> dict[str, Any]:
        try:
            result = subprocess.run(
                ["cargo", "metadata", "--format-version", "1", "--no-deps"],
                cwd=root,
                capture_output=True,
                text=True,
                check=True,
            )
        except FileNotFoundError as exc:
            raise CargoMetadataError("cargo executable not found") from exc
        except subprocess.CalledProcessError as exc:
            msg = f"cargo metadata failed: {(exc.stderr or '').strip() or exc}"
            raise CargoMetadataError(msg) from exc

        try:
            data: dict[str, Any] = json.loads(result.stdout)
        except json.JSONDecodeError as exc:
            raise CargoMetadataError(f"cargo metadata returned invalid JSON: {exc}") from exc
        return data
