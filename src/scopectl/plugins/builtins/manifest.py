"""Built-in static manifest source.

For build tools without a Cargo-style metadata command: the workspace
lists its packages in a JSON file (``scopectl-packages.json`` by default)::

    {
      "packages": [
        {"id": "core", "root": "libs/core"},
        {"id": "app", "root": "apps/app", "dependencies": ["core"]}
      ]
    }

Relative roots are resolved against the workspace root.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pluggy
from pydantic import BaseModel, Field, ValidationError

from scopectl.config.models import WorkspaceConfig
from scopectl.domain.packages import Package
from scopectl.domain.paths import normalize_path

hookimpl = pluggy.HookimplMarker("scopectl")

logger = logging.getLogger(__name__)


class ManifestError(RuntimeError):
    """The manifest file is missing or does not match the schema."""


class ManifestEntry(BaseModel):
    """One package in the manifest."""

    model_config = {"frozen": True}

    id: str
    root: str
    dependencies: list[str] = Field(default_factory=list)


class Manifest(BaseModel):
    """Top-level manifest document."""

    model_config = {"frozen": True}

    packages: list[ManifestEntry] = Field(default_factory=list)


class ManifestPlugin:
    """Metadata source reading a static JSON manifest."""

    def __init__(self, config: WorkspaceConfig | None = None) -> None:
        self._config = config or WorkspaceConfig()

    @hookimpl
    def list_workspace_packages(self, root: Path) -> list[Package]:
        """Return the packages declared in the manifest.

        Raises:
            ManifestError: If the file is missing, not JSON, or invalid.
        """
        path = normalize_path(self._config.manifest, base=root)
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
            manifest = Manifest.model_validate(raw)
        except FileNotFoundError as exc:
            raise ManifestError(f"Manifest not found: {path}") from exc
        except (json.JSONDecodeError, ValidationError) as exc:
            raise ManifestError(f"Invalid manifest {path}: {exc}") from exc

        logger.debug("Loaded %d packages from %s", len(manifest.packages), path)
        return [
            Package.create(
                entry.id,
                normalize_path(entry.root, base=root) if entry.root else "",
                entry.dependencies,
            )
            for entry in manifest.packages
        ]
