"""Workspace location.

The nearest ``scopectl.toml`` above the starting directory marks the
workspace root, the way ``.git/`` marks a repository. ``SCOPECTL_CONFIG``
or ``--config`` name a file elsewhere; the root then defaults to that
file's directory unless ``--input`` says otherwise.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

CONFIG_FILENAME = "scopectl.toml"
CONFIG_ENV_VAR = "SCOPECTL_CONFIG"


class ConfigNotFoundError(FileNotFoundError):
    """An explicitly requested config file does not exist."""


@dataclass(frozen=True)
class WorkspaceLocation:
    """Where the workspace lives and which config file describes it.

    Attributes:
        root: Resolved workspace root.
        config_path: The ``scopectl.toml`` to load, or None for defaults.
    """

    root: Path
    config_path: Path | None = None


def find_config(start: Path | None = None) -> Path | None:
    """Return the config named by ``SCOPECTL_CONFIG``, else the nearest
    ``scopectl.toml`` in *start* (default: cwd) or one of its parents.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        candidate = Path(override)
        return candidate if candidate.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def locate_workspace(
    *,
    workspace_root: Path | None = None,
    config_path: str | os.PathLike[str] | None = None,
) -> WorkspaceLocation:
    """Pick the config file and the workspace root for one invocation.

    Raises:
        ConfigNotFoundError: If *config_path* is given but is not a file.
    """
    if config_path:
        toml_path: Path | None = Path(config_path)
        if not toml_path.is_file():
            raise ConfigNotFoundError(f"Config file not found: {toml_path}")
    else:
        toml_path = find_config(workspace_root)

    if workspace_root is not None:
        root = workspace_root
    elif toml_path is not None:
        root = toml_path.parent
    else:
        root = Path.cwd()
    return WorkspaceLocation(root=root.resolve(), config_path=toml_path)
