"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``SCOPECTL_*`` prefix
  3. TOML file    — ``scopectl.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource` that
reuses the ``locate_workspace`` discovery from
:mod:`scopectl.config.discovery`.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from scopectl.config.discovery import ConfigNotFoundError, locate_workspace
from scopectl.config.models import (
    ChangesConfig,
    CommandsConfig,
    ScopeConfig,
    WorkspaceConfig,
)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``scopectl.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class ScopeSettings(BaseSettings):
    """Unified settings for the scopectl CLI.

    Stored on the :class:`~scopectl.commands._context.AppContext` created
    by the root CLI group.

    Attributes:
        workspace_root: Workspace directory (``--input``, else the parent of
            ``scopectl.toml``, else CWD).
        config_path: The TOML file that was loaded, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "SCOPECTL_",
        "env_nested_delimiter": "__",
    }

    workspace_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    workspace: WorkspaceConfig = Field(default_factory=WorkspaceConfig)
    changes: ChangesConfig = Field(default_factory=ChangesConfig)
    scope: ScopeConfig = Field(default_factory=ScopeConfig)
    commands: CommandsConfig = Field(default_factory=CommandsConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        workspace_root: Path | None = None,
        **cli_flags: Any,
    ) -> ScopeSettings:
        """Construct settings from CLI invocation.

        The config file and workspace root come from
        :func:`~scopectl.config.discovery.locate_workspace`; CLI flags are
        merged as highest-priority overrides.

        Raises:
            click.ClickException: If an explicit *config_path* is missing.
        """
        try:
            location = locate_workspace(workspace_root=workspace_root, config_path=config_path)
        except ConfigNotFoundError as exc:
            raise click.ClickException(str(exc)) from exc

        _tls.toml_path = location.config_path
        try:
            return cls(
                workspace_root=location.root,
                config_path=location.config_path,
                **cli_flags,
            )
        finally:
            _tls.toml_path = None
