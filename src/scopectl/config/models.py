"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, scopectl.toml only contains overrides.
A Cargo workspace needs no config file at all.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

# --- scopectl.toml sections ---


class WorkspaceConfig(BaseModel):
    """[workspace] section."""

    model_config = {"frozen": True}

    metadata_source: Literal["cargo", "manifest"] = "cargo"
    manifest: str = "scopectl-packages.json"
    dependency_kinds: list[Literal["normal", "dev", "build"]] = Field(
        default_factory=lambda: ["normal", "dev", "build"]
    )


class ChangesConfig(BaseModel):
    """[changes] section."""

    model_config = {"frozen": True}

    base: str = "HEAD~1"
    extensions: list[str] = Field(default_factory=list)
    ignore: list[str] = Field(default_factory=list)


class ScopeConfig(BaseModel):
    """[scope] section."""

    model_config = {"frozen": True}

    prefer: Literal["auto", "include", "exclude"] = "auto"
    fallback_on_unresolved: bool = True


class CommandsConfig(BaseModel):
    """[commands] section."""

    model_config = {"frozen": True}

    templates: dict[str, str] = Field(default_factory=dict)
