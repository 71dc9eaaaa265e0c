"""Pluggy hook specifications for the two inputs of the impact engine.

Both hooks are ``firstresult``: the most recently registered plugin that
returns a non-None value wins, so a third-party plugin can take over
from the built-in cargo or git source.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from pathlib import Path

    from scopectl.domain.packages import Package

hookspec = pluggy.HookspecMarker("scopectl")


class ScopectlHookSpec:
    """Hook specifications for the scopectl plugin system."""

    @hookspec(firstresult=True)
    def list_workspace_packages(self, root: Path) -> list[Package] | None:
        """Return every workspace member with its intra-workspace dependencies.

        Third-party dependencies must already be filtered out. Return None
        to let another plugin answer; raise to signal that metadata could
        not be read.
        """

    @hookspec(firstresult=True)
    def list_changed_files(self, root: Path, base: str) -> list[Path] | None:
        """Return absolute paths of files changed between *base* and HEAD.

        Return None when the change source is unavailable. An empty list
        means nothing changed.
        """
