"""Subcommand modules for scopectl.

Provides register_commands() which uses deferred imports to keep
``scopectl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group."""
    # --- Groups ---
    from scopectl.commands.run import run

    cli.add_command(run)

    # --- Standalone commands ---
    from scopectl.commands.affected import affected

    cli.add_command(affected)
