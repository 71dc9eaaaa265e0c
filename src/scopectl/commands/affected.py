"""Standalone command: report the packages affected by a change set."""

from __future__ import annotations

from typing import IO, TYPE_CHECKING

import click

from scopectl.commands._base import ScopeCommand
from scopectl.commands._options import change_options, collect_changed_files
from scopectl.services.impact import ImpactService

if TYPE_CHECKING:
    from scopectl.commands._context import AppContext


@click.command(
    cls=ScopeCommand,
    examples="""\
  scopectl affected
  scopectl affected --base origin/main
  scopectl affected --changed-file crates/core/src/lib.rs
  git diff --name-only main | scopectl -q affected --changes-from -
  scopectl --json affected --base HEAD~3""",
)
@change_options
@click.pass_obj
def affected(
    app: AppContext,
    base: str | None,
    changed_file: tuple[str, ...],
    changes_from: IO[str] | None,
) -> None:
    """Show changed packages, their dependents, and the resulting scope."""
    changed = collect_changed_files(changed_file, changes_from)
    app.emit(ImpactService(app.workspace).affected(changed_files=changed, base=base))
