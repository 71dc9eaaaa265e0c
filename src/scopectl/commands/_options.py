"""Options shared by every command that resolves a change set."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import IO, Any, TypeVar

import click

_F = TypeVar("_F", bound=Callable[..., Any])


def change_options(func: _F) -> _F:
    """Attach ``--base``, ``--changed-file`` and ``--changes-from``."""
    func = click.option(
        "--changes-from",
        type=click.File("r", encoding="utf-8"),
        default=None,
        help="Read changed paths, one per line, from a file ('-' for stdin).",
    )(func)
    func = click.option(
        "--changed-file",
        "changed_file",
        multiple=True,
        help="Changed path (repeatable). Skips the git change source.",
    )(func)
    func = click.option(
        "--base",
        default=None,
        help="Revision to diff HEAD against (default: changes.base, HEAD~1).",
    )(func)
    return func


def collect_changed_files(
    changed_file: Sequence[str],
    changes_from: IO[str] | None,
) -> list[str] | None:
    """Merge explicit paths from both options.

    Returns None when neither option was used, meaning "ask git".
    """
    if not changed_file and changes_from is None:
        return None
    paths = list(changed_file)
    if changes_from is not None:
        paths.extend(line.strip() for line in changes_from if line.strip())
    return paths
