"""Rich Console factory and theme for scopectl output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

SCOPE_THEME = Theme(
    {
        "scope.ok": "bold green",
        "scope.error": "bold red",
        "scope.warning": "bold yellow",
        "scope.op": "bold cyan",
        "scope.key": "dim",
        "scope.package": "bold blue",
        "scope.path": "dim",
        "scope.mode.include": "green",
        "scope.mode.exclude": "yellow",
        "scope.mode.full": "magenta",
        "scope.command": "bold",
    }
)

_MODE_STYLES: dict[str, str] = {
    "include": "scope.mode.include",
    "exclude": "scope.mode.exclude",
    "full": "scope.mode.full",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=SCOPE_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_mode(mode: str) -> str:
    """Return the Rich style name for a fragment mode."""
    return _MODE_STYLES.get(mode, "")
