"""Click base classes for scopectl commands.

Every command and group can carry usage examples, printed by an eager
``--examples`` flag so ``--help`` stays short. Examples are either a fixed
block of text or a callable that builds them from the invocation context,
which lets ``run exec --examples`` list the templates the current
workspace actually defines.
"""

from __future__ import annotations

import textwrap
from collections.abc import Callable
from typing import Any

import click

ExamplesSource = str | Callable[[click.Context], str]


def format_examples(source: ExamplesSource, ctx: click.Context) -> str:
    """Render *source* under a heading naming the invoked command."""
    text = source(ctx) if callable(source) else source
    body = textwrap.indent(textwrap.dedent(text).strip("\n"), "  ")
    return f"Usage examples for '{ctx.command_path}':\n\n{body}"


class _ExamplesMixin:
    """Adds ``--examples`` to a Click command when examples are given."""

    params: list[click.Parameter]

    def __init__(self, *args: Any, examples: ExamplesSource | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples is not None:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._show_examples,
                    help="Show usage examples.",
                )
            )

    def _show_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing or self.examples is None:
            return
        click.echo(format_examples(self.examples, ctx))
        ctx.exit(0)


class ScopeCommand(_ExamplesMixin, click.Command):
    """Command accepting ``examples=``."""


class ScopeGroup(_ExamplesMixin, click.Group):
    """Group accepting ``examples=``; its subcommands are ScopeCommands."""

    command_class = ScopeCommand
