"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy Workspace initialization and centralized
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from scopectl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from scopectl.config.settings import ScopeSettings
    from scopectl.infrastructure.workspace import Workspace
    from scopectl.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Subcommands access it via ``@click.pass_obj``.  The workspace (and its
    plugins) is created on first use so ``--help`` and ``--version`` never
    load entry points.
    """

    def __init__(self, settings: ScopeSettings) -> None:
        self.settings = settings
        self._workspace: Workspace | None = None

        from scopectl.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def workspace(self) -> Workspace:
        """The workspace instance (created lazily on first access)."""
        if self._workspace is None:
            from scopectl.infrastructure.workspace import Workspace

            self._workspace = Workspace(self.settings)
        return self._workspace

    @property
    def output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = self.output_settings
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                self.emit_warnings(result)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

    def emit_warnings(self, result: ServiceResult) -> None:
        """Write each warning to stderr."""
        for warning in result.warnings:
            click.echo(f"WARNING: {warning}", err=True)
