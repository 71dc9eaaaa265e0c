"""PlanService — turn an impact report into a concrete command line.

Rendering only: running the command is left to the CLI layer so that
``--no-run`` and the service tests never spawn processes.
"""

from __future__ import annotations

import os
import shlex
from collections.abc import Sequence

from scopectl.domain.packages import MalformedMetadataError
from scopectl.infrastructure.templates import TemplateError, render_command, resolve_template
from scopectl.services.impact import ImpactService, MetadataUnavailableError, malformed_result
from scopectl.services.result import ServiceResult


class PlanService(ImpactService):
    """Resolves impact, then renders a command template for it."""

    def plan(
        self,
        *,
        template: str | None = None,
        command: str | None = None,
        args: Sequence[str] = (),
        changed_files: Sequence[str | os.PathLike[str]] | None = None,
        base: str | None = None,
    ) -> ServiceResult:
        """Build the argv for a named *template* or an inline *command* template.

        Exactly one of *template* and *command* must be given. Unknown
        template names are reported before any metadata is read.
        """
        op = "plan"
        if (template is None) == (command is None):
            return ServiceResult.failure(
                op, "TEMPLATE_ERROR", "Provide exactly one of a template name or a command"
            )

        try:
            source = command
            if source is None:
                overrides = self._workspace.settings.commands.templates
                source = resolve_template(template or "", overrides)
        except TemplateError as exc:
            return ServiceResult.failure(op, "TEMPLATE_ERROR", str(exc))

        try:
            report = self.resolve(changed_files=changed_files, base=base)
        except MalformedMetadataError as exc:
            return malformed_result(op, exc)
        except MetadataUnavailableError as exc:
            return ServiceResult.failure(op, "METADATA_UNAVAILABLE", str(exc))

        try:
            argv = render_command(source, report.fragment, args)
        except TemplateError as exc:
            return ServiceResult.failure(op, "TEMPLATE_ERROR", str(exc), template=source)

        data = report.to_dict(self._workspace.root)
        data["argv"] = argv
        data["command"] = shlex.join(argv)
        return ServiceResult(
            ok=True,
            op=op,
            data=data,
            warnings=report.warnings,
            meta={"dependency_edges": report.edges},
        )
