"""Command group: run a build tool scoped to the affected packages."""

from __future__ import annotations

import subprocess
from collections.abc import Callable
from typing import IO, TYPE_CHECKING, Any

import click

from scopectl.commands._base import ScopeGroup
from scopectl.commands._options import change_options, collect_changed_files
from scopectl.infrastructure.templates import BUILTIN_TEMPLATES
from scopectl.services.plan import PlanService

if TYPE_CHECKING:
    from scopectl.commands._context import AppContext
    from scopectl.services.result import ServiceResult

_RUN_EXAMPLES = """\
  scopectl run test
  scopectl run test --no-run
  scopectl run nextest --base origin/main -- --no-fail-fast
  scopectl run build -- --release
  scopectl run exec --command 'cargo clippy {% for p in packages %} -p {{ p }}{% endfor %}'
  scopectl run exec --template lint"""

_BUILTIN_COMMANDS: tuple[tuple[str, str], ...] = (
    ("test", "Run `cargo test` for the affected packages."),
    ("nextest", "Run `cargo nextest run` for the affected packages."),
    ("build", "Run `cargo build` for the affected packages."),
    ("bench", "Run `cargo bench` for the affected packages."),
)


@click.group(cls=ScopeGroup, examples=_RUN_EXAMPLES)
def run() -> None:
    """Run a command limited to the packages affected by recent changes.

    Arguments after ``--`` are passed through to the command.
    """


def _run_options(func: Callable[..., Any]) -> Callable[..., Any]:
    func = click.argument("args", nargs=-1, type=click.UNPROCESSED)(func)
    func = change_options(func)
    func = click.option(
        "--no-run", is_flag=True, help="Print the command instead of running it."
    )(func)
    return func


def _plan_and_execute(
    app: AppContext,
    *,
    template: str | None,
    command: str | None,
    args: tuple[str, ...],
    no_run: bool,
    base: str | None,
    changed_file: tuple[str, ...],
    changes_from: IO[str] | None,
) -> None:
    changed = collect_changed_files(changed_file, changes_from)
    result = PlanService(app.workspace).plan(
        template=template,
        command=command,
        args=args,
        changed_files=changed,
        base=base,
    )
    if no_run or not result.ok:
        app.emit(result)
        return
    _execute(app, result)


def _execute(app: AppContext, result: ServiceResult) -> None:
    """Run the planned argv in the workspace root and exit with its status."""
    argv: list[str] = result.data["argv"]
    app.emit_warnings(result)
    if not app.settings.quiet:
        click.echo(f"Running: {result.data['command']}", err=True)
    try:
        completed = subprocess.run(argv, cwd=app.workspace.root, check=False)
    except FileNotFoundError as exc:
        raise click.ClickException(f"Command not found: {argv[0]}") from exc
    raise SystemExit(completed.returncode)


def _make_builtin(name: str, help_text: str) -> click.Command:
    @run.command(
        name=name,
        help=help_text,
        examples=f"""\
  scopectl run {name}
  scopectl run {name} --no-run
  scopectl run {name} --base origin/main -- --locked""",
    )
    @_run_options
    @click.pass_obj
    def _command(
        app: AppContext,
        no_run: bool,
        base: str | None,
        changed_file: tuple[str, ...],
        changes_from: IO[str] | None,
        args: tuple[str, ...],
    ) -> None:
        _plan_and_execute(
            app,
            template=name,
            command=None,
            args=args,
            no_run=no_run,
            base=base,
            changed_file=changed_file,
            changes_from=changes_from,
        )

    return _command


for _name, _help in _BUILTIN_COMMANDS:
    _make_builtin(_name, _help)


def _exec_examples(ctx: click.Context) -> str:
    """Inline examples plus one line per template this workspace can run."""
    lines = [
        "scopectl run exec --command 'cargo doc {% for p in packages %} -p {{ p }}{% endfor %}'",
        "scopectl run exec --command 'make {% for p in packages %} test-{{ p }}{% endfor %}'",
    ]
    app: AppContext | None = ctx.find_root().obj
    overrides = app.settings.commands.templates if app is not None else {}
    for name in sorted({**BUILTIN_TEMPLATES, **overrides}):
        lines.append(f"scopectl run exec --template {name} --no-run")
    return "\n".join(lines)


@run.command(name="exec", examples=_exec_examples)
@click.option(
    "-c",
    "--command",
    "command",
    default=None,
    help="Inline Jinja template (variables: packages, excludes, full, args).",
)
@click.option(
    "-t",
    "--template",
    "template",
    default=None,
    help="Named template from [commands.templates] or a built-in.",
)
@_run_options
@click.pass_obj
def exec_command(
    app: AppContext,
    command: str | None,
    template: str | None,
    no_run: bool,
    base: str | None,
    changed_file: tuple[str, ...],
    changes_from: IO[str] | None,
    args: tuple[str, ...],
) -> None:
    """Run a custom command template for the affected packages."""
    _plan_and_execute(
        app,
        template=template,
        command=command,
        args=args,
        no_run=no_run,
        base=base,
        changed_file=changed_file,
        changes_from=changes_from,
    )
