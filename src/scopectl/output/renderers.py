"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from scopectl.output.console import create_console, get_output, style_for_mode

if TYPE_CHECKING:
    from rich.console import Console

    from scopectl.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode.

    ``affected`` prints the packages to run, one per line; ``plan`` prints
    the command line.
    """
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    if result.op == "plan":
        return str(result.data.get("command", ""))
    run = result.data.get("run")
    if isinstance(run, list):
        return "\n".join(str(pkg) for pkg in run)
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK/ERROR status line."""
    label = Text("OK", style="scope.ok")
    op = Text(f"  {result.op}", style="scope.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="scope.key")
    if isinstance(value, (dict, list)):
        v = Text(json.dumps(value, separators=(",", ":")))
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print the meta block (verbose only)."""
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        console.print(f"    {k}: {v}")


def _fragment_line(console: Console, fragment: dict[str, Any]) -> None:
    mode = str(fragment.get("mode", ""))
    line = Text("  scope: ", style="scope.key")
    line.append(mode, style=style_for_mode(mode))
    if fragment.get("reason"):
        line.append(f" ({fragment['reason']})", style="dim")
    elif fragment.get("packages"):
        line.append(f" {', '.join(fragment['packages'])}")
    console.print(line)


def _package_table(data: dict[str, Any]) -> Table:
    """One row per impacted package, marking the ones changed directly."""
    seed = set(data.get("seed", []))
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Package", style="scope.package", no_wrap=True)
    table.add_column("Reason")
    for pkg in data.get("impacted", []):
        if pkg in seed:
            table.add_row(pkg, Text("changed", style="scope.ok"))
        else:
            table.add_row(pkg, Text("dependent", style="dim"))
    return table


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="scope.error")
    op = Text(f"  {result.op}", style="scope.op")
    sep = Text(" — ")
    console.print(label, op, sep, msg)

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Op renderers ──────────────────────────────────────────────────────


def _render_affected(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "root", d.get("root", ""))
    _field(console, "packages", d.get("packages", 0))
    _field(console, "changed files", d.get("changed", 0))
    _fragment_line(console, d.get("fragment", {}))

    if d.get("impacted"):
        console.print()
        console.print(_package_table(d))

    unresolved = d.get("unresolved", [])
    if unresolved:
        console.print()
        console.print(Text("  unresolved:", style="scope.warning"))
        for path in unresolved:
            console.print(Text(f"    {path}", style="scope.path"))

    if verbose and d.get("owners"):
        console.print()
        console.print(Text("  files:", style="dim"))
        for path, owner in d["owners"].items():
            line = Text(f"    {path} -> ", style="scope.path")
            line.append(owner, style="scope.package")
            console.print(line)

    if verbose and d.get("ignored"):
        console.print()
        console.print(Text("  ignored:", style="dim"))
        for path in d["ignored"]:
            console.print(Text(f"    {path}", style="scope.path"))
    if verbose:
        _render_meta(console, result)


def _render_plan(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _fragment_line(console, d.get("fragment", {}))
    line = Text("  command: ", style="scope.key")
    line.append(str(d.get("command", "")), style="scope.command")
    console.print(line)
    if verbose:
        _field(console, "impacted", d.get("impacted", []))
        _render_meta(console, result)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


_OP_RENDERERS: dict[str, Any] = {
    "affected": _render_affected,
    "plan": _render_plan,
}
