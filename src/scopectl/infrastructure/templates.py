"""Command templates — Jinja2 source rendered into an argv list.

Templates see four variables:

- ``packages``: ids to include (empty unless the fragment is an include list)
- ``excludes``: ids to exclude (empty unless the fragment is an exclude list)
- ``full``: True when every package should run
- ``args``: pass-through arguments from the command line

plus a ``quote`` filter (``shlex.quote``). The rendered string is split
with shell rules, so quoting inside the template is honoured.
"""

from __future__ import annotations

import shlex
from collections.abc import Mapping, Sequence
from typing import Any

from jinja2 import Environment, StrictUndefined, TemplateSyntaxError, meta

from scopectl.domain.fragment import ScopeFragment

TEMPLATE_VARIABLES = frozenset({"packages", "excludes", "full", "args"})

_CARGO_SCOPE = (
    "{% if full or excludes %} --workspace{% endif %}"
    "{% for pkg in excludes %} --exclude {{ pkg | quote }}{% endfor %}"
    "{% for pkg in packages %} -p {{ pkg | quote }}{% endfor %}"
    "{% for arg in args %} {{ arg | quote }}{% endfor %}"
)

BUILTIN_TEMPLATES: dict[str, str] = {
    "test": "cargo test" + _CARGO_SCOPE,
    "nextest": "cargo nextest run" + _CARGO_SCOPE,
    "build": "cargo build" + _CARGO_SCOPE,
    "bench": "cargo bench" + _CARGO_SCOPE,
}


class TemplateError(ValueError):
    """A command template is unknown, malformed, or renders to nothing."""


def build_template_environment() -> Environment:
    """Jinja2 environment for command lines (no autoescape, strict undefined)."""
    env = Environment(autoescape=False, undefined=StrictUndefined)
    env.filters["quote"] = shlex.quote
    return env


def resolve_template(name: str, overrides: Mapping[str, str] | None = None) -> str:
    """Look up a named template, user overrides first.

    Raises:
        TemplateError: If no template has that name.
    """
    templates = {**BUILTIN_TEMPLATES, **(overrides or {})}
    try:
        return templates[name]
    except KeyError:
        known = ", ".join(sorted(templates))
        raise TemplateError(f"Unknown command template '{name}' (known: {known})") from None


def render_command(
    source: str,
    fragment: ScopeFragment,
    args: Sequence[str] = (),
) -> list[str]:
    """Render *source* for *fragment* and split it into argv.

    Raises:
        TemplateError: On syntax errors, unsupported variables, or an
            empty command.
    """
    env = build_template_environment()
    try:
        ast = env.parse(source)
    except TemplateSyntaxError as exc:
        raise TemplateError(f"Invalid command template: {exc}") from exc

    unsupported = meta.find_undeclared_variables(ast) - TEMPLATE_VARIABLES
    if unsupported:
        names = ", ".join(f"`{name}`" for name in sorted(unsupported))
        raise TemplateError(f"Unsupported template variable {names}")

    variables: dict[str, Any] = {
        "packages": fragment.includes,
        "excludes": fragment.excludes,
        "full": fragment.is_full,
        "args": list(args),
    }
    rendered = env.from_string(source).render(**variables)

    try:
        argv = shlex.split(rendered)
    except ValueError as exc:
        raise TemplateError(f"Rendered command is not valid shell syntax: {exc}") from exc
    if not argv:
        raise TemplateError("Command template rendered to an empty command")
    return argv
