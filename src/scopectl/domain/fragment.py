"""Scope fragments — what to tell the build tool to run.

A fragment is either an include list, an exclude list, or an explicit
"run everything" signal. When in doubt the synthesizer widens the scope.
"""

from __future__ import annotations

from collections.abc import Collection, Set
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Literal


class ScopeMode(StrEnum):
    """How the fragment scopes the command."""

    INCLUDE = "include"
    EXCLUDE = "exclude"
    FULL = "full"


class FullRunReason(StrEnum):
    """Why scoping was abandoned in favour of a full run."""

    UNRESOLVED_PATHS = "unresolved_paths"
    NO_CHANGES = "no_changes"
    ALL_IMPACTED = "all_impacted"
    CHANGES_UNAVAILABLE = "changes_unavailable"


Preference = Literal["auto", "include", "exclude"]


@dataclass(frozen=True)
class ScopeFragment:
    """Argument fragment for a downstream command assembler.

    Attributes:
        mode: Include list, exclude list, or full run.
        packages: Sorted ids named by the list (empty for a full run).
        reason: Set only for full runs.
    """

    mode: ScopeMode
    packages: tuple[str, ...] = ()
    reason: FullRunReason | None = None

    @classmethod
    def full(cls, reason: FullRunReason) -> ScopeFragment:
        return cls(mode=ScopeMode.FULL, reason=reason)

    @property
    def is_full(self) -> bool:
        return self.mode is ScopeMode.FULL

    @property
    def includes(self) -> list[str]:
        return list(self.packages) if self.mode is ScopeMode.INCLUDE else []

    @property
    def excludes(self) -> list[str]:
        return list(self.packages) if self.mode is ScopeMode.EXCLUDE else []

    def to_dict(self) -> dict[str, Any]:
        return {
            "mode": self.mode.value,
            "packages": list(self.packages),
            "reason": self.reason.value if self.reason else None,
        }


def synthesize_fragment(
    impacted: Set[str],
    all_packages: Set[str],
    *,
    seed: Set[str],
    unresolved: Collection[object] = (),
    prefer: Preference = "auto",
) -> ScopeFragment:
    """Choose the narrowest safe fragment for *impacted*.

    Full-run fallbacks, checked in order:

    1. *unresolved* is non-empty: some change belongs to no package.
    2. *seed* is empty: nothing attributable changed.
    3. *impacted* covers every package: scoping adds nothing.

    Otherwise the shorter of the include and exclude lists wins, with ties
    going to exclude. *prefer* forces one form for tools that lack the
    other.
    """
    if unresolved:
        return ScopeFragment.full(FullRunReason.UNRESOLVED_PATHS)
    if not seed:
        return ScopeFragment.full(FullRunReason.NO_CHANGES)

    scoped = impacted & all_packages
    if scoped == all_packages:
        return ScopeFragment.full(FullRunReason.ALL_IMPACTED)

    excluded = all_packages - scoped
    if prefer == "include":
        use_include = True
    elif prefer == "exclude":
        use_include = False
    else:
        use_include = len(scoped) < len(excluded)

    if use_include:
        return ScopeFragment(mode=ScopeMode.INCLUDE, packages=tuple(sorted(scoped)))
    return ScopeFragment(mode=ScopeMode.EXCLUDE, packages=tuple(sorted(excluded)))
