"""ImpactService — which packages does a change set affect?

Pipeline per call, nothing kept between calls:

    packages -> PathTrie + DependencyGraph
    changed files -> ChangeFilter -> map_changes -> seed
    seed -> expand_impact -> impacted
    impacted -> synthesize_fragment -> ScopeFragment

Uncertainty always widens the scope: unresolved files, an empty seed, or
an unreadable change source all produce a full-run fragment.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog

from scopectl.domain.changes import ChangeFilter, ChangeSet, map_changes
from scopectl.domain.fragment import (
    FullRunReason,
    ScopeFragment,
    synthesize_fragment,
)
from scopectl.domain.packages import MalformedMetadataError, Package, validate_packages
from scopectl.domain.trie import PathTrie
from scopectl.infrastructure.graph.engine import DependencyGraph
from scopectl.services.base import BaseService
from scopectl.services.result import ServiceResult

logger = logging.getLogger(__name__)
log = structlog.get_logger(__name__)

# Unresolved paths listed verbatim in a warning before it is truncated.
_MAX_LISTED_PATHS = 5


def expand_impact(seed: Iterable[str], graph: DependencyGraph) -> set[str]:
    """Packages impacted by changes to *seed*: the seed plus all transitive dependents."""
    return graph.reverse_closure(seed)


class MetadataUnavailableError(RuntimeError):
    """The metadata source could not list workspace packages."""


@dataclass
class ImpactReport:
    """Everything the resolution pipeline learned about one change set."""

    packages: list[str]
    seed: set[str]
    impacted: set[str]
    unresolved: list[Path]
    ignored: list[Path]
    changed: int
    fragment: ScopeFragment
    warnings: list[str] = field(default_factory=list)
    owners: dict[Path, str] = field(default_factory=dict)
    edges: int = 0

    def to_dict(self, root: Path) -> dict[str, Any]:
        return {
            "root": str(root),
            "packages": len(self.packages),
            "changed": self.changed,
            "seed": sorted(self.seed),
            "impacted": sorted(self.impacted),
            "run": list(self.packages) if self.fragment.is_full else sorted(self.impacted),
            "unresolved": [_display(p, root) for p in self.unresolved],
            "ignored": [_display(p, root) for p in self.ignored],
            "owners": {
                _display(path, root): owner
                for path, owner in sorted(self.owners.items())
            },
            "fragment": self.fragment.to_dict(),
        }


class ImpactService(BaseService):
    """Resolves changed files to the set of packages that must run."""

    def affected(
        self,
        *,
        changed_files: Sequence[str | os.PathLike[str]] | None = None,
        base: str | None = None,
    ) -> ServiceResult:
        """Report seed, impacted packages, and the scope fragment.

        Args:
            changed_files: Explicit changed paths (relative paths are
                anchored at the workspace root). When None, the change
                source plugin is asked instead.
            base: Revision to diff against; defaults to ``changes.base``.
        """
        op = "affected"
        try:
            report = self.resolve(changed_files=changed_files, base=base)
        except MalformedMetadataError as exc:
            return malformed_result(op, exc)
        except MetadataUnavailableError as exc:
            return ServiceResult.failure(op, "METADATA_UNAVAILABLE", str(exc))

        return ServiceResult(
            ok=True,
            op=op,
            data=report.to_dict(self._workspace.root),
            warnings=report.warnings,
            meta={"dependency_edges": report.edges},
        )

    def resolve(
        self,
        *,
        changed_files: Sequence[str | os.PathLike[str]] | None = None,
        base: str | None = None,
    ) -> ImpactReport:
        """Run the full pipeline and return the raw report.

        Raises:
            MalformedMetadataError: A package descriptor is unusable.
            MetadataUnavailableError: The metadata source failed or is empty.
        """
        settings = self._workspace.settings
        root = self._workspace.root
        warnings: list[str] = []

        packages = validate_packages(self._list_packages())
        trie = PathTrie.from_packages(packages)
        graph = DependencyGraph.build(packages)
        warnings.extend(_graph_warnings(graph))

        raw_changes: Sequence[str | os.PathLike[str]] | None = changed_files
        if raw_changes is None:
            raw_changes = self._workspace.list_changed_files(base)

        all_ids = {pkg.id for pkg in packages}
        if raw_changes is None:
            warnings.append("Change source unavailable; running every package")
            return ImpactReport(
                packages=sorted(all_ids),
                seed=set(),
                impacted=set(all_ids),
                unresolved=[],
                ignored=[],
                changed=0,
                fragment=ScopeFragment.full(FullRunReason.CHANGES_UNAVAILABLE),
                warnings=warnings,
                edges=graph.edge_count,
            )

        change_filter = ChangeFilter(
            root=root,
            extensions=frozenset(ext.lstrip(".").lower() for ext in settings.changes.extensions),
            ignore=tuple(settings.changes.ignore),
        )
        considered, ignored = change_filter.apply(ChangeSet.from_paths(raw_changes, base=root))
        mapping = map_changes(considered, trie)
        impacted = expand_impact(mapping.seed, graph)

        unresolved = list(mapping.unresolved)
        if unresolved:
            warnings.append(_unresolved_warning(unresolved, root))

        fragment = synthesize_fragment(
            impacted,
            all_ids,
            seed=mapping.seed,
            unresolved=unresolved if settings.scope.fallback_on_unresolved else (),
            prefer=settings.scope.prefer,
        )
        log.debug(
            "impact.resolved",
            changed=len(considered),
            ignored=len(ignored),
            seed=sorted(mapping.seed),
            impacted=sorted(impacted),
            fragment=fragment.mode.value,
        )
        return ImpactReport(
            packages=sorted(all_ids),
            seed=set(mapping.seed),
            impacted=impacted,
            unresolved=unresolved,
            ignored=ignored,
            changed=len(considered),
            fragment=fragment,
            warnings=warnings,
            owners=dict(mapping.owners),
            edges=graph.edge_count,
        )

    def _list_packages(self) -> list[Package]:
        try:
            packages = self._workspace.list_packages()
        except MalformedMetadataError:
            raise
        except Exception as exc:
            logger.debug("Metadata source failed", exc_info=True)
            raise MetadataUnavailableError(str(exc)) from exc
        if not packages:
            raise MetadataUnavailableError(f"No workspace packages found in {self._workspace.root}")
        return packages


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def malformed_result(op: str, exc: MalformedMetadataError) -> ServiceResult:
    return ServiceResult.failure(
        op,
        "MALFORMED_METADATA",
        f"Malformed package metadata: {exc}",
        package_id=exc.package_id,
    )


def _graph_warnings(graph: DependencyGraph) -> list[str]:
    warnings: list[str] = []
    for cycle in graph.cycles():
        msg = f"Dependency cycle detected among: {', '.join(cycle)}"
        logger.debug(msg)
        warnings.append(msg)
    for source, target in graph.dropped_edges:
        warnings.append(f"Ignoring dependency {source} -> {target}: not a workspace member")
    return warnings


def _unresolved_warning(paths: list[Path], root: Path) -> str:
    shown = ", ".join(_display(p, root) for p in paths[:_MAX_LISTED_PATHS])
    more = len(paths) - _MAX_LISTED_PATHS
    if more > 0:
        shown += f" (+{more} more)"
    msg = f"{len(paths)} changed file(s) outside every package: {shown}"
    logger.debug(msg)
    return msg


def _display(path: Path, root: Path) -> str:
    """Show *path* relative to *root* when it lives inside it."""
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return str(path)
