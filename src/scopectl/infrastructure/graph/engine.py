"""DependencyGraph — forward and reverse package edges on NetworkX.

Built once per invocation from the package list, then frozen.
The reverse view is derived in the same pass as the forward one and is
never recomputed, so the two cannot drift apart.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable
from typing import TypeAlias

import networkx as nx

from scopectl.domain.packages import Package

logger = logging.getLogger(__name__)

# Edge direction: package -> dependency.
_Graph: TypeAlias = nx.DiGraph


class DependencyGraph:
    """Workspace-internal dependency edges with a cached reverse view."""

    def __init__(
        self,
        forward: _Graph,
        reverse: _Graph,
        dropped_edges: list[tuple[str, str]] | None = None,
    ) -> None:
        self._forward = forward
        self._reverse = reverse
        self.dropped_edges: list[tuple[str, str]] = dropped_edges or []

    @classmethod
    def build(cls, packages: Iterable[Package]) -> DependencyGraph:
        """Build forward and reverse adjacency in a single pass.

        Every package becomes a node, so packages without edges still take
        part in closures. Dependencies on ids outside the workspace are
        dropped and recorded in :attr:`dropped_edges`.
        """
        members = list(packages)
        ids = {pkg.id for pkg in members}

        forward: _Graph = nx.DiGraph()
        reverse: _Graph = nx.DiGraph()
        forward.add_nodes_from(ids)
        reverse.add_nodes_from(ids)

        dropped: list[tuple[str, str]] = []
        for pkg in members:
            for dep in sorted(pkg.dependencies):
                if dep not in ids:
                    dropped.append((pkg.id, dep))
                    logger.debug("Dropping edge %s -> %s: not a workspace member", pkg.id, dep)
                    continue
                forward.add_edge(pkg.id, dep)
                reverse.add_edge(dep, pkg.id)

        return cls(nx.freeze(forward), nx.freeze(reverse), dropped)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def __contains__(self, package_id: object) -> bool:
        return package_id in self._forward

    def __len__(self) -> int:
        return self._forward.number_of_nodes()

    @property
    def edge_count(self) -> int:
        return self._forward.number_of_edges()

    def nodes(self) -> set[str]:
        return set(self._forward.nodes)

    def dependencies(self, package_id: str) -> set[str]:
        """Ids *package_id* declares as dependencies."""
        if package_id not in self._forward:
            return set()
        return set(self._forward.successors(package_id))

    def dependents(self, package_id: str) -> set[str]:
        """Ids that declare *package_id* as a dependency."""
        if package_id not in self._reverse:
            return set()
        return set(self._reverse.successors(package_id))

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def reverse_closure(self, seed: Iterable[str]) -> set[str]:
        """Every id reachable from *seed* over reverse edges, seed included.

        Breadth-first with a visited set, so diamonds are walked once and
        cycles terminate. Seed ids unknown to the graph are returned as-is.
        """
        visited: set[str] = set()
        queue: deque[str] = deque()
        for package_id in seed:
            if package_id not in visited:
                visited.add(package_id)
                queue.append(package_id)

        while queue:
            current = queue.popleft()
            if current not in self._reverse:
                continue
            for dependent in self._reverse.successors(current):
                if dependent not in visited:
                    visited.add(dependent)
                    queue.append(dependent)
        return visited

    def cycles(self) -> list[list[str]]:
        """Dependency cycles: multi-node strongly connected components and self-loops.

        Each cycle is sorted; the list is sorted by its first member.
        """
        found: list[list[str]] = []
        for component in nx.strongly_connected_components(self._forward):
            if len(component) > 1:
                found.append(sorted(component))
        for node, _ in nx.selfloop_edges(self._forward):
            found.append([node])
        return sorted(found)
