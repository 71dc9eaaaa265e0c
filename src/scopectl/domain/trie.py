"""PathTrie — deepest-ancestor ownership lookup over path components.

Nodes live in a flat arena and refer to their children by index, so the
whole trie is two parallel lists that can be built in one pass over the
package list. Node 0 is the root (the empty path).
"""

from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path

from scopectl.domain.packages import MalformedMetadataError, Package
from scopectl.domain.paths import normalize_path, path_components

_ROOT = 0


class PathTrie:
    """Maps file paths to the innermost registered package root."""

    def __init__(self) -> None:
        self._children: list[dict[str, int]] = [{}]
        self._owners: list[str | None] = [None]

    @classmethod
    def from_packages(cls, packages: Iterable[Package]) -> PathTrie:
        """Build a trie with one entry per package root."""
        trie = cls()
        for pkg in packages:
            trie.insert(pkg.root_path, pkg.id)
        return trie

    def __len__(self) -> int:
        """Number of registered package roots."""
        return sum(1 for owner in self._owners if owner is not None)

    def insert(self, root_path: str | os.PathLike[str], package_id: str) -> None:
        """Register *package_id* as the owner of *root_path*.

        Raises:
            MalformedMetadataError: If the root is relative or already owned.
        """
        if not Path(root_path).is_absolute():
            raise MalformedMetadataError(package_id, f"root path {root_path} is not absolute")

        node = _ROOT
        for part in path_components(normalize_path(root_path)):
            child = self._children[node].get(part)
            if child is None:
                child = len(self._children)
                self._children.append({})
                self._owners.append(None)
                self._children[node][part] = child
            node = child

        existing = self._owners[node]
        if existing is not None:
            raise MalformedMetadataError(
                package_id, f"root path {root_path} is already used by '{existing}'"
            )
        self._owners[node] = package_id

    def find_owner(self, file_path: str | os.PathLike[str]) -> str | None:
        """Return the id of the deepest root that contains *file_path*.

        The path itself counts as contained, so a package root resolves
        to its own package. Returns None for paths outside every root.
        """
        owner = self._owners[_ROOT]
        node = _ROOT
        for part in path_components(normalize_path(file_path)):
            child = self._children[node].get(part)
            if child is None:
                break
            node = child
            if self._owners[node] is not None:
                owner = self._owners[node]
        return owner
