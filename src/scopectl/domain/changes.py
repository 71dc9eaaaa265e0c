"""Change sets and the change mapper.

Pure functions over already-collected paths. Reading the diff is the job
of the change-source plugins; this module only decides which package each
path belongs to.
"""

from __future__ import annotations

import fnmatch
import os
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from scopectl.domain.paths import normalize_path
from scopectl.domain.trie import PathTrie


@dataclass(frozen=True)
class ChangeSet:
    """Absolute, normalized, deduplicated changed file paths."""

    paths: tuple[Path, ...] = ()

    @classmethod
    def from_paths(
        cls,
        paths: Iterable[str | os.PathLike[str]],
        *,
        base: Path | None = None,
    ) -> ChangeSet:
        """Normalize *paths* against *base* and drop duplicates (first one wins)."""
        seen: dict[Path, None] = {}
        for raw in paths:
            if not str(raw).strip():
                continue
            seen.setdefault(normalize_path(raw, base=base), None)
        return cls(paths=tuple(seen))

    def __len__(self) -> int:
        return len(self.paths)

    def __iter__(self) -> Iterator[Path]:
        return iter(self.paths)


@dataclass(frozen=True)
class ChangeFilter:
    """Drops changed files that should never influence scoping.

    Args:
        root: Workspace root; ``ignore`` globs are matched relative to it.
        extensions: Considered file extensions without the dot. Empty means
            every file is considered.
        ignore: fnmatch patterns for files to skip.
    """

    root: Path
    extensions: frozenset[str] = frozenset()
    ignore: tuple[str, ...] = ()

    def is_considered(self, path: Path) -> bool:
        if self.extensions:
            ext = path.suffix.lstrip(".").lower()
            if ext not in self.extensions:
                return False
        if self.ignore:
            try:
                rel = path.relative_to(self.root).as_posix()
            except ValueError:
                rel = path.as_posix()
            if any(fnmatch.fnmatch(rel, pattern) for pattern in self.ignore):
                return False
        return True

    def apply(self, changes: ChangeSet) -> tuple[ChangeSet, list[Path]]:
        """Split *changes* into (considered, ignored)."""
        kept: list[Path] = []
        ignored: list[Path] = []
        for path in changes:
            (kept if self.is_considered(path) else ignored).append(path)
        return ChangeSet(paths=tuple(kept)), ignored


@dataclass(frozen=True)
class ChangeMapping:
    """Result of attributing changed files to packages.

    Attributes:
        seed: Ids of packages that own at least one changed file.
        unresolved: Changed files outside every package root.
        owners: Owning package of each resolved file.
    """

    seed: frozenset[str] = frozenset()
    unresolved: tuple[Path, ...] = ()
    owners: dict[Path, str] = field(default_factory=dict)


def map_changes(changes: Sequence[Path] | ChangeSet, trie: PathTrie) -> ChangeMapping:
    """Attribute each changed path to its owning package.

    Paths no package owns are kept in ``unresolved`` so the caller can
    fall back to a full run instead of silently under-testing.
    """
    seed: set[str] = set()
    unresolved: list[Path] = []
    owners: dict[Path, str] = {}
    for path in changes:
        owner = trie.find_owner(path)
        if owner is None:
            unresolved.append(path)
        else:
            owners[path] = owner
            seed.add(owner)
    return ChangeMapping(seed=frozenset(seed), unresolved=tuple(unresolved), owners=owners)
