"""Workspace package descriptors and metadata validation."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from scopectl.domain.paths import normalize_path


class MalformedMetadataError(ValueError):
    """A package descriptor cannot be trusted for scoping.

    Fatal: the run aborts instead of risking a mis-scoped command.
    """

    def __init__(self, package_id: str, message: str) -> None:
        super().__init__(f"{package_id or '<unnamed>'}: {message}")
        self.package_id = package_id
        self.message = message


@dataclass(frozen=True)
class Package:
    """A workspace member.

    ``dependencies`` only names other workspace members; third-party
    dependencies are filtered out by the metadata source.
    """

    id: str
    root_path: Path
    dependencies: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def create(
        cls,
        package_id: str,
        root_path: str | Path,
        dependencies: Iterable[str] = (),
    ) -> Package:
        """Build a package with a normalized root.

        Raises:
            MalformedMetadataError: If the id is empty or the root is
                missing or relative.
        """
        if not package_id:
            raise MalformedMetadataError(package_id, "package id is empty")
        if not root_path or not Path(root_path).is_absolute():
            raise MalformedMetadataError(
                package_id, f"root path must be absolute, got {str(root_path)!r}"
            )
        return cls(
            id=package_id,
            root_path=normalize_path(root_path),
            dependencies=frozenset(dependencies),
        )


def validate_packages(packages: Iterable[Package]) -> list[Package]:
    """Check that ids and root paths are unique across the workspace.

    Returns the packages as a list, preserving order.

    Raises:
        MalformedMetadataError: Naming the first offending package.
    """
    result: list[Package] = []
    ids: set[str] = set()
    roots: dict[Path, str] = {}
    for pkg in packages:
        if not pkg.id:
            raise MalformedMetadataError(pkg.id, "package id is empty")
        if not pkg.root_path.is_absolute():
            raise MalformedMetadataError(pkg.id, f"root path {pkg.root_path} is not absolute")
        if pkg.id in ids:
            raise MalformedMetadataError(pkg.id, "duplicate package id")
        owner = roots.get(pkg.root_path)
        if owner is not None:
            raise MalformedMetadataError(
                pkg.id, f"root path {pkg.root_path} is already used by '{owner}'"
            )
        ids.add(pkg.id)
        roots[pkg.root_path] = pkg.id
        result.append(pkg)
    return result
