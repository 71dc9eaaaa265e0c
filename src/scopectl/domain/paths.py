"""Path normalization shared by the trie and the change mapper.

Matching is purely lexical: two spellings of the same directory only
match after both went through :func:`normalize_path`. Symlinks are not
resolved, so the workspace root and the changed files must come from the
same view of the filesystem.
"""

from __future__ import annotations

import os
from pathlib import Path, PurePath


def normalize_path(path: str | os.PathLike[str], *, base: Path | None = None) -> Path:
    """Return *path* as an absolute path with ``.`` and ``..`` collapsed.

    Relative paths are anchored at *base* (default: the current directory).

    Examples:
        >>> normalize_path("/ws/a/./b/../c").as_posix()
        '/ws/a/c'
        >>> normalize_path("src/lib.rs", base=Path("/ws/core")).as_posix()
        '/ws/core/src/lib.rs'
    """
    p = Path(path)
    if not p.is_absolute():
        p = (base if base is not None else Path.cwd()) / p
    return Path(os.path.normpath(p))


def path_components(path: PurePath) -> tuple[str, ...]:
    """Split an absolute path into its ordered components (anchor first)."""
    return path.parts
