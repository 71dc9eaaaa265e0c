"""Built-in git change source.

Lists files touched between a base revision and HEAD with
``git diff --name-only -z --no-renames``. Renames show up as a deletion
plus an addition, so both the old and the new location count as changed.
Paths are read NUL-separated with ``core.quotepath`` off, so names with
non-ASCII bytes, tabs or quotes arrive verbatim.

Git failures never raise: the hook returns None and the caller falls back
to a full run.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

import pluggy

hookimpl = pluggy.HookimplMarker("scopectl")

logger = logging.getLogger(__name__)


class GitPlugin:
    """Change source backed by the ``git`` binary."""

    @hookimpl
    def list_changed_files(self, root: Path, base: str) -> list[Path] | None:
        """Return absolute paths changed between *base* and HEAD.

        An unknown *base* (e.g. ``HEAD~1`` on the first commit) yields an
        empty list; a missing binary or a non-repo directory yields None.
        """
        try:
            toplevel = Path(self._run_git(root, "rev-parse", "--show-toplevel").stdout.strip())
        except (OSError, subprocess.CalledProcessError) as exc:
            logger.warning("git unavailable in %s: %s", root, _describe(exc))
            return None

        if not self._revision_exists(root, base):
            logger.info("Base revision %s does not exist; treating as no changes", base)
            return []

        try:
            result = self._run_git(
                root,
                "-c",
                "core.quotepath=off",
                "diff",
                "--name-only",
                "-z",
                "--no-renames",
                base,
                "HEAD",
            )
        except (OSError, subprocess.CalledProcessError) as exc:
            logger.warning("git diff %s..HEAD failed: %s", base, _describe(exc))
            return None

        return [toplevel / name for name in result.stdout.split("\0") if name]

    # ------------------------------------------------------------------
    # Git subprocess helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _run_git(root: Path, *args: str) -> subprocess.CompletedProcess[str]:
        """Run a git command in *root*. Raises on failure."""
        return subprocess.run(
            ["git", *args],
            cwd=root,
            capture_output=True,
            encoding="utf-8",
            errors="surrogateescape",
            check=True,
        )

    def _revision_exists(self, root: Path, revision: str) -> bool:
        try:
            self._run_git(root, "rev-parse", "--verify", "--quiet", f"{revision}^{{commit}}")
        except subprocess.CalledProcessError:
            return False
        return True


def _describe(exc: Exception) -> str:
    if isinstance(exc, subprocess.CalledProcessError) and exc.stderr:
        return str(exc.stderr).strip()
    return str(exc)
