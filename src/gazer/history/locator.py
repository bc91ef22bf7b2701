"""Repository locator — finds the enclosing git root for a file."""

from __future__ import annotations

from pathlib import Path

DEFAULT_MARKER = ".git"


def locate_repo_root(path: Path, marker: str = DEFAULT_MARKER) -> Path | None:
    """Walk up from the directory containing *path* looking for *marker*.

    The marker may be a directory (normal clones) or a file (worktrees and
    submodules).  Stops after checking the filesystem root.

    Returns None if no repository encloses the path.

    """
    start = path.parent
    for directory in (start, *start.parents):
        if (directory / marker).exists():
            return directory
    return None


def repo_relative(path: Path, root: Path | None) -> str:
    """Return *path* relative to *root* in git's POSIX form.

    Without a root the path is made relative to its own directory; history
    queries issued from there fail softly.

    """
    base = root if root is not None else path.parent
    try:
        return path.relative_to(base).as_posix()
    except ValueError:
        return path.name
