"""Git history backend — diff and show queries via the git CLI.

Each query runs ``git`` as an asyncio subprocess in the repository root
found by the locator.  Failures of any kind (bad reference, untracked file,
missing executable, timeout) surface as ``HistoryError`` so the diff engine
can degrade each query independently.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Protocol

from gazer._errors import HistoryError
from gazer.history.locator import DEFAULT_MARKER, locate_repo_root, repo_relative


class HistoryBackend(Protocol):
    """Version-control queries used by the diff engine."""

    async def diff(self, path: Path, from_ref: str, to_ref: str | None) -> str:
        """Unified diff of *path* between two refs (``None`` = working tree)."""
        ...

    async def show(self, path: Path, ref: str) -> str:
        """Full content of *path* at *ref*."""
        ...


class GitHistory:
    """``HistoryBackend`` backed by the git command-line tool.

    Args:
        git: Git executable name or path.
        marker: Repository marker passed to the locator.
        timeout: Seconds before a single query is abandoned.

    """

    __slots__ = ("_git", "_marker", "_timeout")

    def __init__(
        self,
        git: str = "git",
        marker: str = DEFAULT_MARKER,
        timeout: float = 10.0,
    ) -> None:
        self._git = git
        self._marker = marker
        self._timeout = timeout

    async def diff(self, path: Path, from_ref: str, to_ref: str | None) -> str:
        root, rel = self._resolve(path)
        spec = from_ref if to_ref is None else f"{from_ref}..{to_ref}"
        return await self._run(root, "diff", spec, "--", rel)

    async def show(self, path: Path, ref: str) -> str:
        root, rel = self._resolve(path)
        return await self._run(root, "show", f"{ref}:{rel}")

    def _resolve(self, path: Path) -> tuple[Path, str]:
        root = locate_repo_root(path, self._marker)
        cwd = root if root is not None else path.parent
        return cwd, repo_relative(path, root)

    async def _run(self, cwd: Path, *args: str) -> str:
        """Run git with *args* in *cwd* and return stdout.

        Raises:
            HistoryError: On spawn failure, timeout, or non-zero exit.

        """
        try:
            proc = await asyncio.create_subprocess_exec(
                self._git,
                *args,
                cwd=cwd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            msg = f"cannot run {self._git} in {cwd}: {exc}"
            raise HistoryError(msg) from exc

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), self._timeout)
        except TimeoutError as exc:
            proc.kill()
            await proc.wait()
            msg = f"git {args[0]} timed out after {self._timeout:.0f}s"
            raise HistoryError(msg) from exc

        if proc.returncode != 0:
            detail = stderr.decode("utf-8", errors="replace").strip()
            msg = f"git {' '.join(args)} failed ({proc.returncode}): {detail}"
            raise HistoryError(msg)

        return stdout.decode("utf-8", errors="replace")
