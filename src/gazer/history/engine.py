"""Diff engine — file content plus a git diff for one comparison mode.

The engine reads the live file, then asks the history backend for a diff and
the two full-text snapshots the viewer renders side by side.  The comparison
is fixed when a path is first watched:

- Range (``from_ref`` and ``to_ref``): ``from..to`` diff, both snapshots
  from history.  ``content`` is still the live file.
- Single (``from_ref`` only): ``from`` vs. working tree; the modified
  snapshot is the live file.
- Unspecified: ``HEAD`` vs. working tree; same snapshots as Single.

Results are never cached.  Every history query fails independently: a
failed ``show`` yields ``""``, a failed ``diff`` yields an error string in
the ``diff`` field.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from gazer._errors import HistoryError

if TYPE_CHECKING:
    from pathlib import Path

    from gazer._types import ComparisonMode
    from gazer.history.git import HistoryBackend

LATEST_COMMIT = "HEAD"


@dataclass(frozen=True, slots=True)
class Comparison:
    """Which two states a path's diff is computed against.

    Attributes:
        from_ref: Base reference, or None for the latest commit.
        to_ref: Target reference; only honoured together with ``from_ref``.

    """

    from_ref: str | None = None
    to_ref: str | None = None

    def __post_init__(self) -> None:
        # Empty strings mean "not given"
        if not self.from_ref:
            object.__setattr__(self, "from_ref", None)
        if not self.to_ref:
            object.__setattr__(self, "to_ref", None)

    @property
    def mode(self) -> ComparisonMode:
        if self.from_ref is not None and self.to_ref is not None:
            return "range"
        if self.from_ref is not None:
            return "single"
        return "unspecified"


@dataclass(frozen=True, slots=True)
class DiffResult:
    """One consistent snapshot of a watched file.

    Attributes:
        content: Current on-disk content ("" on read failure).
        diff: Unified diff text, or an error message if the diff query failed.
        original_content: Full text of the base side.
        modified_content: Full text of the target side.
        error: Read error message; None on success.

    """

    content: str
    diff: str
    original_content: str = ""
    modified_content: str = ""
    error: str | None = None


class DiffEngine:
    """Computes ``DiffResult`` values through an injected history backend.

    Args:
        history: Backend answering diff/show queries.

    """

    __slots__ = ("_history",)

    def __init__(self, history: HistoryBackend) -> None:
        self._history = history

    async def compute(self, path: Path, comparison: Comparison) -> DiffResult:
        """Compute content, diff and snapshots for *path*.

        A read failure short-circuits into an error-only result.

        """
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            return DiffResult(content="", diff="", error=f"Error reading file: {exc}")

        from_ref, to_ref = comparison.from_ref, comparison.to_ref
        if from_ref is not None and to_ref is not None:
            diff = await self._diff(path, from_ref, to_ref)
            original = await self._show(path, from_ref)
            modified = await self._show(path, to_ref)
        else:
            base = from_ref or LATEST_COMMIT
            diff = await self._diff(path, base, None)
            original = await self._show(path, base)
            modified = content

        return DiffResult(
            content=content,
            diff=diff,
            original_content=original,
            modified_content=modified,
        )

    async def _diff(self, path: Path, from_ref: str, to_ref: str | None) -> str:
        try:
            return await self._history.diff(path, from_ref, to_ref)
        except HistoryError as exc:
            return f"Error generating git diff: {exc}"

    async def _show(self, path: Path, ref: str) -> str:
        try:
            return await self._history.show(path, ref)
        except HistoryError:
            return ""
