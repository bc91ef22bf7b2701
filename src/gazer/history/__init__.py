"""History layer — repository lookup, git queries, and diff computation."""

from gazer.history.engine import Comparison, DiffEngine, DiffResult
from gazer.history.git import GitHistory, HistoryBackend
from gazer.history.locator import locate_repo_root, repo_relative

__all__ = [
    "Comparison",
    "DiffEngine",
    "DiffResult",
    "GitHistory",
    "HistoryBackend",
    "locate_repo_root",
    "repo_relative",
]
