"""Subscription table — watched paths, their comparisons, their subscribers.

The table is the only component allowed to create or destroy filesystem
watchers.  An entry exists exactly while its subscriber set is non-empty,
and the watcher lives exactly as long as the entry.  Both transitions happen
inside a single synchronous call, so no other coroutine can observe an entry
without a watcher or a watcher without an entry.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from gazer._types import ChangeHandler
    from gazer.history.engine import Comparison
    from gazer.live.sessions import Session
    from gazer.live.watcher import WatcherPool


@dataclass(slots=True)
class WatchedPath:
    """One watched file.

    Attributes:
        path: Absolute path (primary key).
        comparison: Fixed at creation; later watches do not change it.
        subscribers: Sessions currently watching the path.

    """

    path: Path
    comparison: Comparison
    subscribers: set[Session] = field(default_factory=set)


class SubscriptionTable:
    """Reference-counted map from path to subscribers, backed by a watcher pool.

    Args:
        pool: Watcher pool to acquire/release watchers on.
        on_change: Handler registered with every watcher this table acquires.

    """

    __slots__ = ("_entries", "_on_change", "_pool")

    def __init__(self, pool: WatcherPool, on_change: ChangeHandler) -> None:
        self._pool = pool
        self._on_change = on_change
        self._entries: dict[Path, WatchedPath] = {}

    def watch(self, session: Session, path: Path, comparison: Comparison) -> WatchedPath:
        """Subscribe *session* to *path*, creating the entry and watcher if needed."""
        entry = self._entries.get(path)
        if entry is None:
            entry = WatchedPath(path=path, comparison=comparison)
            self._entries[path] = entry
            self._pool.acquire(path, self._on_change)
        entry.subscribers.add(session)
        return entry

    def unwatch(self, session: Session, path: Path) -> bool:
        """Unsubscribe *session* from *path*.

        Returns True if this was the last subscriber and the entry (and its
        watcher) were removed.

        """
        entry = self._entries.get(path)
        if entry is None or session not in entry.subscribers:
            return False
        entry.subscribers.discard(session)
        if entry.subscribers:
            return False
        del self._entries[path]
        self._pool.release(path)
        return True

    def clear(self) -> int:
        """Drop every entry and release its watcher.  Returns the entry count."""
        paths = list(self._entries)
        self._entries.clear()
        for path in paths:
            self._pool.release(path)
        return len(paths)

    def get(self, path: Path) -> WatchedPath | None:
        return self._entries.get(path)

    def subscribers(self, path: Path) -> frozenset[Session]:
        """Snapshot of the sessions watching *path* (empty if unwatched)."""
        entry = self._entries.get(path)
        if entry is None:
            return frozenset()
        return frozenset(entry.subscribers)

    def subscriber_count(self, path: Path) -> int:
        entry = self._entries.get(path)
        return len(entry.subscribers) if entry is not None else 0

    def paths(self) -> tuple[Path, ...]:
        """Watched paths in insertion order."""
        return tuple(self._entries)

    def __contains__(self, path: object) -> bool:
        return path in self._entries

    def __len__(self) -> int:
        return len(self._entries)
