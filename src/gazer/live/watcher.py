"""Watcher pool — at most one filesystem watcher per watched path.

Each watcher is a per-path event channel: exactly one handler is registered
when the watcher is acquired and it disappears when the watcher is released.
The default watcher runs ``watchfiles.awatch`` as an asyncio task on the
file's parent directory, filtered to the file itself, so a path that does not
exist yet starts producing events as soon as it is created.  When the parent
is missing too, the nearest existing ancestor is watched for the next missing
directory only, and the watch moves down one level each time one appears.
"""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Callable
from contextlib import aclosing
from functools import partial
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from watchfiles import Change

if TYPE_CHECKING:
    from gazer._types import ChangeHandler, WatchKind
    from gazer.observability.collector import StackCollector


class PathWatcher(Protocol):
    """A started-on-demand watcher for one path."""

    def start(self) -> None: ...

    def close(self) -> None: ...


type WatcherFactory = Callable[[Path, ChangeHandler], PathWatcher]


# Mapping from watchfiles Change enum to the kinds the hub reacts to.
# Deletions are not forwarded.
_CHANGE_KIND_MAP: dict[Change, WatchKind] = {
    Change.added: "discovered",
    Change.modified: "changed",
}


def watch_point(path: Path) -> tuple[Path, Path]:
    """Choose where to watch for *path*: (directory, entry).

    *directory* is the nearest existing directory above the file and *entry*
    is the child of it that leads to the file: the file itself once its
    parent exists, otherwise the first missing directory.  Only *directory*
    is watched, never recursively.

    """
    entry = path
    for directory in path.parents:
        if directory.is_dir():
            return directory, entry
        entry = directory
    return Path(path.anchor or "/"), entry


class WatchfilesWatcher:
    """``PathWatcher`` running ``watchfiles.awatch`` in an asyncio task.

    Args:
        path: Absolute path of the watched file.
        on_event: The single handler for this path.
        debounce_ms: watchfiles debounce window.
        collector: Optional collector for failure events.

    """

    __slots__ = ("_collector", "_debounce_ms", "_on_event", "_path", "_stop", "_task")

    def __init__(
        self,
        path: Path,
        on_event: ChangeHandler,
        *,
        debounce_ms: int = 50,
        collector: StackCollector | None = None,
    ) -> None:
        self._path = path
        self._on_event = on_event
        self._debounce_ms = debounce_ms
        self._collector = collector
        self._stop = asyncio.Event()
        self._task: asyncio.Task[None] | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Spawn the watch task on the running loop."""
        if self.is_running:
            return
        self._stop.clear()
        self._task = asyncio.get_running_loop().create_task(
            self._watch_loop(), name=f"gazer-watch:{self._path}",
        )

    def close(self) -> None:
        """Stop the watch task.  Safe to call more than once."""
        self._stop.set()
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    def _accepts(self, entry: Path, change: Change, path_str: str) -> bool:
        if Path(path_str) != entry:
            return False
        if entry == self._path:
            return change in _CHANGE_KIND_MAP
        return change == Change.added

    async def _watch_loop(self) -> None:
        from watchfiles import awatch

        try:
            while not self._stop.is_set():
                directory, entry = watch_point(self._path)
                descend = False
                async with aclosing(awatch(
                    directory,
                    watch_filter=partial(self._accepts, entry),
                    stop_event=self._stop,
                    debounce=self._debounce_ms,
                    recursive=False,
                )) as batches:
                    async for changes in batches:
                        if entry != self._path:
                            # A missing directory on the way appeared; move down.
                            descend = True
                            break
                        # One notification per batch; the hub recomputes the whole file.
                        kinds = {_CHANGE_KIND_MAP[change] for change, _ in changes}
                        self._on_event(
                            self._path, "discovered" if "discovered" in kinds else "changed",
                        )
                if not descend:
                    return
                if self._path.is_file():
                    self._on_event(self._path, "discovered")
        except asyncio.CancelledError:
            return
        except (OSError, RuntimeError) as exc:
            print(f"  Watcher error: {self._path}: {exc}", file=sys.stderr)
            if self._collector is not None:
                self._collector.record_watcher("failed", str(self._path), detail=str(exc))


class WatcherPool:
    """Owns the live watchers, keyed by absolute path.

    ``acquire`` and ``release`` are synchronous so the existence check and
    the creation happen in one event-loop step.

    Args:
        factory: Builds a watcher for (path, handler).  Defaults to
            ``WatchfilesWatcher``.
        debounce_ms: Debounce passed to the default factory.
        collector: Optional collector for start/stop events.

    """

    __slots__ = ("_collector", "_factory", "_watchers")

    def __init__(
        self,
        factory: WatcherFactory | None = None,
        *,
        debounce_ms: int = 50,
        collector: StackCollector | None = None,
    ) -> None:
        if factory is None:
            factory = partial(WatchfilesWatcher, debounce_ms=debounce_ms, collector=collector)
        self._factory = factory
        self._collector = collector
        self._watchers: dict[Path, PathWatcher] = {}

    def acquire(self, path: Path, on_event: ChangeHandler) -> bool:
        """Ensure a watcher exists for *path*.

        Returns True if a watcher was created, False if one already existed.

        """
        if path in self._watchers:
            return False
        watcher = self._factory(path, on_event)
        self._watchers[path] = watcher
        watcher.start()
        print(f"  Started watcher: {path}", file=sys.stderr)
        if self._collector is not None:
            self._collector.record_watcher("started", str(path))
        return True

    def release(self, path: Path) -> bool:
        """Close and forget the watcher for *path*.

        Returns True if a watcher was closed.

        """
        watcher = self._watchers.pop(path, None)
        if watcher is None:
            return False
        watcher.close()
        print(f"  Stopped watcher: {path}", file=sys.stderr)
        if self._collector is not None:
            self._collector.record_watcher("stopped", str(path))
        return True

    def close(self) -> int:
        """Release every watcher.  Returns how many were closed."""
        paths = list(self._watchers)
        for path in paths:
            self.release(path)
        return len(paths)

    def paths(self) -> frozenset[Path]:
        return frozenset(self._watchers)

    def __contains__(self, path: object) -> bool:
        return path in self._watchers

    def __len__(self) -> int:
        return len(self._watchers)
