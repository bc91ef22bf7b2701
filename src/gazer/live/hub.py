"""Live hub — the process-scoped context behind the viewer WebSocket.

One ``LiveHub`` owns the watcher pool, subscription table, session registry,
and broadcaster for a server instance.  It is constructed at server start
and closed at server stop; separate hubs share nothing.

Flow:
    watch request  → table registers → pool starts watcher → compute → push to requester
    watcher event  → on_path_changed → compute (serialized per path) → push to subscribers
    last unwatch   → table drops entry → pool stops watcher → fileRemoved to everyone
    disconnect     → unwatch every path the session held

All bookkeeping happens synchronously; the only suspension points are the
diff computations (git subprocesses).
"""

from __future__ import annotations

import asyncio
import sys
import time
from typing import TYPE_CHECKING, Any

from gazer._errors import ProtocolError
from gazer.live.broadcaster import Broadcaster
from gazer.live.protocol import (
    RefreshRequest,
    UnwatchRequest,
    WatchRequest,
    parse_client_message,
)
from gazer.live.sessions import SessionRegistry
from gazer.live.subscriptions import SubscriptionTable
from gazer.live.watcher import WatcherPool

if TYPE_CHECKING:
    from pathlib import Path

    from gazer._types import PushReason, WatchKind
    from gazer.history.engine import Comparison, DiffEngine
    from gazer.live.sessions import Session, Sink
    from gazer.live.watcher import WatcherFactory
    from gazer.observability.collector import StackCollector


class LiveHub:
    """Subscription and broadcast engine for live file viewers.

    Args:
        engine: Diff engine used for every computation.
        watcher_factory: Builds per-path watchers.  Defaults to watchfiles.
        debounce_ms: Debounce for the default watcher factory.
        collector: Optional observability collector.

    """

    def __init__(
        self,
        engine: DiffEngine,
        *,
        watcher_factory: WatcherFactory | None = None,
        debounce_ms: int = 50,
        collector: StackCollector | None = None,
    ) -> None:
        self._engine = engine
        self._collector = collector
        self._pool = WatcherPool(watcher_factory, debounce_ms=debounce_ms, collector=collector)
        self._table = SubscriptionTable(self._pool, self.on_path_changed)
        self._sessions = SessionRegistry()
        self._broadcaster = Broadcaster()
        # Recomputes in flight per path, and paths that changed meanwhile.
        self._inflight: dict[Path, asyncio.Task[None]] = {}
        self._dirty: set[Path] = set()
        self._closed = False

    @property
    def table(self) -> SubscriptionTable:
        return self._table

    @property
    def pool(self) -> WatcherPool:
        return self._pool

    @property
    def sessions(self) -> SessionRegistry:
        return self._sessions

    # ----- Session lifecycle -----

    def connect(self, sink: Sink) -> Session:
        """Register a new viewer with an empty subscription set."""
        session = self._sessions.register(sink)
        print(f"  Client connected ({session.session_id})", file=sys.stderr)
        if self._collector is not None:
            self._collector.record_session("connected", session.session_id)
        return session

    async def replay(self, session: Session) -> None:
        """Send the current state of every watched path to *session*.

        Lets late joiners see existing state without waiting for the next
        filesystem event.

        """
        for path in self._table.paths():
            await self._send_to(session, path, reason="replay")

    def disconnect(self, session: Session) -> None:
        """Unwatch every path *session* held, then forget the session."""
        session.sink.close()
        paths = self._sessions.paths(session)
        for path in paths:
            self.unwatch(session, path)
        self._sessions.drop(session)
        print(
            f"  Client disconnected ({session.session_id}), released {len(paths)} files",
            file=sys.stderr,
        )
        if self._collector is not None:
            self._collector.record_session(
                "disconnected", session.session_id, paths=len(paths),
            )

    # ----- Subscription operations -----

    async def watch(self, session: Session, path: Path, comparison: Comparison) -> None:
        """Subscribe *session* to *path* and send it a fresh snapshot.

        Watching a path the session already watches still sends a snapshot.
        The comparison of an existing entry is kept.

        """
        if session not in self._sessions:
            return
        entry = self._table.watch(session, path, comparison)
        self._sessions.track(session, path)
        if self._collector is not None:
            self._collector.record_subscription(
                "watch", str(path), session.session_id,
                subscribers=len(entry.subscribers),
            )
        await self._send_to(session, path, reason="watch")

    def unwatch(self, session: Session, path: Path) -> bool:
        """Unsubscribe *session* from *path*.

        When the last subscriber leaves, the watcher is released and a
        fileRemoved frame goes to every connected session.

        Returns True if the path stopped being watched.

        """
        self._sessions.untrack(session, path)
        removed = self._table.unwatch(session, path)
        if self._collector is not None:
            self._collector.record_subscription(
                "unwatch", str(path), session.session_id,
                subscribers=self._table.subscriber_count(path),
            )
        if removed:
            self._dirty.discard(path)
            count = self._broadcaster.push_removal(self._sessions, path)
            if self._collector is not None:
                self._collector.record_removal(str(path), clients_notified=count)
        return removed

    async def refresh(self, session: Session) -> None:
        """Recompute every path *session* watches and send only to it."""
        for path in sorted(self._sessions.paths(session), key=str):
            await self._send_to(session, path, reason="refresh")

    # ----- Filesystem events -----

    def on_path_changed(self, path: Path, kind: WatchKind = "changed") -> None:
        """Watcher callback: schedule a recompute for *path*.

        Tolerates a missing entry (the path was unwatched while the event was
        in flight).  A change that arrives during a recompute marks the path
        dirty; exactly one more pass runs when the current one finishes.

        """
        if self._closed or path not in self._table:
            return
        if path in self._inflight:
            self._dirty.add(path)
            return
        self._inflight[path] = asyncio.get_running_loop().create_task(
            self._recompute(path), name=f"gazer-recompute:{path}",
        )

    async def _recompute(self, path: Path) -> None:
        try:
            while True:
                self._dirty.discard(path)
                entry = self._table.get(path)
                if entry is None:
                    return

                t0 = time.perf_counter()
                result = await self._engine.compute(path, entry.comparison)
                duration_ms = (time.perf_counter() - t0) * 1000

                current = self._table.get(path)
                if current is None:
                    return
                if current is not entry:
                    # Re-watched with a new comparison meanwhile
                    continue

                count = self._broadcaster.push_update(
                    frozenset(entry.subscribers), path, result,
                )
                if self._collector is not None:
                    self._collector.record_update(
                        str(path), reason="change", clients_notified=count,
                        duration_ms=duration_ms, error=result.error is not None,
                    )
                if path not in self._dirty:
                    return
        except Exception as exc:
            print(f"  Recompute error: {path}: {exc}", file=sys.stderr)
        finally:
            self._inflight.pop(path, None)

    async def wait_idle(self) -> None:
        """Wait until no recompute is in flight."""
        while self._inflight:
            await asyncio.gather(*self._inflight.values(), return_exceptions=True)

    # ----- Inbound messages -----

    async def handle_message(self, session: Session, raw: str | bytes) -> None:
        """Parse one client frame and dispatch it.

        Malformed frames and unknown types are logged and dropped; the
        connection stays open.

        """
        try:
            message = parse_client_message(raw)
        except ProtocolError as exc:
            print(f"  Dropped message ({session.session_id}): {exc}", file=sys.stderr)
            if self._collector is not None:
                self._collector.record_dropped(session.session_id, "malformed", str(exc))
            return

        if isinstance(message, WatchRequest):
            print(f"  Watching file: {message.path}", file=sys.stderr)
            await self.watch(session, message.path, message.comparison)
        elif isinstance(message, UnwatchRequest):
            print(f"  Unwatching file: {message.path}", file=sys.stderr)
            self.unwatch(session, message.path)
        elif isinstance(message, RefreshRequest):
            await self.refresh(session)
        else:
            print(f"  Unknown message type: {message.type}", file=sys.stderr)
            if self._collector is not None:
                self._collector.record_dropped(session.session_id, "unknown", message.type)

    # ----- Internals -----

    async def _send_to(self, session: Session, path: Path, *, reason: PushReason) -> None:
        """Compute *path* and push the result to *session* alone."""
        entry = self._table.get(path)
        if entry is None:
            return

        t0 = time.perf_counter()
        result = await self._engine.compute(path, entry.comparison)
        duration_ms = (time.perf_counter() - t0) * 1000

        # The session may have left, or dropped the path, while git ran.
        if session not in self._sessions or path not in self._table:
            return
        if reason != "replay" and session not in self._table.subscribers(path):
            return

        count = self._broadcaster.push_update((session,), path, result)
        if self._collector is not None:
            self._collector.record_update(
                str(path), reason=reason, clients_notified=count,
                duration_ms=duration_ms, error=result.error is not None,
            )

    # ----- Lifecycle -----

    def stats(self) -> dict[str, Any]:
        """Counts for the stats endpoint."""
        return {
            "watched_paths": len(self._table),
            "watchers": len(self._pool),
            "sessions": len(self._sessions),
            "recomputing": len(self._inflight),
        }

    async def close(self) -> None:
        """Cancel recomputes, close every session, release every watcher."""
        self._closed = True
        tasks = list(self._inflight.values())
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._dirty.clear()

        for session in self._sessions:
            session.sink.close()
            self._sessions.drop(session)
        self._table.clear()
        self._pool.close()
