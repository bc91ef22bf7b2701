"""Client sessions — sinks, sessions, and the session → paths registry.

A ``Sink`` is anything that can take a serialized frame and say whether it is
still open.  The hub never sees transport types; the WebSocket transport
wraps each connection in a ``QueueSink`` and drains its queue to the socket.
"""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import AsyncIterator, Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from pathlib import Path


class Sink(Protocol):
    """Outbound side of one viewer connection."""

    @property
    def is_open(self) -> bool:
        """Whether frames sent now can still be delivered."""
        ...

    def send(self, data: str) -> None:
        """Queue one text frame without blocking."""
        ...

    def close(self) -> None:
        """Mark the sink closed; later sends are dropped."""
        ...


@dataclass(eq=False, slots=True)
class QueueSink:
    """Sink backed by an ``asyncio.Queue`` drained by the transport.

    Attributes:
        queue: Pending outbound frames.

    """

    queue: asyncio.Queue[str] = field(default_factory=asyncio.Queue)
    _open: bool = True

    @property
    def is_open(self) -> bool:
        return self._open

    def send(self, data: str) -> None:
        if self._open:
            self.queue.put_nowait(data)

    def close(self) -> None:
        self._open = False

    async def frames(self) -> AsyncIterator[str]:
        """Yield queued frames until cancelled.

        Catches ``CancelledError`` (transport teardown) and ``GeneratorExit``
        so shutdown does not leak ``StopAsyncIteration`` noise into the loop.

        """
        try:
            while True:
                yield await self.queue.get()
        except (asyncio.CancelledError, GeneratorExit):
            return


@dataclass(eq=False, slots=True)
class Session:
    """One connected viewer.  Hashes by identity.

    Attributes:
        sink: Where frames for this viewer go.
        session_id: Random identifier used in logs and events.

    """

    sink: Sink
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])


class SessionRegistry:
    """Tracks live sessions and the paths each one watches.

    This is a reverse index for disconnect cleanup and refresh targeting only;
    subscriber counts live in the ``SubscriptionTable``.

    """

    __slots__ = ("_sessions",)

    def __init__(self) -> None:
        self._sessions: dict[Session, set[Path]] = {}

    def register(self, sink: Sink) -> Session:
        """Create a session for *sink* with an empty path set."""
        session = Session(sink=sink)
        self._sessions[session] = set()
        return session

    def track(self, session: Session, path: Path) -> None:
        paths = self._sessions.get(session)
        if paths is not None:
            paths.add(path)

    def untrack(self, session: Session, path: Path) -> None:
        paths = self._sessions.get(session)
        if paths is not None:
            paths.discard(path)

    def paths(self, session: Session) -> frozenset[Path]:
        """Snapshot of the paths *session* watches."""
        return frozenset(self._sessions.get(session, ()))

    def drop(self, session: Session) -> frozenset[Path]:
        """Remove *session* and return the paths it was watching."""
        return frozenset(self._sessions.pop(session, ()))

    def __contains__(self, session: object) -> bool:
        return session in self._sessions

    def __iter__(self) -> Iterator[Session]:
        return iter(list(self._sessions))

    def __len__(self) -> int:
        return len(self._sessions)
