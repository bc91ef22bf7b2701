"""Event log — bounded, lock-protected timeline of live-viewer events.

Backs the ``/__gazer/stats`` endpoint and the test suite.  Watchers report
from their asyncio tasks and tests may append from threads, so every access
goes through one ``threading.Lock``.
"""

import threading
from collections import Counter, deque
from typing import Any

from gazer.observability.events import StackEvent


class EventLog:
    """Ring buffer of ``StackEvent`` values, oldest dropped first.

    Args:
        max_events: Capacity of the buffer.

    """

    __slots__ = ("_capacity", "_events", "_lock")

    def __init__(self, max_events: int = 10_000) -> None:
        self._capacity = max_events
        self._events: deque[StackEvent] = deque(maxlen=max_events)
        self._lock = threading.Lock()

    def append(self, event: StackEvent) -> None:
        with self._lock:
            self._events.append(event)

    def query(
        self,
        *,
        event_type: type | None = None,
        since_ns: int = 0,
        path: str | None = None,
        session_id: str | None = None,
        limit: int = 100,
    ) -> list[StackEvent]:
        """Return matching events, newest first.

        Args:
            event_type: Keep only instances of this class.
            since_ns: Keep only events stamped at or after this time.
            path: Keep only events about exactly this path.
            session_id: Keep only events issued by or for this session.
            limit: Stop after this many matches.

        """
        with self._lock:
            snapshot = list(self._events)

        matches: list[StackEvent] = []
        for event in reversed(snapshot):
            if len(matches) >= limit:
                break
            if event_type is not None and not isinstance(event, event_type):
                continue
            if event.timestamp_ns < since_ns:
                continue
            if path is not None and getattr(event, "path", None) != path:
                continue
            if session_id is not None and getattr(event, "session_id", None) != session_id:
                continue
            matches.append(event)
        return matches

    def recent(self, n: int = 20) -> list[StackEvent]:
        """The last *n* events, oldest first."""
        with self._lock:
            snapshot = list(self._events)
        return snapshot[-n:]

    def clear(self) -> int:
        """Empty the log.  Returns how many events were discarded."""
        with self._lock:
            dropped = len(self._events)
            self._events.clear()
        return dropped

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def stats(self) -> dict[str, Any]:
        """Totals per event class, for the stats endpoint."""
        with self._lock:
            by_type = Counter(type(event).__name__ for event in self._events)
            total = len(self._events)
        return {"total": total, "capacity": self._capacity, "by_type": dict(by_type)}
