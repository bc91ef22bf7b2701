"""Stack collector — records live-viewer events into the event log.

Every component of the live core (hub, watcher pool, broadcaster) reports
through one collector so the ``/__gazer/stats`` endpoint sees a single
timeline.

Thread Safety:
    The collector delegates to ``EventLog`` which is internally locked.

"""

from __future__ import annotations

from gazer.observability.events import (
    MessageDropped,
    RemovalPushed,
    SessionEvent,
    SubscriptionEvent,
    UpdatePushed,
    WatcherEvent,
    now_ns,
)
from gazer.observability.log import EventLog


class StackCollector:
    """Unified event collector for the live core.

    Args:
        log: The EventLog to store events in.

    """

    __slots__ = ("_log",)

    def __init__(self, log: EventLog | None = None) -> None:
        self._log = log if log is not None else EventLog()

    @property
    def log(self) -> EventLog:
        """The underlying event log."""
        return self._log

    # ----- Sessions and subscriptions -----

    def record_session(self, kind: str, session_id: str, *, paths: int = 0) -> None:
        """Record a session connect/disconnect."""
        self._log.append(
            SessionEvent(
                kind=kind,  # type: ignore[arg-type]
                session_id=session_id,
                paths=paths,
                timestamp_ns=now_ns(),
            )
        )

    def record_subscription(
        self,
        kind: str,
        path: str,
        session_id: str,
        *,
        subscribers: int = 0,
    ) -> None:
        """Record a watch/unwatch request."""
        self._log.append(
            SubscriptionEvent(
                kind=kind,  # type: ignore[arg-type]
                path=path,
                session_id=session_id,
                subscribers=subscribers,
                timestamp_ns=now_ns(),
            )
        )

    # ----- Watchers -----

    def record_watcher(self, kind: str, path: str, *, detail: str = "") -> None:
        """Record a watcher lifecycle transition."""
        self._log.append(
            WatcherEvent(
                kind=kind,  # type: ignore[arg-type]
                path=path,
                detail=detail,
                timestamp_ns=now_ns(),
            )
        )

    # ----- Pushes -----

    def record_update(
        self,
        path: str,
        *,
        reason: str,
        clients_notified: int = 0,
        duration_ms: float = 0.0,
        error: bool = False,
    ) -> None:
        """Record a fileUpdate delivery."""
        self._log.append(
            UpdatePushed(
                path=path,
                reason=reason,  # type: ignore[arg-type]
                clients_notified=clients_notified,
                duration_ms=duration_ms,
                error=error,
                timestamp_ns=now_ns(),
            )
        )

    def record_removal(self, path: str, *, clients_notified: int = 0) -> None:
        """Record a fileRemoved broadcast."""
        self._log.append(
            RemovalPushed(path=path, clients_notified=clients_notified, timestamp_ns=now_ns())
        )

    def record_dropped(self, session_id: str, reason: str, detail: str) -> None:
        """Record a rejected client message."""
        self._log.append(
            MessageDropped(
                session_id=session_id,
                reason=reason,  # type: ignore[arg-type]
                detail=detail,
                timestamp_ns=now_ns(),
            )
        )
