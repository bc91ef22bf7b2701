"""Unified event model for live-viewer observability.

Defines event types for sessions, subscriptions, watchers, and pushes.

All events are frozen dataclasses with:
- ``timestamp_ns``: Monotonic nanosecond timestamp
- Descriptive fields for the specific event type

Thread Safety:
    All events are frozen (immutable) and safe to share across threads.

"""

import time
from dataclasses import dataclass
from typing import Literal


# ---------------------------------------------------------------------------
# Session and subscription events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SessionEvent:
    """A viewer connected or disconnected.

    Attributes:
        kind: Lifecycle transition.
        session_id: Identifier of the session.
        paths: Number of paths the session watched at the time of the event.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    kind: Literal["connected", "disconnected"]
    session_id: str
    paths: int
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class SubscriptionEvent:
    """A session started or stopped watching a path.

    Attributes:
        kind: ``watch`` or ``unwatch``.
        path: Absolute path of the watched file.
        session_id: Session that issued the request.
        subscribers: Subscriber count for the path after the change.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    kind: Literal["watch", "unwatch"]
    path: str
    session_id: str
    subscribers: int
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Watcher events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class WatcherEvent:
    """A filesystem watcher was started, stopped, or failed.

    Attributes:
        kind: Lifecycle transition.
        path: Absolute path the watcher serves.
        detail: Free-form detail (the watched directory, or the failure).
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    kind: Literal["started", "stopped", "failed"]
    path: str
    detail: str
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Push events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class UpdatePushed:
    """A fileUpdate message was delivered.

    Attributes:
        path: Absolute path of the file.
        reason: What triggered the computation.
        clients_notified: Number of sessions that received the message.
        duration_ms: Time spent computing the diff result.
        error: True when the result carried a read error.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    reason: Literal["watch", "change", "replay", "refresh"]
    clients_notified: int
    duration_ms: float
    error: bool
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class RemovalPushed:
    """A fileRemoved message was broadcast after the last unwatch."""

    path: str
    clients_notified: int
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class MessageDropped:
    """An inbound client message was rejected.

    Attributes:
        session_id: Session that sent the message.
        reason: ``malformed`` for parse failures, ``unknown`` for unknown types.
        detail: Error text or the offending type.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    session_id: str
    reason: Literal["malformed", "unknown"]
    detail: str
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

type StackEvent = (
    SessionEvent
    | SubscriptionEvent
    | WatcherEvent
    | UpdatePushed
    | RemovalPushed
    | MessageDropped
)


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()
