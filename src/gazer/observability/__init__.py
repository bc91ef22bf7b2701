"""Observability — structured events for the live core.

Aggregates events from:
- **Sessions**: viewer connect/disconnect, watch/unwatch requests
- **Watchers**: filesystem watcher start, stop, failure
- **Pushes**: fileUpdate and fileRemoved deliveries, dropped messages

All events are frozen dataclasses with nanosecond timestamps.

Quick Start:
    >>> from gazer.observability import StackCollector, EventLog
    >>> log = EventLog()
    >>> collector = StackCollector(log)
    >>> # LiveHub(engine, collector=collector) records into the log

"""

from gazer.observability.collector import StackCollector
from gazer.observability.events import (
    MessageDropped,
    RemovalPushed,
    SessionEvent,
    StackEvent,
    SubscriptionEvent,
    UpdatePushed,
    WatcherEvent,
    now_ns,
)
from gazer.observability.log import EventLog

__all__ = [
    "EventLog",
    "MessageDropped",
    "RemovalPushed",
    "SessionEvent",
    "StackCollector",
    "StackEvent",
    "SubscriptionEvent",
    "UpdatePushed",
    "WatcherEvent",
    "now_ns",
]
