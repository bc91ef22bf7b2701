"""Live layer — subscriptions, watchers, sessions, and the push protocol.

Connects viewer WebSocket sessions to filesystem watchers through a
reference-counted subscription table, and pushes diff results back.
"""

from gazer.live.broadcaster import Broadcaster
from gazer.live.hub import LiveHub
from gazer.live.sessions import QueueSink, Session, SessionRegistry, Sink
from gazer.live.subscriptions import SubscriptionTable, WatchedPath
from gazer.live.watcher import PathWatcher, WatcherPool, WatchfilesWatcher

__all__ = [
    "Broadcaster",
    "LiveHub",
    "PathWatcher",
    "QueueSink",
    "Session",
    "SessionRegistry",
    "Sink",
    "SubscriptionTable",
    "WatchedPath",
    "WatcherPool",
    "WatchfilesWatcher",
]
