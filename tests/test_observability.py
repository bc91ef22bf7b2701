"""Tests for gazer.observability — events, event log, collector."""

from __future__ import annotations

import threading

import pytest

from gazer.observability import (
    EventLog,
    MessageDropped,
    RemovalPushed,
    SessionEvent,
    StackCollector,
    SubscriptionEvent,
    UpdatePushed,
    WatcherEvent,
    now_ns,
)


def _update(path: str = "/repo/a.py", ts: int = 0) -> UpdatePushed:
    return UpdatePushed(
        path=path, reason="change", clients_notified=1, duration_ms=1.0,
        error=False, timestamp_ns=ts,
    )


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


class TestEvents:
    """Events are frozen and carry monotonic timestamps."""

    def test_frozen(self) -> None:
        event = _update()
        with pytest.raises(AttributeError):
            event.path = "/other"  # type: ignore[misc]

    def test_now_ns_is_monotonic(self) -> None:
        first = now_ns()
        assert now_ns() >= first


# ---------------------------------------------------------------------------
# EventLog
# ---------------------------------------------------------------------------


class TestEventLog:
    """EventLog — ring buffer with queries."""

    def test_append_and_len(self) -> None:
        log = EventLog()
        for _ in range(3):
            log.append(_update())
        assert len(log) == 3

    def test_ring_buffer_drops_oldest(self) -> None:
        log = EventLog(max_events=2)
        for ts in range(3):
            log.append(_update(ts=ts))
        assert [e.timestamp_ns for e in log.recent()] == [1, 2]

    def test_query_by_type(self) -> None:
        log = EventLog()
        log.append(_update())
        log.append(RemovalPushed(path="/repo/a.py", clients_notified=2, timestamp_ns=1))
        [event] = log.query(event_type=RemovalPushed)
        assert event.clients_notified == 2

    def test_query_by_exact_path(self) -> None:
        log = EventLog()
        log.append(_update("/repo/a.py"))
        log.append(_update("/repo/a.py.bak"))
        assert len(log.query(path="/repo/a.py")) == 1
        assert log.query(path="a.py") == []

    def test_query_by_session(self) -> None:
        log = EventLog()
        log.append(SessionEvent(kind="connected", session_id="s1", paths=0, timestamp_ns=1))
        log.append(SessionEvent(kind="connected", session_id="s2", paths=0, timestamp_ns=2))
        log.append(_update())
        [event] = log.query(session_id="s2")
        assert event.timestamp_ns == 2

    def test_query_since_and_limit(self) -> None:
        log = EventLog()
        for ts in range(10):
            log.append(_update(ts=ts))
        recent = log.query(since_ns=5, limit=3)
        assert [e.timestamp_ns for e in recent] == [9, 8, 7]

    def test_clear(self) -> None:
        log = EventLog()
        log.append(_update())
        assert log.clear() == 1
        assert len(log) == 0

    def test_stats(self) -> None:
        log = EventLog(max_events=5)
        log.append(_update())
        log.append(_update())
        stats = log.stats()
        assert stats == {"total": 2, "capacity": 5, "by_type": {"UpdatePushed": 2}}

    def test_concurrent_appends(self) -> None:
        log = EventLog()

        def worker() -> None:
            for _ in range(200):
                log.append(_update())

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert len(log) == 800


# ---------------------------------------------------------------------------
# StackCollector
# ---------------------------------------------------------------------------


class TestStackCollector:
    """StackCollector — typed recording helpers."""

    def test_default_log(self) -> None:
        assert isinstance(StackCollector().log, EventLog)

    def test_records_every_kind(self) -> None:
        collector = StackCollector()
        collector.record_session("connected", "abc")
        collector.record_subscription("watch", "/a", "abc", subscribers=1)
        collector.record_watcher("failed", "/a", detail="inotify limit")
        collector.record_update("/a", reason="watch", clients_notified=1, duration_ms=2.0)
        collector.record_removal("/a", clients_notified=3)
        collector.record_dropped("abc", "unknown", "ping")

        by_type = collector.log.stats()["by_type"]
        for cls in (
            SessionEvent, SubscriptionEvent, WatcherEvent,
            UpdatePushed, RemovalPushed, MessageDropped,
        ):
            assert by_type[cls.__name__] == 1

        [watcher] = collector.log.query(event_type=WatcherEvent)
        assert watcher.detail == "inotify limit"
        assert watcher.timestamp_ns > 0
