"""Tests for gazer.live.sessions — sinks and the session registry."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from gazer.live.sessions import QueueSink, Session, SessionRegistry


class TestQueueSink:
    """QueueSink — non-blocking outbound queue."""

    def test_send_enqueues(self) -> None:
        sink = QueueSink()
        sink.send("a")
        sink.send("b")
        assert sink.queue.qsize() == 2

    def test_closed_sink_drops(self) -> None:
        sink = QueueSink()
        sink.close()
        assert not sink.is_open
        sink.send("a")
        assert sink.queue.empty()

    @pytest.mark.asyncio
    async def test_frames_yields_in_order(self) -> None:
        sink = QueueSink()
        sink.send("one")
        sink.send("two")
        gen = sink.frames()
        assert await gen.__anext__() == "one"
        assert await gen.__anext__() == "two"
        await gen.aclose()

    @pytest.mark.asyncio
    async def test_frames_cancel_is_quiet(self) -> None:
        sink = QueueSink()
        received: list[str] = []

        async def consume() -> None:
            async for frame in sink.frames():
                received.append(frame)

        task = asyncio.create_task(consume())
        sink.send("x")
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)
        assert received == ["x"]


class TestSession:
    def test_identity_hash(self) -> None:
        sink = QueueSink()
        a = Session(sink=sink)
        b = Session(sink=sink)
        assert a != b
        assert len({a, b}) == 2

    def test_ids_are_unique(self) -> None:
        assert Session(sink=QueueSink()).session_id != Session(sink=QueueSink()).session_id


class TestSessionRegistry:
    """SessionRegistry — session → paths reverse index."""

    def test_register(self) -> None:
        registry = SessionRegistry()
        session = registry.register(QueueSink())
        assert session in registry
        assert len(registry) == 1
        assert registry.paths(session) == frozenset()

    def test_track_and_untrack(self) -> None:
        registry = SessionRegistry()
        session = registry.register(QueueSink())
        registry.track(session, Path("/a"))
        registry.track(session, Path("/b"))
        registry.untrack(session, Path("/a"))
        assert registry.paths(session) == frozenset({Path("/b")})

    def test_track_unknown_session_ignored(self) -> None:
        registry = SessionRegistry()
        stranger = Session(sink=QueueSink())
        registry.track(stranger, Path("/a"))
        assert stranger not in registry
        assert registry.paths(stranger) == frozenset()

    def test_drop_returns_paths(self) -> None:
        registry = SessionRegistry()
        session = registry.register(QueueSink())
        registry.track(session, Path("/a"))
        assert registry.drop(session) == frozenset({Path("/a")})
        assert session not in registry
        assert registry.drop(session) == frozenset()

    def test_iteration_is_a_snapshot(self) -> None:
        registry = SessionRegistry()
        for _ in range(3):
            registry.register(QueueSink())
        for session in registry:
            registry.drop(session)
        assert len(registry) == 0
