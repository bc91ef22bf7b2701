"""Tests for gazer.app — hub wiring and the HTTP layer."""

from __future__ import annotations

from pathlib import Path

import pytest

from gazer.app import create_hub
from gazer.config import GazerConfig
from gazer.history.engine import Comparison
from gazer.live.hub import LiveHub
from gazer.live.sessions import QueueSink
from gazer.observability import StackCollector, WatcherEvent

from .conftest import drain


class TestCreateHub:
    """create_hub — the live core without the HTTP stack."""

    def test_returns_hub(self, tmp_path: Path) -> None:
        assert isinstance(create_hub(GazerConfig(root=tmp_path)), LiveHub)

    @pytest.mark.asyncio
    async def test_hub_serves_real_repository(self, git_repo: Path) -> None:
        collector = StackCollector()
        hub = create_hub(GazerConfig(root=git_repo), collector)
        sink = QueueSink()
        session = hub.connect(sink)
        try:
            await hub.watch(session, git_repo / "docs" / "notes.txt", Comparison("v1", "v2"))
            [frame] = drain(sink)
            assert frame["content"] == "three\n"
            assert frame["originalContent"] == "one\n"
            assert frame["modifiedContent"] == "two\n"
            assert collector.log.query(event_type=WatcherEvent)[0].kind == "started"
        finally:
            await hub.close()


class TestCreateApp:
    """create_app — requires the optional chirp server stack."""

    def test_routes_registered(self, tmp_path: Path) -> None:
        pytest.importorskip("chirp")
        from gazer.app import create_app

        app = create_app(GazerConfig(root=tmp_path, port=8000))
        route_names = [r.name for r in app._pending_routes if hasattr(r, "name")]
        assert "gazer:index" in route_names
        assert "gazer:editor" in route_names
        assert "gazer:stats" in route_names
