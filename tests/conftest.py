"""Shared test fixtures for gazer."""

from __future__ import annotations

import json
import shutil
import subprocess
from pathlib import Path
from typing import Any

import pytest

from gazer._errors import HistoryError
from gazer.history.engine import DiffEngine
from gazer.live.hub import LiveHub
from gazer.live.sessions import QueueSink
from gazer.observability import EventLog, StackCollector


# ---------------------------------------------------------------------------
# Fake collaborators
# ---------------------------------------------------------------------------


class FakeHistory:
    """In-memory ``HistoryBackend`` recording every query.

    ``snapshots`` maps a ref to the file content at that ref; unknown refs
    fail like ``git show`` on a bad revision.
    """

    def __init__(self, snapshots: dict[str, str] | None = None, *, fail_diff: bool = False) -> None:
        self.snapshots = snapshots if snapshots is not None else {"HEAD": "committed\n"}
        self.fail_diff = fail_diff
        self.calls: list[tuple[Any, ...]] = []

    async def diff(self, path: Path, from_ref: str, to_ref: str | None) -> str:
        self.calls.append(("diff", path, from_ref, to_ref))
        if self.fail_diff:
            msg = f"bad revision '{from_ref}'"
            raise HistoryError(msg)
        return f"diff {from_ref}..{to_ref or 'WORKTREE'} {path.name}"

    async def show(self, path: Path, ref: str) -> str:
        self.calls.append(("show", path, ref))
        if ref not in self.snapshots:
            msg = f"invalid object name '{ref}'"
            raise HistoryError(msg)
        return self.snapshots[ref]

    def count(self, kind: str) -> int:
        return sum(1 for call in self.calls if call[0] == kind)


class FakeWatcher:
    """``PathWatcher`` whose events are fired by the test."""

    def __init__(self, path: Path, on_event: Any) -> None:
        self.path = path
        self.on_event = on_event
        self.started = False
        self.closed = False

    def start(self) -> None:
        self.started = True

    def close(self) -> None:
        self.closed = True

    def fire(self, kind: str = "changed") -> None:
        self.on_event(self.path, kind)


class FakeWatcherFactory:
    """Watcher factory that keeps every watcher it builds."""

    def __init__(self) -> None:
        self.created: list[FakeWatcher] = []

    def __call__(self, path: Path, on_event: Any) -> FakeWatcher:
        watcher = FakeWatcher(path, on_event)
        self.created.append(watcher)
        return watcher

    def live(self, path: Path) -> list[FakeWatcher]:
        return [w for w in self.created if w.path == path and not w.closed]


def drain(sink: QueueSink) -> list[dict[str, Any]]:
    """Pop every queued frame from *sink* and decode it."""
    frames: list[dict[str, Any]] = []
    while not sink.queue.empty():
        frames.append(json.loads(sink.queue.get_nowait()))
    return frames


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def history() -> FakeHistory:
    return FakeHistory({"HEAD": "committed\n", "v1": "version one\n", "v2": "version two\n"})


@pytest.fixture
def watchers() -> FakeWatcherFactory:
    return FakeWatcherFactory()


@pytest.fixture
def collector() -> StackCollector:
    return StackCollector(EventLog())


@pytest.fixture
def hub(history: FakeHistory, watchers: FakeWatcherFactory, collector: StackCollector) -> LiveHub:
    """A LiveHub wired to fake history and fake watchers."""
    return LiveHub(DiffEngine(history), watcher_factory=watchers, collector=collector)


@pytest.fixture
def tracked_file(tmp_path: Path) -> Path:
    """A file on disk with live content ``working\\n``."""
    path = tmp_path / "src" / "main.py"
    path.parent.mkdir()
    path.write_text("working\n")
    return path


# ---------------------------------------------------------------------------
# Real git repository
# ---------------------------------------------------------------------------


def _git(cwd: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", "-c", "user.name=Gazer", "-c", "user.email=gazer@example.com",
         "-c", "commit.gpgsign=false", "-c", "tag.gpgsign=false", *args],
        cwd=cwd, check=True, capture_output=True, text=True,
    )
    return result.stdout


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """A git repository with tags v1 and v2 and an uncommitted edit.

    ``docs/notes.txt`` reads ``one`` at v1, ``two`` at v2 (HEAD), and
    ``three`` in the working tree.
    """
    if shutil.which("git") is None:
        pytest.skip("git is not installed")

    repo = tmp_path / "repo"
    (repo / "docs").mkdir(parents=True)
    _git(repo, "init", "-q")
    notes = repo / "docs" / "notes.txt"

    notes.write_text("one\n")
    _git(repo, "add", "docs/notes.txt")
    _git(repo, "commit", "-q", "-m", "one")
    _git(repo, "tag", "v1")

    notes.write_text("two\n")
    _git(repo, "commit", "-q", "-am", "two")
    _git(repo, "tag", "v2")

    notes.write_text("three\n")
    return repo
