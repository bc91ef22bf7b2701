"""Broadcaster — serializes and pushes frames to the right sessions.

Frames are serialized once per push and enqueued on each target session's
sink.  Sessions whose sink is no longer open are skipped silently; the
disconnect path cleans them up separately.  Enqueueing never suspends, so a
push completes within the caller's event-loop step.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from gazer.live.protocol import file_removed_message, file_update_message

if TYPE_CHECKING:
    from pathlib import Path

    from gazer.history.engine import DiffResult
    from gazer.live.sessions import Session


class Broadcaster:
    """Delivers ``fileUpdate`` and ``fileRemoved`` frames."""

    __slots__ = ()

    def push_update(self, sessions: Iterable[Session], path: Path, result: DiffResult) -> int:
        """Send a fileUpdate for *path* to *sessions*.

        Returns:
            Number of sessions the frame was delivered to.

        """
        return self._push(sessions, file_update_message(path, result))

    def push_removal(self, sessions: Iterable[Session], path: Path) -> int:
        """Send a fileRemoved for *path* to *sessions*."""
        return self._push(sessions, file_removed_message(path))

    def _push(self, sessions: Iterable[Session], frame: str) -> int:
        count = 0
        for session in sessions:
            if not session.sink.is_open:
                continue
            session.sink.send(frame)
            count += 1
        return count
