"""Shared type definitions for gazer."""

from collections.abc import Callable
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from pathlib import Path

# Absolute path of a watched file
type WatchedFilePath = Path

# Version-control reference (branch, tag, or commit)
type Ref = str

# Comparison mode derived from the refs supplied at watch time
type ComparisonMode = Literal["range", "single", "unspecified"]

# Kind of filesystem notification delivered to a path handler
type WatchKind = Literal["changed", "discovered"]

# Per-path handler registered with the watcher pool
type ChangeHandler = Callable[[Path, WatchKind], None]

# Session identifier used in logs and events
type SessionID = str

# Why an update was computed and pushed
type PushReason = Literal["watch", "change", "replay", "refresh"]
