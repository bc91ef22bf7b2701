"""Wire protocol — JSON text frames between viewers and the hub.

Client → server::

    {"type": "watch", "absolutePath": "/abs/file", "prevBranch": "v1", "currBranch": "v2"}
    {"type": "unwatch", "absolutePath": "/abs/file"}
    {"type": "refresh"}

Server → client::

    {"type": "fileUpdate", "absolutePath": ..., "filename": ..., "content": ...,
     "diff": ..., "originalContent": ..., "modifiedContent": ..., "error"?: ...}
    {"type": "fileRemoved", "absolutePath": ...}
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from gazer._errors import ProtocolError
from gazer.history.engine import Comparison

if TYPE_CHECKING:
    from gazer.history.engine import DiffResult


# ---------------------------------------------------------------------------
# Client messages
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class WatchRequest:
    """Subscribe to a path with a comparison chosen by the supplied refs."""

    path: Path
    comparison: Comparison


@dataclass(frozen=True, slots=True)
class UnwatchRequest:
    """Drop the subscription to a path."""

    path: Path


@dataclass(frozen=True, slots=True)
class RefreshRequest:
    """Recompute and resend every path the session watches."""


@dataclass(frozen=True, slots=True)
class UnknownRequest:
    """A well-formed message with a type the hub does not handle."""

    type: str


type ClientMessage = WatchRequest | UnwatchRequest | RefreshRequest | UnknownRequest


def parse_client_message(raw: str | bytes) -> ClientMessage:
    """Decode one inbound frame.

    Raises:
        ProtocolError: On invalid JSON, a non-object payload, or missing/invalid
            fields for a known type.

    """
    try:
        data = json.loads(raw)
    except (ValueError, UnicodeDecodeError) as exc:
        msg = f"invalid JSON: {exc}"
        raise ProtocolError(msg) from exc

    if not isinstance(data, dict):
        msg = f"expected a JSON object, got {type(data).__name__}"
        raise ProtocolError(msg)

    kind = data.get("type")
    if kind == "watch":
        return WatchRequest(
            path=_absolute_path(data),
            comparison=Comparison(
                from_ref=_optional_str(data, "prevBranch"),
                to_ref=_optional_str(data, "currBranch"),
            ),
        )
    if kind == "unwatch":
        return UnwatchRequest(path=_absolute_path(data))
    if kind == "refresh":
        return RefreshRequest()
    return UnknownRequest(type=str(kind))


def _absolute_path(data: dict[str, Any]) -> Path:
    value = data.get("absolutePath")
    if not isinstance(value, str) or not value:
        msg = "absolutePath is required"
        raise ProtocolError(msg)
    if not os.path.isabs(value):
        msg = f"absolutePath must be absolute: {value!r}"
        raise ProtocolError(msg)
    # Collapse "." and ".." lexically so one file maps to one entry; symlinks are kept.
    return Path(os.path.normpath(value))


def _optional_str(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        msg = f"{key} must be a string"
        raise ProtocolError(msg)
    return value


# ---------------------------------------------------------------------------
# Server messages
# ---------------------------------------------------------------------------


def file_update_message(path: Path, result: DiffResult) -> str:
    """Serialize a ``fileUpdate`` frame."""
    payload: dict[str, Any] = {
        "type": "fileUpdate",
        "absolutePath": str(path),
        "filename": path.name,
        "content": result.content,
        "diff": result.diff,
        "originalContent": result.original_content,
        "modifiedContent": result.modified_content,
    }
    if result.error is not None:
        payload["error"] = result.error
    return json.dumps(payload)


def file_removed_message(path: Path) -> str:
    """Serialize a ``fileRemoved`` frame."""
    return json.dumps({"type": "fileRemoved", "absolutePath": str(path)})
