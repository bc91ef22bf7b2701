"""Gazer configuration.

GazerConfig is the central configuration object, frozen after creation.
"""

from dataclasses import dataclass, field
from pathlib import Path

# IANA dynamic/private port range used when no port is given
DYNAMIC_PORT_MIN = 49152
DYNAMIC_PORT_MAX = 65535


@dataclass(frozen=True, slots=True)
class GazerConfig:
    """Configuration for a Gazer server.

    Attributes:
        root: Directory the server was started from (config files are read
              here). Always resolved to an absolute path on construction.
        host: Bind address for both the HTTP and WebSocket servers.
        port: HTTP port. ``0`` picks a random port from the dynamic range.
        ws_port: WebSocket port. ``0`` means ``port + 1``.
        editor: Command used by the open-in-editor endpoint.
        git: Git executable used for history queries.
        repo_marker: Directory or file name that marks a repository root.
        debounce_ms: Filesystem watcher debounce window in milliseconds.
        git_timeout: Seconds before a single git query is abandoned.
        language: UI language (``en``, ``es``, ``ja``); ``None`` auto-detects.

    """

    root: Path = field(default_factory=Path.cwd)
    host: str = "127.0.0.1"
    port: int = 0
    ws_port: int = 0
    editor: str = "cursor"
    git: str = "git"
    repo_marker: str = ".git"
    debounce_ms: int = 50
    git_timeout: float = 10.0
    language: str | None = None

    def __post_init__(self) -> None:
        if not self.root.is_absolute():
            object.__setattr__(self, "root", self.root.resolve())

    @property
    def websocket_port(self) -> int:
        """Effective WebSocket port (``port + 1`` unless set explicitly)."""
        if self.ws_port:
            return self.ws_port
        return self.port + 1

    @property
    def http_url(self) -> str:
        """Base URL of the viewer page."""
        return f"http://{self.host}:{self.port}"

    @property
    def websocket_url(self) -> str:
        """URL viewers connect to for live updates."""
        return f"ws://{self.host}:{self.websocket_port}"
