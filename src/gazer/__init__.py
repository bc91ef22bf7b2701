"""Gazer — live file and git-diff viewer over WebSockets.

Viewers connect over a WebSocket, ask to watch absolute paths, and receive the
file content plus a git diff against a chosen comparison point every time the
file changes on disk.

Quick start::

    import gazer

    gazer.serve(".", port=8080)

Embedding the core without the HTTP layer::

    from gazer import DiffEngine, GitHistory, LiveHub

    hub = LiveHub(DiffEngine(GitHistory()))

Three comparison modes are chosen per path at watch time:

    watch(path)               HEAD vs. working tree
    watch(path, "v1")         v1 vs. working tree
    watch(path, "v1", "v2")   v1 vs. v2 (content pane stays live)

"""

__version__ = "0.1.0.dev0"
__all__ = [
    "Comparison",
    "DiffEngine",
    "DiffResult",
    "GazerConfig",
    "GitHistory",
    "LiveHub",
    "__version__",
    "serve",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import gazer`` fast and free of the HTTP stack until it is needed.
    """
    if name == "GazerConfig":
        from gazer.config import GazerConfig

        return GazerConfig

    if name in ("Comparison", "DiffEngine", "DiffResult"):
        from gazer.history import engine

        return getattr(engine, name)

    if name == "GitHistory":
        from gazer.history.git import GitHistory

        return GitHistory

    if name == "LiveHub":
        from gazer.live.hub import LiveHub

        return LiveHub

    if name == "serve":
        from gazer.app import serve

        return serve

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
