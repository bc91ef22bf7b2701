"""Gazer application — the Chirp HTTP app plus the live WebSocket server.

The HTTP side serves the viewer page and static assets, the open-in-editor
action, and a stats endpoint.  The WebSocket server backing the live core is
started and stopped through Chirp's lifecycle hooks so both run on the same
event loop.
"""

from __future__ import annotations

import json
import sys
import time
from pathlib import Path
from typing import TYPE_CHECKING, Any

from gazer._errors import ConfigError, EditorError
from gazer.config import GazerConfig
from gazer.config_loader import load_config
from gazer.i18n import set_language, t

if TYPE_CHECKING:
    from chirp import App, Request

    from gazer.live.hub import LiveHub
    from gazer.observability.collector import StackCollector

FRONTEND_DIR = Path(__file__).parent / "frontend"

EDITOR_ENDPOINT = "/api/open-in-editor"
STATS_ENDPOINT = "/__gazer/stats"

# Replaced in index.html with the WebSocket URL the page should connect to
_WS_URL_PLACEHOLDER = "__GAZER_WS_URL__"


def _json_response(payload: dict[str, Any], status: int = 200) -> Any:
    from chirp.http.response import Response

    return Response(body=json.dumps(payload), status=status, content_type="application/json")


def create_hub(config: GazerConfig, collector: StackCollector | None = None) -> LiveHub:
    """Build the live core for *config*: git history, diff engine, hub."""
    from gazer.history.engine import DiffEngine
    from gazer.history.git import GitHistory
    from gazer.live.hub import LiveHub

    history = GitHistory(git=config.git, marker=config.repo_marker, timeout=config.git_timeout)
    return LiveHub(DiffEngine(history), debounce_ms=config.debounce_ms, collector=collector)


def _create_chirp_app(config: GazerConfig, *, debug: bool = False) -> App:
    """Create a Chirp App configured for the viewer.

    Raises:
        ConfigError: If Chirp is not installed.

    """
    try:
        from chirp import App, AppConfig
    except ImportError as exc:
        raise ConfigError(t("cli.errors.httpStackMissing")) from exc

    app_config = AppConfig(
        template_dir=FRONTEND_DIR,
        debug=debug,
        host=config.host,
        port=config.port,
    )
    return App(config=app_config)


def _wire_viewer_routes(app: App, config: GazerConfig) -> None:
    """Register the viewer page and mount the frontend assets under ``/static``."""
    from chirp.http.response import Response
    from chirp.middleware import StaticFiles

    index_path = FRONTEND_DIR / "index.html"

    async def index_handler(request: Request) -> Any:
        # Read per request so frontend edits show up without a restart
        html = index_path.read_text(encoding="utf-8")
        html = html.replace(_WS_URL_PLACEHOLDER, config.websocket_url)
        return Response(body=html, status=200, content_type="text/html; charset=utf-8")

    index_handler.__name__ = "gazer_index"
    app.route("/", name="gazer:index")(index_handler)
    app.add_middleware(StaticFiles(directory=FRONTEND_DIR, prefix="/static"))


def _wire_editor_route(app: App, config: GazerConfig) -> None:
    """Register ``POST /api/open-in-editor`` (form field ``filepath``)."""
    from gazer.editor import open_in_editor

    async def editor_handler(request: Request) -> Any:
        form = await request.form()
        filepath = (form.get("filepath") or "").strip()
        if not filepath:
            return _json_response({"error": "filepath is required"}, status=400)

        print(f"  Opening in {config.editor}: {filepath}", file=sys.stderr)
        try:
            message = await open_in_editor(config.editor, filepath)
        except EditorError as exc:
            print(f"  Failed to open file in editor: {exc}", file=sys.stderr)
            return _json_response(
                {"error": "Failed to open file in editor", "details": str(exc)},
                status=500,
            )
        return _json_response({"success": True, "message": message})

    editor_handler.__name__ = "gazer_open_in_editor"
    app.route(EDITOR_ENDPOINT, methods=["POST"], name="gazer:editor")(editor_handler)


def _wire_stats_route(app: App, hub: LiveHub, collector: StackCollector) -> None:
    """Register the ``/__gazer/stats`` JSON endpoint."""

    async def stats_handler(request: Request) -> Any:
        return _json_response({"hub": hub.stats(), "event_log": collector.log.stats()})

    stats_handler.__name__ = "gazer_stats"
    app.route(STATS_ENDPOINT, name="gazer:stats")(stats_handler)


def _start_live_server(app: App, config: GazerConfig, hub: LiveHub) -> None:
    """Run the WebSocket server inside the app's event loop.

    Flow:
        on_startup  → start the websockets server on ``config.websocket_port``
        on_shutdown → stop accepting, close open connections, close the hub

    """
    from gazer.live.transport import start_live_server

    server = None

    @app.on_startup
    async def _start_websocket_server() -> None:
        nonlocal server
        server = await start_live_server(hub, config.host, config.websocket_port)

    @app.on_shutdown
    async def _stop_websocket_server() -> None:
        if server is not None:
            server.close()
            await server.wait_closed()
        await hub.close()


def create_app(
    config: GazerConfig,
    *,
    hub: LiveHub | None = None,
    collector: StackCollector | None = None,
    debug: bool = False,
) -> App:
    """Assemble the HTTP app and attach the live server lifecycle."""
    from gazer.observability import EventLog, StackCollector

    if collector is None:
        collector = StackCollector(EventLog())
    if hub is None:
        hub = create_hub(config, collector)

    app = _create_chirp_app(config, debug=debug)
    _wire_viewer_routes(app, config)
    _wire_editor_route(app, config)
    _wire_stats_route(app, hub, collector)
    _start_live_server(app, config, hub)
    return app


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------


def serve(root: str | Path = ".", **kwargs: object) -> None:
    """Start the viewer: HTTP on ``port``, WebSocket on ``ws_port``.

    Args:
        root: Directory to read ``gazer.yaml`` / ``gazer.toml`` from.
        **kwargs: Override GazerConfig fields.

    """
    from gazer.banner import print_banner

    config = load_config(Path(root), **kwargs)
    if config.language:
        set_language(config.language)
    t0 = time.perf_counter()

    app = create_app(config, debug=True)

    load_ms = (time.perf_counter() - t0) * 1000
    print_banner(config, load_ms=load_ms)

    app.run(host=config.host, port=config.port)
