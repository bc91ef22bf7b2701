"""WebSocket transport — binds ``websockets`` connections to a LiveHub.

Each connection gets a ``QueueSink``; a writer task drains the sink to the
socket so the hub can push without awaiting network I/O.  Inbound frames are
handled one at a time in arrival order.
"""

from __future__ import annotations

import asyncio
from functools import partial
from typing import TYPE_CHECKING

from websockets.asyncio.server import serve
from websockets.exceptions import ConnectionClosed

from gazer.live.sessions import QueueSink

if TYPE_CHECKING:
    from websockets.asyncio.server import Server, ServerConnection

    from gazer.live.hub import LiveHub


async def handle_connection(hub: LiveHub, websocket: ServerConnection) -> None:
    """Serve one viewer until its socket closes."""
    sink = QueueSink()
    writer = asyncio.create_task(_drain(sink, websocket), name="gazer-ws-writer")
    session = hub.connect(sink)
    try:
        await hub.replay(session)
        async for message in websocket:
            await hub.handle_message(session, message)
    except ConnectionClosed:
        # Abnormal close; cleanup below is the same as for a clean one.
        pass
    finally:
        hub.disconnect(session)
        writer.cancel()
        await asyncio.gather(writer, return_exceptions=True)


async def _drain(sink: QueueSink, websocket: ServerConnection) -> None:
    """Forward queued frames to the socket until it closes."""
    try:
        async for frame in sink.frames():
            await websocket.send(frame)
    except ConnectionClosed:
        sink.close()


async def start_live_server(hub: LiveHub, host: str, port: int) -> Server:
    """Start the WebSocket server for *hub* on the running loop."""
    return await serve(partial(handle_connection, hub), host, port)
