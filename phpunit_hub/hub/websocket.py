"""WebSocket transport for the broadcast hub (status channel on /ws/status)."""

from __future__ import annotations

import logging
from functools import partial
from http import HTTPStatus

from websockets.asyncio.server import ServerConnection, serve
from websockets.exceptions import ConnectionClosedError
from websockets.http11 import Request, Response

from ..constants import STATUS_PATH
from .broadcast import BroadcastHub

logger = logging.getLogger(__name__)


def serve_status(hub: BroadcastHub, host: str, port: int, path: str = STATUS_PATH) -> serve:
    """
    Create the status server; use it as ``async with serve_status(...) as server``.

    Connections to any path other than ``path`` are refused with 404.
    """
    return serve(
        partial(handle_connection, hub),
        host,
        port,
        process_request=partial(_only_path, path),
    )


async def handle_connection(hub: BroadcastHub, websocket: ServerConnection) -> None:
    """Register the viewer for its lifetime; inbound frames are discarded."""
    connection_id = hub.on_connect(websocket)
    try:
        async for message in websocket:
            hub.on_message(connection_id, message)
    except ConnectionClosedError as e:
        hub.on_error(connection_id, e)
    finally:
        hub.on_disconnect(connection_id)


def _only_path(path: str, connection: ServerConnection, request: Request) -> Response | None:
    if request.path.split("?", 1)[0] == path:
        return None
    logger.debug(f"Refusing WebSocket request for {request.path}")
    return connection.respond(HTTPStatus.NOT_FOUND, "Not Found\n")
