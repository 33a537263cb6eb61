"""Live status channel - connection registry and WebSocket transport."""

from .broadcast import BroadcastHub, Connection
from .websocket import handle_connection, serve_status

__all__ = [
    "BroadcastHub",
    "Connection",
    "handle_connection",
    "serve_status",
]
