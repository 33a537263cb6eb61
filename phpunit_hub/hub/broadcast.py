"""Broadcast hub - fan server events out to every connected viewer.

Each viewer gets an outgoing queue and a writer task. broadcast() only
enqueues, so it is synchronous and safe to call from process callbacks, and
every viewer receives messages in the order broadcast() was called. A viewer
whose transport fails, or that falls more than max_pending messages behind,
is closed and dropped without affecting the others.
"""

from __future__ import annotations

import asyncio
import json
import logging
import uuid
from dataclasses import dataclass
from typing import Protocol

from ..constants import MAX_PENDING_MESSAGES

logger = logging.getLogger(__name__)


class Connection(Protocol):
    """What the hub needs from a viewer transport."""

    async def send(self, message: str) -> None: ...

    async def close(self) -> None: ...


@dataclass
class _Subscriber:
    connection: Connection
    queue: asyncio.Queue
    writer: asyncio.Task | None = None


class BroadcastHub:
    """Registry of live viewer connections keyed by a stable connection id."""

    def __init__(self, loop: asyncio.AbstractEventLoop, max_pending: int = MAX_PENDING_MESSAGES):
        self._loop = loop
        self._max_pending = max_pending
        self._subscribers: dict[str, _Subscriber] = {}

    def __len__(self) -> int:
        return len(self._subscribers)

    def __contains__(self, connection_id: str) -> bool:
        return connection_id in self._subscribers

    @property
    def connection_ids(self) -> list[str]:
        return list(self._subscribers)

    # =========================================================================
    # Connection events
    # =========================================================================

    def on_connect(self, connection: Connection, connection_id: str | None = None) -> str:
        """Register a viewer and return its id."""
        connection_id = connection_id or uuid.uuid4().hex
        if connection_id in self._subscribers:
            raise ValueError(f"Connection id already registered: {connection_id}")

        subscriber = _Subscriber(connection=connection, queue=asyncio.Queue(maxsize=self._max_pending))
        subscriber.writer = self._loop.create_task(self._write(connection_id, subscriber))
        self._subscribers[connection_id] = subscriber

        logger.info(f"New connection! ({connection_id})")
        return connection_id

    def on_disconnect(self, connection_id: str) -> None:
        """Deregister a viewer whose transport has closed."""
        subscriber = self._subscribers.pop(connection_id, None)
        if subscriber is None:
            return

        self._discard(subscriber)
        logger.info(f"Connection {connection_id} has disconnected")

    def on_message(self, connection_id: str, message: str | bytes) -> None:
        """Inbound messages are accepted and ignored; the channel is one-way."""
        logger.debug(f"Ignoring message from {connection_id} ({len(message)} bytes)")

    def on_error(self, connection_id: str, error: BaseException) -> None:
        """Close and deregister a viewer whose transport reported an error."""
        logger.warning(f"An error has occurred on connection {connection_id}: {error}")
        subscriber = self._subscribers.pop(connection_id, None)
        if subscriber is None:
            return

        self._discard(subscriber)
        self._loop.create_task(self._close(connection_id, subscriber.connection))

    # =========================================================================
    # Broadcasting
    # =========================================================================

    def broadcast(self, message: str) -> int:
        """Queue message for every registered viewer; return how many got it."""
        lagging = []
        for connection_id, subscriber in self._subscribers.items():
            try:
                subscriber.queue.put_nowait(message)
            except asyncio.QueueFull:
                lagging.append(connection_id)

        for connection_id in lagging:
            logger.warning(f"Dropping connection {connection_id}: more than {self._max_pending} messages behind")
            subscriber = self._subscribers.pop(connection_id)
            self._discard(subscriber)
            self._loop.create_task(self._close(connection_id, subscriber.connection))

        return len(self._subscribers)

    def broadcast_json(self, payload: dict) -> int:
        return self.broadcast(json.dumps(payload))

    async def drain(self) -> None:
        """Wait until every queued message was delivered or dropped."""
        subscribers = list(self._subscribers.values())
        if subscribers:
            await asyncio.gather(*(s.queue.join() for s in subscribers))

    async def close(self) -> None:
        """Close and deregister every viewer."""
        subscribers = list(self._subscribers.items())
        self._subscribers.clear()

        for connection_id, subscriber in subscribers:
            self._discard(subscriber)
            await self._close(connection_id, subscriber.connection)

    # =========================================================================
    # Internals
    # =========================================================================

    async def _write(self, connection_id: str, subscriber: _Subscriber) -> None:
        while True:
            message = await subscriber.queue.get()
            try:
                await subscriber.connection.send(message)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.warning(f"Dropping connection {connection_id}: send failed: {e}")
                if self._subscribers.get(connection_id) is subscriber:
                    del self._subscribers[connection_id]
                _flush(subscriber.queue)
                await self._close(connection_id, subscriber.connection)
                return
            finally:
                subscriber.queue.task_done()

    def _discard(self, subscriber: _Subscriber) -> None:
        if subscriber.writer is not None and subscriber.writer is not asyncio.current_task():
            subscriber.writer.cancel()
        _flush(subscriber.queue)

    @staticmethod
    async def _close(connection_id: str, connection: Connection) -> None:
        try:
            await connection.close()
        except Exception as e:
            logger.debug(f"Closing connection {connection_id} failed: {e}")


def _flush(queue: asyncio.Queue) -> None:
    """Drop pending messages, marking them done so drain() is not held up."""
    while True:
        try:
            queue.get_nowait()
        except asyncio.QueueEmpty:
            return
        queue.task_done()
