"""Tracks connected consumers and greets each with the machine roster."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from typing import Protocol

from websockets.exceptions import ConnectionClosed

from telemetry_streamer.engine.wire import encode_init

logger = logging.getLogger(__name__)


class Connection(Protocol):
    """The part of a consumer channel the engine relies on."""

    async def send(self, message: str) -> None: ...

    async def close(self) -> None: ...


async def close_quietly(connection: Connection) -> None:
    """Close *connection*, ignoring a peer that is already gone."""
    try:
        await connection.close()
    except (ConnectionClosed, OSError):
        logger.debug("Connection already closed")


class ConnectionRegistry:
    """Set of consumers that receive every broadcast batch.

    Owned by a single event loop: membership changes come from connection
    lifecycle events and delivery failures, and readers take a copy via
    :meth:`members` so concurrent changes never disturb a broadcast.
    """

    def __init__(self, machine_ids: Iterable[str]) -> None:
        self._machine_ids = tuple(machine_ids)
        self._connections: dict[Connection, None] = {}

    def __len__(self) -> int:
        return len(self._connections)

    def __contains__(self, connection: object) -> bool:
        return connection in self._connections

    @property
    def machine_ids(self) -> tuple[str, ...]:
        return self._machine_ids

    def members(self) -> tuple[Connection, ...]:
        """Connections registered at the time of the call."""
        return tuple(self._connections)

    async def connect(self, connection: Connection) -> bool:
        """Send the ``init`` roster, then register the connection.

        Sending before registering guarantees ``init`` precedes any
        ``update`` on this connection.  Returns ``False`` if the consumer
        went away before the roster could be delivered.
        """
        try:
            await connection.send(encode_init(self._machine_ids))
        except (ConnectionClosed, OSError):
            logger.warning("Consumer closed before init could be delivered")
            return False
        self._connections[connection] = None
        logger.info("Consumer connected (%d connected)", len(self._connections))
        return True

    def disconnect(self, connection: Connection) -> None:
        """Forget a connection; unknown connections are ignored."""
        if connection in self._connections:
            del self._connections[connection]
            logger.info("Consumer disconnected (%d connected)", len(self._connections))

    async def close_all(self) -> None:
        """Close and forget every registered connection, all at once."""
        connections = self.members()
        self._connections.clear()
        await asyncio.gather(*(close_quietly(connection) for connection in connections))
        if connections:
            logger.info("Closed %d consumer connections", len(connections))
