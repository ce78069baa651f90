"""WebSocket transport: accepts consumers and runs the broadcast loop.

One asyncio event loop hosts both the accept/read path of every
connection and the broadcast loop, so the cursor table and the
connection registry are only ever touched from a single thread.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal
from collections.abc import Awaitable, Callable, Mapping, Sequence

from websockets.asyncio.server import ServerConnection, serve
from websockets.exceptions import ConnectionClosed

from telemetry_streamer.config import StreamerConfig
from telemetry_streamer.engine.broadcast import BroadcastLoop, BroadcastStats
from telemetry_streamer.engine.registry import ConnectionRegistry
from telemetry_streamer.engine.ticker import Ticker
from telemetry_streamer.models.reading import ReadingRecord

logger = logging.getLogger(__name__)


def make_handler(
    registry: ConnectionRegistry,
) -> Callable[[ServerConnection], Awaitable[None]]:
    """Build the per-connection handler bound to *registry*.

    The handler greets the consumer, then drains and ignores inbound
    messages until the connection closes, at which point the consumer is
    unregistered.
    """

    async def handle(connection: ServerConnection) -> None:
        if not await registry.connect(connection):
            return
        try:
            async for _message in connection:
                logger.debug("Ignoring inbound message from %s", connection.remote_address)
        except ConnectionClosed:
            logger.debug("Connection from %s closed with error", connection.remote_address)
        finally:
            registry.disconnect(connection)

    return handle


def _install_signal_handlers(stop: asyncio.Event) -> None:
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        # add_signal_handler is unavailable on Windows event loops.
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, stop.set)


async def run_server(
    config: StreamerConfig,
    store: Mapping[str, Sequence[ReadingRecord]],
    stop: asyncio.Event | None = None,
) -> None:
    """Serve consumers and broadcast until *stop* is set or a signal arrives."""
    stop = stop or asyncio.Event()
    _install_signal_handlers(stop)

    registry = ConnectionRegistry(store.keys())
    broadcaster = BroadcastLoop(
        store,
        registry,
        Ticker(config.tick_interval_seconds),
        send_timeout=config.send_timeout_seconds,
        stats=BroadcastStats(report_interval=config.stats_interval_seconds),
    )

    async with serve(make_handler(registry), config.host, config.port) as server:
        logger.info(
            "Streaming %d machines on ws://%s:%d -- press Ctrl+C to stop",
            len(registry.machine_ids),
            config.host,
            config.port,
        )
        broadcast_task = asyncio.create_task(broadcaster.run(), name="broadcast-loop")
        stop_task = asyncio.create_task(stop.wait(), name="stop-signal")
        try:
            done, _ = await asyncio.wait(
                {broadcast_task, stop_task},
                return_when=asyncio.FIRST_COMPLETED,
            )
            if broadcast_task in done:
                # Re-raises if the broadcast loop crashed.
                broadcast_task.result()
        finally:
            logger.info("Shutting down streamer ...")
            broadcaster.stop()
            for task in (broadcast_task, stop_task):
                task.cancel()
            await asyncio.gather(broadcast_task, stop_task, return_exceptions=True)
            await asyncio.gather(registry.close_all(), broadcaster.drain())
            server.close()
            logger.info("Streamer stopped")
