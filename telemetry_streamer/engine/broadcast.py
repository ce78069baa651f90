"""The broadcast loop: once per tick, snapshot every machine and fan out.

The loop owns the cursor table and reads the record store; the connection
registry is shared with the transport.  Each tick builds the full batch,
encodes it once, and delivers it to every registered connection
concurrently.  Every send is bounded by a timeout, so one slow or broken
consumer costs at most that timeout and never holds up the others.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Mapping, Sequence

from websockets.exceptions import ConnectionClosed

from telemetry_streamer.engine import builder
from telemetry_streamer.engine.cursor import CursorTable
from telemetry_streamer.engine.registry import Connection, ConnectionRegistry, close_quietly
from telemetry_streamer.engine.ticker import Ticker
from telemetry_streamer.engine.wire import encode_update
from telemetry_streamer.models.reading import ReadingRecord
from telemetry_streamer.models.snapshot import Severity, TelemetrySnapshot

logger = logging.getLogger(__name__)


# ── Stats tracker ───────────────────────────────────────────────────────


class BroadcastStats:
    """Accumulates broadcast statistics and logs them periodically."""

    def __init__(self, report_interval: float = 30.0) -> None:
        self._report_interval = report_interval
        self._last_report = time.monotonic()
        self._reset()

    def _reset(self) -> None:
        self.ticks = 0
        self.snapshots = 0
        self.anomalies: dict[Severity, int] = dict.fromkeys(Severity, 0)
        self.delivered = 0
        self.failed = 0

    def record_batch(self, batch: Sequence[TelemetrySnapshot]) -> None:
        self.ticks += 1
        self.snapshots += len(batch)
        for snap in batch:
            if snap.anomaly is not None:
                self.anomalies[snap.anomaly.severity] += 1

    def maybe_report(self, connected: int) -> None:
        now = time.monotonic()
        if now - self._last_report < self._report_interval:
            return
        logger.info(
            "STATS | ticks=%d | snapshots=%d | anomalies warning=%d critical=%d | "
            "delivered=%d failed=%d | consumers=%d",
            self.ticks,
            self.snapshots,
            self.anomalies[Severity.WARNING],
            self.anomalies[Severity.CRITICAL],
            self.delivered,
            self.failed,
            connected,
        )
        # Reset counters for next window
        self._reset()
        self._last_report = now


# ── Broadcast loop ──────────────────────────────────────────────────────


class BroadcastLoop:
    """Drives replay, snapshot derivation and fan-out, one tick at a time."""

    def __init__(
        self,
        store: Mapping[str, Sequence[ReadingRecord]],
        registry: ConnectionRegistry,
        ticker: Ticker,
        send_timeout: float = 0.5,
        stats: BroadcastStats | None = None,
    ) -> None:
        self._store = store
        self._cursors = CursorTable(store)
        self._registry = registry
        self._ticker = ticker
        self._send_timeout = send_timeout
        self._stats = stats or BroadcastStats()
        self._closing: set[asyncio.Task[None]] = set()

    @property
    def cursors(self) -> CursorTable:
        return self._cursors

    @property
    def stats(self) -> BroadcastStats:
        return self._stats

    def build_batch(self, timestamp: int) -> list[TelemetrySnapshot]:
        """Advance every cursor once and snapshot the current records."""
        batch: list[TelemetrySnapshot] = []
        for machine_id in self._cursors:
            record = self._store[machine_id][self._cursors.advance(machine_id)]
            batch.append(builder.snapshot(machine_id, record, timestamp))
        return batch

    async def _deliver(self, connection: Connection, payload: str) -> bool:
        try:
            await asyncio.wait_for(connection.send(payload), timeout=self._send_timeout)
            return True
        except (ConnectionClosed, OSError, TimeoutError) as exc:
            logger.warning(
                "Dropping consumer after failed delivery: %s",
                type(exc).__name__,
            )
        self._registry.disconnect(connection)
        # Closed in the background; the tick does not wait for it.
        task = asyncio.ensure_future(close_quietly(connection))
        self._closing.add(task)
        task.add_done_callback(self._closing.discard)
        return False

    async def tick(self, timestamp: int) -> int:
        """Run one tick; returns the number of successful deliveries."""
        batch = self.build_batch(timestamp)
        payload = encode_update(batch)
        connections = self._registry.members()

        results = await asyncio.gather(
            *(self._deliver(connection, payload) for connection in connections)
        )
        delivered = sum(results)

        self._stats.record_batch(batch)
        self._stats.delivered += delivered
        self._stats.failed += len(results) - delivered
        logger.debug(
            "Tick %d: %d snapshots to %d/%d consumers",
            timestamp,
            len(batch),
            delivered,
            len(connections),
        )
        return delivered

    async def run(self) -> None:
        """Tick until the ticker is stopped."""
        logger.info(
            "Broadcast loop started | machines=%d | interval=%.2fs",
            len(self._cursors),
            self._ticker.interval,
        )
        async for timestamp in self._ticker:
            await self.tick(timestamp)
            self._stats.maybe_report(len(self._registry))
        logger.info("Broadcast loop stopped")

    def stop(self) -> None:
        self._ticker.stop()

    async def drain(self) -> None:
        """Wait for closes of dropped consumers that are still in progress."""
        if self._closing:
            await asyncio.gather(*self._closing)
