"""Shared fixtures for the telemetry streamer test suite.

Provides reusable readings, on-disk feed directories and in-memory fake
connections used across the unit tests.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from pathlib import Path

import pytest
from websockets.exceptions import ConnectionClosedError

from telemetry_streamer.models.reading import FEED_COLUMNS, ReadingRecord

# ---------------------------------------------------------------------------
# Reading fixtures
# ---------------------------------------------------------------------------

NOMINAL_ROW: dict[str, str] = {
    "temperature": "72.5",
    "vibration": "2.1",
    "rpm": "1450",
    "load": "60",
    "pressure": "6.2",
    "humidity": "44.0",
    "oil_pct": "85.0",
    "coolant_pct": "90.0",
    "hydraulic_oil_pct": "88.0",
    "brake_fluid_pct": "95.0",
    "filter_clog_pct": "12.0",
    "bearing_wear": "10.0",
    "drive_belt_wear": "14.0",
    "motor_health_pct": "92.0",
    "efficiency_pct": "87.5",
    "usage_hours": "1520.25",
}


@pytest.fixture()
def make_record() -> Callable[..., ReadingRecord]:
    """Return a factory building a nominal record with selected overrides."""

    def _make(**overrides: str) -> ReadingRecord:
        return ReadingRecord({**NOMINAL_ROW, **overrides})

    return _make


@pytest.fixture()
def nominal_record(make_record: Callable[..., ReadingRecord]) -> ReadingRecord:
    """Return a record that breaches no status or anomaly threshold."""
    return make_record()


# ---------------------------------------------------------------------------
# Feed directory fixtures
# ---------------------------------------------------------------------------


def write_feed(directory: Path, filename: str, rows: list[dict[str, str]]) -> Path:
    """Write a feed CSV with the standard header and the given rows."""
    lines = [",".join(FEED_COLUMNS)]
    lines += [",".join(row.get(column, "") for column in FEED_COLUMNS) for row in rows]
    path = directory / filename
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture()
def feed_dir(tmp_path: Path) -> Path:
    """Return a feed directory with three machines of 3, 2 and 1 rows."""
    directory = tmp_path / "machine_feed"
    directory.mkdir()
    write_feed(
        directory,
        "Lathe_01.csv",
        [
            {**NOMINAL_ROW, "temperature": "70"},
            {**NOMINAL_ROW, "temperature": "95"},
            {**NOMINAL_ROW, "temperature": "110"},
        ],
    )
    write_feed(
        directory,
        "CNC_Mill_02.csv",
        [NOMINAL_ROW, {**NOMINAL_ROW, "oil_pct": "5"}],
    )
    write_feed(directory, "Conveyor_03.csv", [NOMINAL_ROW])
    return directory


# ---------------------------------------------------------------------------
# Connection fakes
# ---------------------------------------------------------------------------


class FakeConnection:
    """In-memory consumer channel recording every frame it is sent.

    ``broken`` makes every send fail as a closed socket would; ``stall``
    makes sends hang until cancelled, like a consumer that stopped reading.
    ``close_delay`` makes the closing handshake take that many seconds.
    """

    def __init__(
        self,
        name: str = "consumer",
        broken: bool = False,
        stall: bool = False,
        close_delay: float = 0.0,
    ) -> None:
        self.name = name
        self.broken = broken
        self.stall = stall
        self.close_delay = close_delay
        self.sent: list[str] = []
        self.closed = False
        self.inbound: list[str] = []

    async def send(self, message: str) -> None:
        if self.broken:
            raise ConnectionClosedError(None, None)
        if self.stall:
            await asyncio.Event().wait()
        self.sent.append(message)

    async def close(self) -> None:
        if self.close_delay:
            await asyncio.sleep(self.close_delay)
        self.closed = True

    def __aiter__(self) -> FakeConnection:
        return self

    async def __anext__(self) -> str:
        if not self.inbound:
            raise StopAsyncIteration
        return self.inbound.pop(0)

    @property
    def remote_address(self) -> tuple[str, int]:
        return ("127.0.0.1", 0)

    def __repr__(self) -> str:
        return f"FakeConnection({self.name!r})"


@pytest.fixture()
def fake_connection_cls() -> type[FakeConnection]:
    return FakeConnection


@pytest.fixture()
def write_feed_file() -> Callable[[Path, str, list[dict[str, str]]], Path]:
    """Return the helper that writes a feed CSV into a directory."""
    return write_feed
