"""Telemetry engine: record store, cursors, snapshots and broadcast."""

from telemetry_streamer.engine.broadcast import BroadcastLoop, BroadcastStats
from telemetry_streamer.engine.cursor import CursorTable
from telemetry_streamer.engine.record_store import RecordStoreError, load, machine_id_from_path
from telemetry_streamer.engine.registry import Connection, ConnectionRegistry
from telemetry_streamer.engine.ticker import Ticker
from telemetry_streamer.engine.wire import encode_init, encode_update

__all__ = [
    "BroadcastLoop",
    "BroadcastStats",
    "Connection",
    "ConnectionRegistry",
    "CursorTable",
    "RecordStoreError",
    "Ticker",
    "encode_init",
    "encode_update",
    "load",
    "machine_id_from_path",
]
