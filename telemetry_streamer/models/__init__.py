"""Domain models for the telemetry streamer."""

from telemetry_streamer.models.reading import FEED_COLUMNS, ReadingRecord, parse_number
from telemetry_streamer.models.snapshot import (
    Anomaly,
    Consumables,
    Kpi,
    MachineStatus,
    Sensors,
    Severity,
    Spares,
    TelemetrySnapshot,
)

__all__ = [
    "Anomaly",
    "Consumables",
    "FEED_COLUMNS",
    "Kpi",
    "MachineStatus",
    "ReadingRecord",
    "Sensors",
    "Severity",
    "Spares",
    "TelemetrySnapshot",
    "parse_number",
]
