"""Telemetry snapshot value objects broadcast to consumers each tick."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class MachineStatus(StrEnum):
    """Operational status reported for a machine."""

    OPERATIONAL = "OPERATIONAL"
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"
    OFFLINE = "OFFLINE"


class Severity(StrEnum):
    """Anomaly severity, ordered WARNING < CRITICAL."""

    WARNING = "WARNING"
    CRITICAL = "CRITICAL"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank


_SEVERITY_RANK: dict[Severity, int] = {Severity.WARNING: 0, Severity.CRITICAL: 1}


@dataclass(frozen=True, slots=True)
class Anomaly:
    """The single highest-priority rule violation found in a record."""

    category: str
    severity: Severity
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.category,
            "severity": self.severity.value,
            "message": self.message,
        }


@dataclass(frozen=True, slots=True)
class Sensors:
    temperature: float
    vibration: float
    rpm: float
    load: float
    pressure: float
    humidity: float
    # Synthetic proxy (load x 0.75), not a measured value.
    power: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "temperature": self.temperature,
            "vibration": self.vibration,
            "rpm": self.rpm,
            "load": self.load,
            "pressure": self.pressure,
            "humidity": self.humidity,
            "power": self.power,
        }


@dataclass(frozen=True, slots=True)
class Consumables:
    oil: float
    coolant: float
    hydraulic: float
    brake_fluid: float
    filter: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "oil": self.oil,
            "coolant": self.coolant,
            "hydraulic": self.hydraulic,
            "brake_fluid": self.brake_fluid,
            "filter": self.filter,
        }


@dataclass(frozen=True, slots=True)
class Spares:
    bearing_wear: float
    drive_belt_wear: float
    motor_health: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "bearing_wear": self.bearing_wear,
            "drive_belt_wear": self.drive_belt_wear,
            "motor_health": self.motor_health,
        }


@dataclass(frozen=True, slots=True)
class Kpi:
    efficiency: float
    usage_hours: float

    def to_dict(self) -> dict[str, Any]:
        return {"efficiency": self.efficiency, "usage_hours": self.usage_hours}


@dataclass(frozen=True, slots=True)
class TelemetrySnapshot:
    """Derived telemetry for one machine at one tick.

    Created fresh every tick and discarded after the broadcast; snapshots
    carry no identity across ticks.
    """

    machine_id: str
    timestamp: int  # epoch milliseconds
    status: MachineStatus
    sensors: Sensors
    consumables: Consumables
    spares: Spares
    kpi: Kpi
    anomaly: Anomaly | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize the snapshot to the wire dictionary layout."""
        return {
            "machineId": self.machine_id,
            "timestamp": self.timestamp,
            "status": self.status.value,
            "sensors": self.sensors.to_dict(),
            "consumables": self.consumables.to_dict(),
            "spares": self.spares.to_dict(),
            "kpi": self.kpi.to_dict(),
            "anomaly": self.anomaly.to_dict() if self.anomaly is not None else None,
        }
