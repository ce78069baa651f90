"""Derives telemetry snapshots from recorded readings.

Pure functions with fixed thresholds.  Missing or non-numeric source values
become NaN, and every comparison against NaN is false, so a bad field can
never raise or trigger a rule on its own.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Context, Decimal

from telemetry_streamer.models.reading import ReadingRecord
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

# ── Thresholds ──────────────────────────────────────────────────────────

CRITICAL_TEMPERATURE = 100.0
CRITICAL_VIBRATION = 8.0
WARNING_TEMPERATURE = 90.0
WARNING_VIBRATION = 5.0

OVERHEAT_TEMPERATURE = 105.0
EXCESSIVE_VIBRATION = 9.0
LOW_OIL_PCT = 10.0
LOW_MOTOR_HEALTH_PCT = 40.0

POWER_PER_LOAD = 0.75

# Wide enough to quantize any finite float to one decimal place.
_MESSAGE_CONTEXT = Context(prec=400, rounding=ROUND_HALF_UP)
_TENTH = Decimal("0.1")


def _integer(value: float) -> float:
    """Truncate toward zero, leaving NaN and infinities untouched."""
    if math.isfinite(value):
        return int(value)
    return value


def _one_decimal(value: float) -> str:
    """Format to one decimal place, rounding exact halves away from zero."""
    return str(Decimal(value).quantize(_TENTH, context=_MESSAGE_CONTEXT))


# ── Classification ──────────────────────────────────────────────────────


def status(record: ReadingRecord) -> MachineStatus:
    """Classify a record by temperature and vibration, critical first."""
    temperature = record.number("temperature")
    vibration = record.number("vibration")

    if temperature > CRITICAL_TEMPERATURE or vibration > CRITICAL_VIBRATION:
        return MachineStatus.CRITICAL
    if temperature > WARNING_TEMPERATURE or vibration > WARNING_VIBRATION:
        return MachineStatus.WARNING
    return MachineStatus.OPERATIONAL


def anomaly(record: ReadingRecord) -> Anomaly | None:
    """Return the first matching anomaly rule, or ``None``."""
    temperature = record.number("temperature")
    vibration = record.number("vibration")

    if temperature > OVERHEAT_TEMPERATURE:
        return Anomaly(
            "Overheating", Severity.CRITICAL, f"High Temp: {_one_decimal(temperature)}°C"
        )
    if vibration > EXCESSIVE_VIBRATION:
        return Anomaly(
            "Vibration", Severity.CRITICAL, f"High Vibration: {_one_decimal(vibration)}mm/s"
        )
    if record.number("oil_pct") < LOW_OIL_PCT:
        return Anomaly("Low Oil", Severity.WARNING, "Oil level critical")
    if record.number("motor_health_pct") < LOW_MOTOR_HEALTH_PCT:
        return Anomaly("Motor Wear", Severity.WARNING, "Motor health low")
    return None


# ── Assembly ────────────────────────────────────────────────────────────


def snapshot(machine_id: str, record: ReadingRecord, timestamp: int) -> TelemetrySnapshot:
    """Assemble the full telemetry snapshot for one machine at one tick."""
    load = record.number("load")
    return TelemetrySnapshot(
        machine_id=machine_id,
        timestamp=timestamp,
        status=status(record),
        sensors=Sensors(
            temperature=record.number("temperature"),
            vibration=record.number("vibration"),
            rpm=_integer(record.number("rpm")),
            load=load,
            pressure=record.number("pressure"),
            humidity=record.number("humidity"),
            power=load * POWER_PER_LOAD,
        ),
        consumables=Consumables(
            oil=record.number("oil_pct"),
            coolant=record.number("coolant_pct"),
            hydraulic=record.number("hydraulic_oil_pct"),
            brake_fluid=record.number("brake_fluid_pct"),
            filter=record.number("filter_clog_pct"),
        ),
        spares=Spares(
            bearing_wear=record.number("bearing_wear"),
            drive_belt_wear=record.number("drive_belt_wear"),
            motor_health=record.number("motor_health_pct"),
        ),
        kpi=Kpi(
            efficiency=record.number("efficiency_pct"),
            usage_hours=record.number("usage_hours"),
        ),
        anomaly=anomaly(record),
    )
