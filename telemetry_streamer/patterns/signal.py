"""Signal generation for synthetic machine feed rows.

Uses numpy for Gaussian noise, seasonal swings, degradation drift and
failure spikes on the live sensor columns, and simple deterministic trends
for consumables, wear parts and usage counters.  Each row index ``t`` stands
for one replay tick.  Values are clamped to each column's physical range so
generated feeds look like recorded ones.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from telemetry_streamer.models.reading import FEED_COLUMNS


@dataclass(frozen=True)
class SignalConfig:
    """Parameters that govern a column's normal operating signal."""

    setpoint: float
    noise_std: float
    seasonal_amplitude: float = 0.0
    seasonal_period_rows: float = 120.0
    low: float = 0.0
    high: float = 100.0


# ── Live sensor columns ────────────────────────────────────────────────
FEED_SIGNALS: dict[str, SignalConfig] = {
    "temperature": SignalConfig(
        setpoint=72.0, noise_std=3.0, seasonal_amplitude=6.0, low=15.0, high=140.0
    ),
    "vibration": SignalConfig(setpoint=2.8, noise_std=0.5, low=0.0, high=15.0),
    "rpm": SignalConfig(
        setpoint=1450.0, noise_std=25.0, seasonal_amplitude=40.0, low=0.0, high=3600.0
    ),
    "load": SignalConfig(
        setpoint=62.0, noise_std=5.0, seasonal_amplitude=10.0, seasonal_period_rows=60.0
    ),
    "pressure": SignalConfig(setpoint=6.2, noise_std=0.3, low=0.0, high=12.0),
    "humidity": SignalConfig(
        setpoint=45.0, noise_std=2.0, seasonal_amplitude=5.0, seasonal_period_rows=600.0
    ),
    "efficiency_pct": SignalConfig(setpoint=88.0, noise_std=2.0),
}

PROFILES: tuple[str, ...] = ("normal", "degradation", "failure")

# (start, units lost per row, refill floor) for depleting consumables.
_CONSUMABLE_TRENDS: dict[str, tuple[float, float, float]] = {
    "oil_pct": (98.0, 0.15, 20.0),
    "coolant_pct": (95.0, 0.10, 25.0),
    "hydraulic_oil_pct": (97.0, 0.08, 30.0),
    "brake_fluid_pct": (99.0, 0.05, 35.0),
}

_DEGRADATION_DRIFT: dict[str, float] = {"temperature": 0.12, "vibration": 0.02}
_WEAR_MULTIPLIER = {"normal": 1.0, "degradation": 3.0, "failure": 5.0}
_FAILURE_PROBABILITY = 0.08


# ── Signal generators ──────────────────────────────────────────────────


def generate_normal(config: SignalConfig, t: float, rng: np.random.Generator) -> float:
    """Gaussian noise over the seasonal curve of the setpoint."""
    return generate_seasonal(config, t) + float(rng.normal(0, config.noise_std))


def generate_degradation(
    config: SignalConfig,
    t: float,
    rng: np.random.Generator,
    drift_rate: float = 0.05,
) -> float:
    """Linear drift from the setpoint simulating equipment degradation."""
    return generate_normal(config, t, rng) + drift_rate * t


def generate_failure(
    config: SignalConfig,
    rng: np.random.Generator,
    spike_factor: float = 12.0,
) -> float:
    """Upward spike well outside the normal band -- simulates abrupt failure."""
    spike = spike_factor * config.noise_std * (1.0 + float(rng.random()))
    return config.setpoint + spike


def generate_seasonal(config: SignalConfig, t: float) -> float:
    """Pure sinusoidal variation without noise overlay."""
    return config.setpoint + _seasonal_component(config, t)


def _seasonal_component(config: SignalConfig, t: float) -> float:
    """Compute the sinusoidal seasonal offset."""
    if config.seasonal_amplitude == 0.0:
        return 0.0
    return config.seasonal_amplitude * math.sin(2.0 * math.pi * t / config.seasonal_period_rows)


def _clamp(config: SignalConfig, value: float) -> float:
    return max(config.low, min(config.high, value))


def _sawtooth(start: float, rate: float, floor: float, t: float) -> float:
    """Level that drains at *rate* per row and refills to *start* at *floor*."""
    span = start - floor
    return start - (rate * t) % span


# ── Dispatcher ─────────────────────────────────────────────────────────


def generate_row(
    rng: np.random.Generator,
    t: int,
    profile: str = "normal",
    usage_hours_start: float = 1200.0,
) -> dict[str, float]:
    """Generate one full feed row for replay tick *t*.

    ``profile`` selects the machine's behaviour: ``normal`` stays inside the
    operating band, ``degradation`` drifts hotter and wears faster, and
    ``failure`` additionally spikes temperature and vibration at random and
    lets consumables run dry.  Keys follow :data:`FEED_COLUMNS` order.
    """
    if profile not in PROFILES:
        raise ValueError(f"Unknown profile {profile!r} (valid: {list(PROFILES)})")

    wear = _WEAR_MULTIPLIER[profile]
    row: dict[str, float] = {}

    for column, config in FEED_SIGNALS.items():
        match profile:
            case "degradation" if column in _DEGRADATION_DRIFT:
                value = generate_degradation(config, t, rng, _DEGRADATION_DRIFT[column])
            case "failure" if column in _DEGRADATION_DRIFT and rng.random() < _FAILURE_PROBABILITY:
                value = generate_failure(config, rng)
            case _:
                value = generate_normal(config, t, rng)
        row[column] = _clamp(config, value)

    # Efficiency follows wear: a degrading machine loses output.
    row["efficiency_pct"] = _clamp(
        FEED_SIGNALS["efficiency_pct"], row["efficiency_pct"] - 0.01 * (wear - 1.0) * t
    )

    for column, (start, rate, floor) in _CONSUMABLE_TRENDS.items():
        if profile == "failure":
            floor = 2.0
        row[column] = round(_sawtooth(start, rate * wear, floor, t), 2)

    row["filter_clog_pct"] = min(95.0, (0.05 * wear * t) % 90.0 + 5.0)
    row["bearing_wear"] = min(100.0, 8.0 + 0.02 * wear * t)
    row["drive_belt_wear"] = min(100.0, 12.0 + 0.015 * wear * t)
    row["motor_health_pct"] = max(0.0, 97.0 - 0.03 * wear * t)
    row["usage_hours"] = usage_hours_start + t / 60.0

    return {column: row[column] for column in FEED_COLUMNS}
