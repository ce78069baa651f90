"""Signal pattern generation for synthetic machine feeds."""

from telemetry_streamer.patterns.signal import (
    FEED_SIGNALS,
    PROFILES,
    SignalConfig,
    generate_degradation,
    generate_failure,
    generate_normal,
    generate_row,
    generate_seasonal,
)

__all__ = [
    "FEED_SIGNALS",
    "PROFILES",
    "SignalConfig",
    "generate_degradation",
    "generate_failure",
    "generate_normal",
    "generate_row",
    "generate_seasonal",
]
