"""Immutable reading record loaded from a machine feed file."""

from __future__ import annotations

import math
import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

# Header order of a machine feed file.
FEED_COLUMNS: tuple[str, ...] = (
    "temperature",
    "vibration",
    "rpm",
    "load",
    "pressure",
    "humidity",
    "oil_pct",
    "coolant_pct",
    "hydraulic_oil_pct",
    "brake_fluid_pct",
    "filter_clog_pct",
    "bearing_wear",
    "drive_belt_wear",
    "motor_health_pct",
    "efficiency_pct",
    "usage_hours",
)

# Plain decimal with optional exponent; no underscores, hex or inf/nan words.
_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


def parse_number(text: str | None) -> float | None:
    """Parse a feed value into a float.

    Returns ``None`` when the value is absent, blank, not a plain decimal
    number, or too large to represent.  Callers decide how to represent
    the missing value; the snapshot builder turns it into NaN.
    """
    if text is None:
        return None
    text = text.strip()
    if not text:
        return None
    if not _NUMBER.fullmatch(text):
        return None
    value = float(text)
    return value if math.isfinite(value) else None


@dataclass(frozen=True)
class ReadingRecord(Mapping[str, str]):
    """One row of recorded data for a machine.

    Values are kept as the trimmed source text.  Numeric interpretation is
    deferred to :meth:`number`, which never raises.
    """

    fields: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def __getitem__(self, key: str) -> str:
        return self.fields[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def number(self, name: str) -> float:
        """Numeric value of *name*, NaN when missing or non-numeric."""
        value = parse_number(self.fields.get(name))
        return math.nan if value is None else value
