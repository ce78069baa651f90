"""CSV writer for synthetic machine feed files.

Produces one file per machine in the same layout the record store loads,
so a demo fleet can be streamed when no recorded data is at hand.
"""

from __future__ import annotations

import csv
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path

import numpy as np

from telemetry_streamer.models.reading import FEED_COLUMNS
from telemetry_streamer.patterns.signal import generate_row

logger = logging.getLogger(__name__)

# (file name prefix, behaviour profile)
FLEET_TEMPLATES: list[tuple[str, str]] = [
    ("CNC_Mill", "normal"),
    ("Lathe", "normal"),
    ("Hydraulic_Press", "degradation"),
    ("Conveyor", "normal"),
    ("Robotic_Arm", "failure"),
    ("Air_Compressor", "degradation"),
]


def _format(column: str, value: float) -> str:
    if column == "rpm":
        return str(int(round(value)))
    return f"{value:.2f}"


class FeedWriter:
    """Writes machine feed CSV files on disk."""

    def __init__(self, output_dir: str | Path) -> None:
        self._output_dir = Path(output_dir)
        self._output_dir.mkdir(parents=True, exist_ok=True)
        logger.info("Feed output directory: %s", self._output_dir.resolve())

    def write_machine(self, filename: str, rows: Iterable[Mapping[str, float]]) -> Path:
        """Write one machine's rows to *filename* with the feed header.

        Returns the absolute path of the created file.
        """
        filepath = self._output_dir / filename
        count = 0
        with filepath.open("w", newline="", encoding="utf-8") as fh:
            writer = csv.DictWriter(fh, fieldnames=list(FEED_COLUMNS))
            writer.writeheader()
            for row in rows:
                writer.writerow({column: _format(column, row[column]) for column in FEED_COLUMNS})
                count += 1

        logger.info("Wrote %d rows to %s", count, filepath)
        return filepath.resolve()

    def generate_fleet(
        self,
        machines: int = len(FLEET_TEMPLATES),
        rows: int = 600,
        seed: int | None = None,
    ) -> list[Path]:
        """Generate *machines* feed files of *rows* rows each.

        Machine types and behaviour profiles cycle through
        :data:`FLEET_TEMPLATES`; files are named ``<Type>_<NN>.csv``.
        """
        if machines < 1:
            raise ValueError(f"machines must be at least 1, got {machines}")
        if rows < 1:
            raise ValueError(f"rows must be at least 1, got {rows}")

        rng = np.random.default_rng(seed)
        paths: list[Path] = []
        for index in range(machines):
            prefix, profile = FLEET_TEMPLATES[index % len(FLEET_TEMPLATES)]
            usage_start = float(rng.uniform(500.0, 8000.0))
            feed = [generate_row(rng, t, profile, usage_start) for t in range(rows)]
            paths.append(self.write_machine(f"{prefix}_{index + 1:02d}.csv", feed))
        return paths
