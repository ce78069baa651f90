"""Loads per-machine reading histories from a directory of CSV feed files.

Every ``*.csv`` file in the feed directory holds the recorded history of one
machine.  The first row names the fields; blank rows are skipped and every
value is trimmed.  Loading is all-or-nothing: any malformed file aborts
startup with :class:`RecordStoreError` so that the streamer never serves a
partial fleet.
"""

from __future__ import annotations

import csv
import logging
from collections.abc import Mapping, Sequence
from pathlib import Path

from telemetry_streamer.models.reading import ReadingRecord

logger = logging.getLogger(__name__)

FEED_SUFFIX = ".csv"

RecordStore = Mapping[str, Sequence[ReadingRecord]]


class RecordStoreError(RuntimeError):
    """Raised when the feed directory cannot be loaded in full."""


def machine_id_from_path(path: Path) -> str:
    """Derive the machine identifier from a feed file name.

    ``Lathe_Machine_01.csv`` becomes ``Lathe Machine 01``.
    """
    return path.stem.replace("_", " ")


def _parse_feed(path: Path) -> tuple[ReadingRecord, ...]:
    """Parse one feed file into an ordered, non-empty record sequence."""
    try:
        with path.open(newline="", encoding="utf-8-sig") as fh:
            rows = [
                [cell.strip() for cell in row]
                for row in csv.reader(fh)
            ]
    except (OSError, UnicodeDecodeError, csv.Error) as exc:
        raise RecordStoreError(f"{path.name}: cannot read feed file ({exc})") from exc

    numbered = [
        (line_no, row)
        for line_no, row in enumerate(rows, start=1)
        if any(row)
    ]
    if not numbered:
        raise RecordStoreError(f"{path.name}: file has no header row")

    header_line, header = numbered[0]
    if any(not name for name in header):
        raise RecordStoreError(f"{path.name}:{header_line}: blank column name in header")
    duplicates = sorted({name for name in header if header.count(name) > 1})
    if duplicates:
        raise RecordStoreError(
            f"{path.name}:{header_line}: duplicate column names {duplicates}"
        )

    records: list[ReadingRecord] = []
    for line_no, row in numbered[1:]:
        if len(row) != len(header):
            raise RecordStoreError(
                f"{path.name}:{line_no}: expected {len(header)} fields, got {len(row)}"
            )
        records.append(ReadingRecord(dict(zip(header, row))))

    if not records:
        raise RecordStoreError(f"{path.name}: no data rows after header")
    return tuple(records)


def load(source_dir: str | Path) -> dict[str, tuple[ReadingRecord, ...]]:
    """Load every feed file in *source_dir*.

    Returns a mapping of machine id to its record sequence, ordered by file
    name.  The mapping's insertion order is the iteration order used for
    every broadcast batch.
    """
    directory = Path(source_dir)
    if not directory.is_dir():
        raise RecordStoreError(f"Feed directory not found: {directory}")

    try:
        feed_files = sorted(
            p for p in directory.iterdir()
            if p.is_file() and p.suffix.lower() == FEED_SUFFIX
        )
    except OSError as exc:
        raise RecordStoreError(f"Cannot list feed directory {directory}: {exc}") from exc

    if not feed_files:
        raise RecordStoreError(f"No {FEED_SUFFIX} feed files in {directory}")

    logger.info("Loading machine feeds from %s ...", directory.resolve())

    store: dict[str, tuple[ReadingRecord, ...]] = {}
    sources: dict[str, str] = {}
    for path in feed_files:
        machine_id = machine_id_from_path(path)
        if machine_id in store:
            raise RecordStoreError(
                f"{path.name}: machine id {machine_id!r} already loaded from {sources[machine_id]}"
            )
        store[machine_id] = _parse_feed(path)
        sources[machine_id] = path.name
        logger.info("Loaded %d rows for %s", len(store[machine_id]), machine_id)

    logger.info(
        "Total machines loaded: %d (%d rows)",
        len(store),
        sum(len(records) for records in store.values()),
    )
    return store
