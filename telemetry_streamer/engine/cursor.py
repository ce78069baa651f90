"""Per-machine cyclic replay positions."""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence

from telemetry_streamer.models.reading import ReadingRecord


class CursorTable:
    """One replay cursor per machine, advanced once per tick.

    Cursors start at 0 and wrap back to 0 after the last record, so
    ``0 <= cursor < len(sequence)`` always holds.  Iteration yields machine
    ids in the store's insertion order.
    """

    def __init__(self, store: Mapping[str, Sequence[ReadingRecord]]) -> None:
        empty = [machine_id for machine_id, records in store.items() if not records]
        if empty:
            raise ValueError(f"Machines with empty record sequences: {empty}")
        self._lengths: dict[str, int] = {
            machine_id: len(records) for machine_id, records in store.items()
        }
        self._cursors: dict[str, int] = dict.fromkeys(self._lengths, 0)

    def __iter__(self) -> Iterator[str]:
        return iter(self._cursors)

    def __len__(self) -> int:
        return len(self._cursors)

    def position(self, machine_id: str) -> int:
        """Index the next :meth:`advance` call will return."""
        return self._cursors[machine_id]

    def advance(self, machine_id: str) -> int:
        """Return the index to replay this tick and move the cursor on."""
        current = self._cursors[machine_id]
        self._cursors[machine_id] = (current + 1) % self._lengths[machine_id]
        return current
