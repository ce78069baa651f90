"""JSON encoding of the consumer-facing ``init`` and ``update`` messages.

Frames are strict JSON: NaN and infinite values are written as ``null``,
the same way a browser serialises them, so consumers can parse every frame
with a standard JSON parser.
"""

from __future__ import annotations

import json
import math
from collections.abc import Iterable
from typing import Any

from telemetry_streamer.models.snapshot import MachineStatus, TelemetrySnapshot

INIT = "init"
UPDATE = "update"


def _finite_or_null(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {key: _finite_or_null(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_finite_or_null(item) for item in value]
    return value


def _dumps(message: dict[str, Any]) -> str:
    return json.dumps(_finite_or_null(message), ensure_ascii=False, allow_nan=False)


def encode_init(machine_ids: Iterable[str]) -> str:
    """Roster sent once to every new consumer; all machines start OFFLINE."""
    return _dumps(
        {
            "type": INIT,
            "machines": [
                {"machineId": machine_id, "status": MachineStatus.OFFLINE.value}
                for machine_id in machine_ids
            ],
        }
    )


def encode_update(snapshots: Iterable[TelemetrySnapshot]) -> str:
    """One tick's batch of snapshots."""
    return _dumps({"type": UPDATE, "data": [s.to_dict() for s in snapshots]})
