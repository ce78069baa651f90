"""Unit tests for init/update message encoding."""

from __future__ import annotations

import json

from telemetry_streamer.engine import builder
from telemetry_streamer.engine.wire import encode_init, encode_update


class TestEncodeInit:
    """Tests for the init roster frame."""

    def test_roster(self) -> None:
        """Verify every machine is listed, in order, with status OFFLINE."""
        message = json.loads(encode_init(["Lathe 01", "Press 02"]))
        assert message == {
            "type": "init",
            "machines": [
                {"machineId": "Lathe 01", "status": "OFFLINE"},
                {"machineId": "Press 02", "status": "OFFLINE"},
            ],
        }

    def test_empty_roster(self) -> None:
        """Verify an empty roster still encodes as a list."""
        assert json.loads(encode_init([])) == {"type": "init", "machines": []}


class TestEncodeUpdate:
    """Tests for the per-tick update frame."""

    def test_update_frame(self, make_record) -> None:
        """Verify snapshots are wrapped in an update frame in batch order."""
        batch = [
            builder.snapshot("A", make_record(), 10),
            builder.snapshot("B", make_record(oil_pct="5"), 10),
        ]
        message = json.loads(encode_update(batch))
        assert message["type"] == "update"
        assert [snap["machineId"] for snap in message["data"]] == ["A", "B"]
        assert message["data"][0]["anomaly"] is None
        assert message["data"][1]["anomaly"]["type"] == "Low Oil"
        assert message["data"][1]["anomaly"]["severity"] == "WARNING"

    def test_nan_encodes_as_null(self, make_record) -> None:
        """Verify missing readings become JSON null, never a bare NaN token."""
        frame = encode_update([builder.snapshot("A", make_record(load="", rpm="x"), 10)])
        assert "NaN" not in frame
        snap = json.loads(frame)["data"][0]
        assert snap["sensors"]["load"] is None
        assert snap["sensors"]["power"] is None
        assert snap["sensors"]["rpm"] is None
        assert snap["sensors"]["temperature"] == 72.5

    def test_infinity_encodes_as_null(self, make_record) -> None:
        """Verify infinity spellings are not readings and go out as null."""
        frame = encode_update([builder.snapshot("A", make_record(humidity="inf"), 10)])
        assert json.loads(frame)["data"][0]["sensors"]["humidity"] is None

    def test_degree_sign_is_preserved(self, make_record) -> None:
        """Verify anomaly messages keep their unit symbols."""
        frame = encode_update([builder.snapshot("A", make_record(temperature="106"), 10)])
        assert json.loads(frame)["data"][0]["anomaly"]["message"] == "High Temp: 106.0°C"
