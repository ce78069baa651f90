"""Unit tests for the click CLI."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from telemetry_streamer import main as main_mod
from telemetry_streamer.config import StreamerConfig
from telemetry_streamer.engine.record_store import load


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


class TestGenerateFeed:
    """Tests for the ``generate-feed`` command."""

    def test_writes_fleet(self, runner: CliRunner, tmp_path: Path) -> None:
        """Verify the command writes loadable feed files."""
        out = tmp_path / "feeds"
        result = runner.invoke(
            main_mod.cli,
            ["generate-feed", "--output-dir", str(out), "--machines", "3", "--rows", "5", "--seed", "4"],
        )
        assert result.exit_code == 0, result.output
        assert "Generated 3 machine feeds" in result.output
        assert len(load(out)) == 3

    def test_rejects_zero_rows(self, runner: CliRunner, tmp_path: Path) -> None:
        """Verify click range validation rejects zero rows."""
        result = runner.invoke(
            main_mod.cli, ["generate-feed", "--output-dir", str(tmp_path), "--rows", "0"]
        )
        assert result.exit_code != 0


class TestServe:
    """Tests for the ``serve`` command startup path."""

    def test_missing_feed_dir_exits(self, runner: CliRunner, tmp_path: Path) -> None:
        """Verify a missing feed directory aborts before serving."""
        result = runner.invoke(main_mod.cli, ["serve", "--data-dir", str(tmp_path / "absent")])
        assert result.exit_code == 1

    def test_invalid_timing_exits(self, runner: CliRunner, feed_dir: Path) -> None:
        """Verify a send timeout not shorter than the interval is rejected."""
        result = runner.invoke(
            main_mod.cli,
            ["serve", "--data-dir", str(feed_dir), "--interval", "1", "--send-timeout", "2"],
        )
        assert result.exit_code == 1

    def test_cli_overrides_reach_server(
        self,
        runner: CliRunner,
        feed_dir: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Verify CLI flags override env config and the loaded store is served."""
        captured: dict[str, object] = {}

        async def fake_run_server(config: StreamerConfig, store) -> None:
            captured["config"] = config
            captured["store"] = store

        monkeypatch.setattr(main_mod, "run_server", fake_run_server)
        monkeypatch.setenv("STREAMER_PORT", "9999")
        result = runner.invoke(
            main_mod.cli,
            ["serve", "--data-dir", str(feed_dir), "--port", "8123", "--interval", "2"],
        )

        assert result.exit_code == 0, result.output
        config = captured["config"]
        assert isinstance(config, StreamerConfig)
        assert config.port == 8123
        assert config.tick_interval_seconds == 2.0
        assert config.data_dir == str(feed_dir)
        assert list(captured["store"]) == ["CNC Mill 02", "Conveyor 03", "Lathe 01"]
