"""Unit tests for StreamerConfig environment loading and validation."""

from __future__ import annotations

import pytest

from telemetry_streamer.config import ConfigError, StreamerConfig


class TestStreamerConfig:
    """Tests for defaults, env overrides and validation."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Verify defaults match local development settings."""
        for name in (
            "DATA_DIR",
            "STREAMER_HOST",
            "STREAMER_PORT",
            "TICK_INTERVAL_SECONDS",
            "SEND_TIMEOUT_SECONDS",
            "STATS_INTERVAL_SECONDS",
            "LOG_LEVEL",
        ):
            monkeypatch.delenv(name, raising=False)
        config = StreamerConfig.from_env()
        assert config == StreamerConfig()
        assert config.port == 8081
        assert config.tick_interval_seconds == 1.0
        assert config.data_dir == "machine_feed"

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Verify environment variables override every default."""
        monkeypatch.setenv("DATA_DIR", "/srv/feeds")
        monkeypatch.setenv("STREAMER_HOST", "127.0.0.1")
        monkeypatch.setenv("STREAMER_PORT", "9000")
        monkeypatch.setenv("TICK_INTERVAL_SECONDS", "2.5")
        monkeypatch.setenv("SEND_TIMEOUT_SECONDS", "1")
        monkeypatch.setenv("STATS_INTERVAL_SECONDS", "10")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        config = StreamerConfig.from_env()
        assert config.data_dir == "/srv/feeds"
        assert config.host == "127.0.0.1"
        assert config.port == 9000
        assert config.tick_interval_seconds == 2.5
        assert config.send_timeout_seconds == 1.0
        assert config.stats_interval_seconds == 10.0
        assert config.log_level == "DEBUG"

    def test_invalid_env_number(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Verify a non-numeric port fails fast."""
        monkeypatch.setenv("STREAMER_PORT", "eighty")
        with pytest.raises(ValueError):
            StreamerConfig.from_env()

    def test_validate_accepts_defaults(self) -> None:
        """Verify the default configuration is valid."""
        StreamerConfig().validate()

    @pytest.mark.parametrize(
        ("interval", "timeout", "match"),
        [
            (0.0, 0.5, "tick interval"),
            (1.0, 0.0, "send timeout must be positive"),
            (1.0, 1.0, "shorter than"),
        ],
    )
    def test_validate_rejects(self, interval: float, timeout: float, match: str) -> None:
        """Verify unusable interval/timeout combinations are rejected."""
        config = StreamerConfig(tick_interval_seconds=interval, send_timeout_seconds=timeout)
        with pytest.raises(ConfigError, match=match):
            config.validate()

    def test_config_is_frozen(self) -> None:
        """Verify configuration cannot be mutated after creation."""
        with pytest.raises(AttributeError):
            StreamerConfig().port = 1  # type: ignore[misc]
