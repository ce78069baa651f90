"""Centralized configuration loaded from environment variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass


class ConfigError(ValueError):
    """Raised when a configuration combination cannot be served."""


@dataclass(frozen=True)
class StreamerConfig:
    """Configuration for the telemetry streamer.

    All values are loaded from environment variables with sensible defaults
    for local development. CLI flags take precedence over both.
    """

    data_dir: str = "machine_feed"
    host: str = "0.0.0.0"
    port: int = 8081
    tick_interval_seconds: float = 1.0
    send_timeout_seconds: float = 0.5
    stats_interval_seconds: float = 30.0
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> StreamerConfig:
        """Build configuration from environment variables."""
        return cls(
            data_dir=os.environ.get("DATA_DIR", "machine_feed"),
            host=os.environ.get("STREAMER_HOST", "0.0.0.0"),
            port=int(os.environ.get("STREAMER_PORT", "8081")),
            tick_interval_seconds=float(os.environ.get("TICK_INTERVAL_SECONDS", "1.0")),
            send_timeout_seconds=float(os.environ.get("SEND_TIMEOUT_SECONDS", "0.5")),
            stats_interval_seconds=float(os.environ.get("STATS_INTERVAL_SECONDS", "30.0")),
            log_level=os.environ.get("LOG_LEVEL", "INFO"),
        )

    def validate(self) -> None:
        if self.tick_interval_seconds <= 0:
            raise ConfigError(
                f"tick interval must be positive, got {self.tick_interval_seconds}"
            )
        if self.send_timeout_seconds <= 0:
            raise ConfigError(
                f"send timeout must be positive, got {self.send_timeout_seconds}"
            )
        if self.send_timeout_seconds >= self.tick_interval_seconds:
            raise ConfigError(
                f"send timeout ({self.send_timeout_seconds}s) must be shorter than "
                f"the tick interval ({self.tick_interval_seconds}s)"
            )

    def configure_logging(self) -> None:
        """Set up structured logging based on configured level."""
        logging.basicConfig(
            level=getattr(logging, self.log_level.upper(), logging.INFO),
            format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
