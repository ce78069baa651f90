"""CLI entrypoint for the machine fleet telemetry streamer.

Loads recorded per-machine feed files, replays them one row per tick and
broadcasts derived telemetry snapshots to every connected WebSocket
consumer.

Usage::

    telemetry-streamer serve --data-dir machine_feed --port 8081 --interval 1
    telemetry-streamer generate-feed --output-dir machine_feed --machines 6
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
import sys

import click

from telemetry_streamer.config import ConfigError, StreamerConfig
from telemetry_streamer.engine.record_store import RecordStoreError, load
from telemetry_streamer.generators.feed_writer import FLEET_TEMPLATES, FeedWriter
from telemetry_streamer.server import run_server

logger = logging.getLogger(__name__)


def _overrides(config: StreamerConfig, **values: object) -> StreamerConfig:
    """Apply CLI values that were actually given on top of *config*."""
    given = {key: value for key, value in values.items() if value is not None}
    return dataclasses.replace(config, **given) if given else config


@click.group("telemetry-streamer")
def cli() -> None:
    """Machine fleet telemetry streamer."""


@cli.command("serve")
@click.option(
    "--data-dir",
    default=None,
    type=click.Path(file_okay=False),
    help="Directory of per-machine CSV feed files (overrides DATA_DIR env var).",
)
@click.option(
    "--host",
    default=None,
    help="Interface to bind (overrides STREAMER_HOST env var).",
)
@click.option(
    "--port",
    default=None,
    type=int,
    help="WebSocket port (overrides STREAMER_PORT env var).",
)
@click.option(
    "--interval",
    default=None,
    type=float,
    help="Seconds between ticks (overrides TICK_INTERVAL_SECONDS env var).",
)
@click.option(
    "--send-timeout",
    default=None,
    type=float,
    help="Per-consumer send timeout in seconds (overrides SEND_TIMEOUT_SECONDS env var).",
)
def serve(
    data_dir: str | None,
    host: str | None,
    port: int | None,
    interval: float | None,
    send_timeout: float | None,
) -> None:
    """Replay machine feeds and stream telemetry to WebSocket consumers."""
    # ── Configuration ───────────────────────────────────────────────────
    config = _overrides(
        StreamerConfig.from_env(),
        data_dir=data_dir,
        host=host,
        port=port,
        tick_interval_seconds=interval,
        send_timeout_seconds=send_timeout,
    )
    config.configure_logging()

    try:
        config.validate()
    except ConfigError as exc:
        logger.error("Invalid configuration: %s", exc)
        sys.exit(1)

    # ── Load record store (fail fast) ───────────────────────────────────
    try:
        store = load(config.data_dir)
    except RecordStoreError as exc:
        logger.error("Cannot start streamer: %s", exc)
        sys.exit(1)

    logger.info(
        "Initialized %d machines | interval=%.2fs | send_timeout=%.2fs",
        len(store),
        config.tick_interval_seconds,
        config.send_timeout_seconds,
    )

    try:
        asyncio.run(run_server(config, store))
    except KeyboardInterrupt:
        logger.info("KeyboardInterrupt received")
    except OSError as exc:
        logger.error("Cannot serve on %s:%d: %s", config.host, config.port, exc)
        sys.exit(1)


@cli.command("generate-feed")
@click.option(
    "--output-dir",
    required=True,
    type=click.Path(file_okay=False),
    help="Directory to write the machine feed CSV files into.",
)
@click.option(
    "--machines",
    default=len(FLEET_TEMPLATES),
    show_default=True,
    type=click.IntRange(min=1),
    help="Number of machines to generate.",
)
@click.option(
    "--rows",
    default=600,
    show_default=True,
    type=click.IntRange(min=1),
    help="Rows (ticks) per machine.",
)
@click.option(
    "--seed",
    default=None,
    type=int,
    help="Random seed for reproducible feeds.",
)
def generate_feed(output_dir: str, machines: int, rows: int, seed: int | None) -> None:
    """Write a synthetic fleet of machine feed files."""
    StreamerConfig.from_env().configure_logging()
    paths = FeedWriter(output_dir).generate_fleet(machines=machines, rows=rows, seed=seed)
    click.echo(f"Generated {len(paths)} machine feeds in {output_dir}")


if __name__ == "__main__":
    cli()
