"""Synthetic machine feed generators."""

from telemetry_streamer.generators.feed_writer import FLEET_TEMPLATES, FeedWriter

__all__ = [
    "FLEET_TEMPLATES",
    "FeedWriter",
]
