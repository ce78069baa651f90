"""Machine fleet telemetry streamer.

Replays recorded per-machine sensor readings and broadcasts derived
telemetry snapshots to every connected WebSocket consumer once per tick.
"""

__version__ = "1.0.0"
