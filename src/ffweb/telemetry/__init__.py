"""Live task telemetry over WebSocket.

Usage:
    from ffweb.telemetry import connect, progress_url

    channel = connect(progress_url(origin), store.apply)
"""

from .backoff import (
    BASE_DELAY_MS,
    MAX_DELAY_MS,
    MAX_RECONNECT_ATTEMPTS,
    backoff_delay,
    backoff_schedule,
)
from .channel import PROGRESS_PATH, TelemetryChannel, connect, progress_url

__all__ = [
    # Channel
    "TelemetryChannel",
    "connect",
    "progress_url",
    "PROGRESS_PATH",
    # Backoff
    "backoff_delay",
    "backoff_schedule",
    "BASE_DELAY_MS",
    "MAX_DELAY_MS",
    "MAX_RECONNECT_ATTEMPTS",
]
