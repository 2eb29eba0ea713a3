"""Reconnect backoff policy for the telemetry channel."""

from __future__ import annotations

MAX_RECONNECT_ATTEMPTS = 5
BASE_DELAY_MS = 1000
MAX_DELAY_MS = 30_000


def backoff_delay(
    attempt: int,
    base_ms: int = BASE_DELAY_MS,
    max_ms: int = MAX_DELAY_MS,
) -> int:
    """Return the delay in milliseconds before reconnect attempt ``attempt``.

    The attempt counter is incremented before the delay is computed, so the
    first reconnect uses attempt 1: 2000, 4000, 8000, 16000, 30000 (capped).

    Args:
        attempt: 1-based reconnect attempt number.
        base_ms: Base delay in milliseconds.
        max_ms: Upper bound on the delay in milliseconds.

    Returns:
        ``min(base_ms * 2**attempt, max_ms)``.
    """
    if attempt < 0:
        raise ValueError(f"attempt must be >= 0, got {attempt}")
    return min(base_ms * 2**attempt, max_ms)


def backoff_schedule(
    max_attempts: int = MAX_RECONNECT_ATTEMPTS,
    base_ms: int = BASE_DELAY_MS,
    max_ms: int = MAX_DELAY_MS,
) -> list[int]:
    """Return every delay the channel waits before giving up."""
    return [backoff_delay(n, base_ms, max_ms) for n in range(1, max_attempts + 1)]
