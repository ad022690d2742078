"""
Retry and backoff policy shared by the RPC event source and the monitor.
"""

import random
from dataclasses import dataclass, field


@dataclass
class RetryConfig:
    """Configuration for automatic retry behavior."""

    max_retries: int = 3
    backoff_factor: float = 2.0
    retry_on: list[int] = field(default_factory=lambda: [429, 500, 502, 503, 504])
    respect_retry_after: bool = True
    max_backoff: float = 60.0  # Maximum backoff time in seconds
    jitter: float = 0.1  # Jitter factor (0.1 = ±10%)


def backoff_delay(
    config: RetryConfig,
    attempt: int,
    retry_after: str | None = None,
) -> float:
    """
    Calculate the wait before the next attempt.

    Uses exponential backoff with jitter, respecting a Retry-After value if
    present and allowed by the config.

    Args:
        config: Retry configuration
        attempt: Number of failures so far minus one (0-indexed)
        retry_after: Value of a Retry-After header (if present)

    Returns:
        Time to wait in seconds
    """
    if retry_after and config.respect_retry_after:
        try:
            return float(retry_after)
        except ValueError:
            pass  # Fall through to exponential backoff

    base_wait = config.backoff_factor ** attempt

    jitter_range = base_wait * config.jitter
    wait_time = base_wait + random.uniform(-jitter_range, jitter_range)

    return min(wait_time, config.max_backoff)
