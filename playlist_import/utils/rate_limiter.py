"""
Rate limiter utility for outbound requests to platforms and catalog backends.
Token bucket with async support and an injectable clock.
"""

import asyncio
import time
from typing import Callable, Optional


class RateLimiter:
    """Token bucket rate limiter for API requests."""

    def __init__(self, requests_per_minute: int, burst_size: Optional[int] = None,
                 clock: Callable[[], float] = time.monotonic):
        """
        Initialize rate limiter.

        Args:
            requests_per_minute: Maximum requests allowed per minute; 0 or less disables limiting
            burst_size: Maximum burst size (defaults to requests_per_minute)
            clock: Monotonic time source in seconds
        """
        self.requests_per_minute = requests_per_minute
        self.burst_size = burst_size or max(requests_per_minute, 1)
        self.clock = clock
        self.tokens = float(self.burst_size)
        self.last_update = clock()
        self.lock = asyncio.Lock()

    @property
    def enabled(self) -> bool:
        return self.requests_per_minute > 0

    def _refill(self) -> None:
        now = self.clock()
        elapsed = now - self.last_update
        self.tokens = min(self.burst_size, self.tokens + elapsed * (self.requests_per_minute / 60.0))
        self.last_update = now

    async def acquire(self) -> None:
        """Acquire a token, waiting if necessary."""
        if not self.enabled:
            return

        async with self.lock:
            self._refill()

            if self.tokens >= 1:
                self.tokens -= 1
                return

            wait_time = (1 - self.tokens) * (60.0 / self.requests_per_minute)
            await asyncio.sleep(wait_time)
            self.tokens = 0.0
            self.last_update = self.clock()

    def available_tokens(self) -> float:
        """Get number of available tokens."""
        if not self.enabled:
            return float(self.burst_size)
        elapsed = self.clock() - self.last_update
        return min(self.burst_size, self.tokens + elapsed * (self.requests_per_minute / 60.0))
