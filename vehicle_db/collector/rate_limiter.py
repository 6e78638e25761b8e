"""Fixed-interval rate limiter for polite API traversal."""

from __future__ import annotations

import threading
import time
from typing import Callable


class RateLimiter:
    """Thread-safe limiter enforcing a minimum gap between requests.

    Args:
        min_interval_seconds: Minimum time between two ``wait()`` returns.
        sleep: Sleep function, injectable for tests.
    """

    def __init__(
        self,
        min_interval_seconds: float = 0.1,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._interval = max(min_interval_seconds, 0.0)
        self._last_request_time: float | None = None
        self._sleep = sleep
        self._lock = threading.Lock()

    def wait(self) -> None:
        """Block until the next request is allowed."""
        with self._lock:
            now = time.monotonic()
            if self._last_request_time is not None:
                elapsed = now - self._last_request_time
                if elapsed < self._interval:
                    self._sleep(self._interval - elapsed)
            self._last_request_time = time.monotonic()
