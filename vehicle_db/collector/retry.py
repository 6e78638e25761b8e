"""Reusable retry policy with exponential backoff and jitter."""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass, field
from typing import Callable, TypeVar

from ..common.errors import NetworkError, RetryExhausted

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class RetryPolicy:
    """Retry ``NetworkError`` failures with ``2**attempt * base + jitter`` waits.

    ``attempt`` counts from zero, so with the defaults the waits are roughly
    1s and 2s between three attempts. Errors flagged ``retriable=False`` and
    anything that is not a ``NetworkError`` propagate immediately.
    """

    max_attempts: int = 3
    base_delay: float = 1.0
    max_jitter: float = 0.25
    sleep: Callable[[float], None] = time.sleep
    rng: random.Random = field(default_factory=random.Random)

    def delay(self, attempt: int) -> float:
        jitter = self.rng.uniform(0, self.max_jitter) if self.max_jitter > 0 else 0.0
        return (2 ** attempt) * self.base_delay + jitter

    def execute(self, fn: Callable[[], T], *, description: str = "") -> T:
        """Call ``fn`` until it succeeds or the attempt budget runs out.

        Raises:
            RetryExhausted: After ``max_attempts`` retriable failures.
            NetworkError: Non-retriable network failure.
        """
        attempts = max(self.max_attempts, 1)
        last_exc: NetworkError | None = None

        for attempt in range(attempts):
            try:
                return fn()
            except NetworkError as exc:
                if not exc.retriable:
                    logger.warning("Request failed (no retry): %s", exc)
                    raise
                last_exc = exc

                if attempt == attempts - 1:
                    break

                wait_time = self.delay(attempt)
                logger.warning(
                    "Request failed (attempt %d/%d): %s, retrying in %.2fs",
                    attempt + 1,
                    attempts,
                    exc,
                    wait_time,
                )
                self.sleep(wait_time)

        raise RetryExhausted(description, attempts, last_exc)
