"""HTTP client with rate limiting, retry, manual redirect following and JSON parsing."""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Callable
from urllib.parse import urljoin

import requests
from fake_useragent import UserAgent

from ..common.errors import NetworkError, ParseError
from .config import Config
from .rate_limiter import RateLimiter
from .retry import RetryPolicy

logger = logging.getLogger(__name__)

# Client errors worth another try; every other 4xx is permanent
_RETRIABLE_CLIENT_STATUSES = {408, 429}
_CHUNK_SIZE = 8192


class HTTPClient:
    """HTTP client wrapping requests for the pricing API and HTML pages.

    Features:
    - Fixed-gap rate limiting before every request
    - Exponential backoff with jitter through a shared ``RetryPolicy``
    - Redirects followed by hand inside one attempt (capped hop count)
    - A wall-clock deadline per attempt, covering redirects and the body read
    - Random User-Agent rotation
    """

    def __init__(
        self,
        config: Config | None = None,
        *,
        session: requests.Session | None = None,
        retry_policy: RetryPolicy | None = None,
        rate_limiter: RateLimiter | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config or Config()
        self._session = session or requests.Session()
        self._rate_limiter = rate_limiter or RateLimiter(self.config.rate_limit_delay_seconds)
        self.retry_policy = retry_policy or RetryPolicy(
            max_attempts=self.config.max_retries,
            base_delay=self.config.backoff_base_seconds,
            max_jitter=self.config.backoff_max_jitter_seconds,
        )
        self._clock = clock
        self._ua = UserAgent(fallback=self.config.user_agent)

    def fetch_json(self, url: str) -> Any:
        """GET ``url`` and parse the body as JSON.

        Raises:
            NetworkError: Timeout, connection failure or non-2xx status
                after the retry budget is spent.
            ParseError: The body is not valid JSON (not retried).
        """
        body = self.retry_policy.execute(
            lambda: self._request(url, accept="application/json"),
            description=url,
        )
        try:
            return json.loads(body)
        except (json.JSONDecodeError, TypeError) as exc:
            raise ParseError(f"Malformed JSON from {url}: {exc}", url) from exc

    def fetch_text(self, url: str) -> str:
        """GET ``url`` and return the decoded body (HTML pages)."""
        return self.retry_policy.execute(
            lambda: self._request(url, accept="text/html,application/xhtml+xml"),
            description=url,
        )

    def _request(self, url: str, accept: str) -> str:
        """Issue one logical attempt, following up to ``max_redirects`` hops.

        The whole attempt, including every hop and the body download, must
        finish within ``request_timeout`` seconds of wall-clock time.
        """
        headers = {"User-Agent": self._user_agent(), "Accept": accept}
        deadline = self._clock() + self.config.request_timeout
        current = url

        for _ in range(self.config.max_redirects + 1):
            self._rate_limiter.wait()
            try:
                resp = self._session.get(
                    current,
                    headers=headers,
                    timeout=self._remaining(deadline, current),
                    allow_redirects=False,
                    stream=True,
                )
            except requests.Timeout as exc:
                raise NetworkError(f"Timeout for {current}", current) from exc
            except requests.RequestException as exc:
                raise NetworkError(f"Request to {current} failed: {exc}", current) from exc

            status = resp.status_code
            location = resp.headers.get("Location")
            if 300 <= status < 400 and location:
                resp.close()
                current = urljoin(current, location)
                logger.debug("Redirect %d -> %s", status, current)
                continue

            if not 200 <= status < 300:
                resp.close()
                retriable = status >= 500 or status in _RETRIABLE_CLIENT_STATUSES
                raise NetworkError(f"HTTP {status} for {current}", current, retriable=retriable)

            return self._read_body(resp, current, deadline)

        raise NetworkError(
            f"Too many redirects (>{self.config.max_redirects}) for {url}", url
        )

    def _read_body(self, resp: requests.Response, url: str, deadline: float) -> str:
        """Download the body chunk by chunk, aborting once the deadline passes."""
        chunks: list[bytes] = []
        try:
            for chunk in resp.iter_content(chunk_size=_CHUNK_SIZE):
                chunks.append(chunk)
                self._remaining(deadline, url)
        except requests.Timeout as exc:
            raise NetworkError(f"Timeout for {url}", url) from exc
        except requests.RequestException as exc:
            raise NetworkError(f"Reading {url} failed: {exc}", url) from exc
        finally:
            resp.close()
        return b"".join(chunks).decode(resp.encoding or "utf-8", errors="replace")

    def _remaining(self, deadline: float, url: str) -> float:
        """Seconds left before ``deadline``; raises once it has passed."""
        left = deadline - self._clock()
        if left <= 0:
            raise NetworkError(
                f"Timeout for {url}: exceeded {self.config.request_timeout}s", url
            )
        return left

    def _user_agent(self) -> str:
        if not self.config.rotate_user_agent:
            return self.config.user_agent
        return self._ua.random

    def close(self) -> None:
        """Close the underlying session."""
        self._session.close()

    def __enter__(self) -> HTTPClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
