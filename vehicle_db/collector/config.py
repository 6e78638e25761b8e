"""Configuration management for the live collectors."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
_PROJECT_ROOT = Path(__file__).resolve().parents[2]
load_dotenv(_PROJECT_ROOT / ".env")

PRICE_MODES = ("live", "synthetic")


@dataclass
class Config:
    """Central configuration loaded from environment variables."""

    # Upstream pricing API
    api_base_url: str = "https://parallelum.com.br/fipe/api/v1"

    # HTTP
    request_timeout: float = 30.0
    max_retries: int = 3
    backoff_base_seconds: float = 1.0
    backoff_max_jitter_seconds: float = 0.25
    max_redirects: int = 5
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    )
    rotate_user_agent: bool = True

    # Fixed gap between consecutive requests
    rate_limit_delay_seconds: float = 0.1

    # Traversal
    price_mode: str = "live"
    max_brands: int | None = None
    max_models: int | None = None

    live_enabled: bool = field(
        default_factory=lambda: os.getenv("FIPE_OFFLINE", "").lower() not in ("1", "true", "yes")
    )

    def __post_init__(self) -> None:
        """Load overrides from environment."""
        if url := os.getenv("FIPE_API_BASE"):
            self.api_base_url = url
        if timeout := os.getenv("REQUEST_TIMEOUT"):
            self.request_timeout = float(timeout)
        if retries := os.getenv("MAX_RETRIES"):
            self.max_retries = int(retries)
        if delay_ms := os.getenv("RATE_LIMIT_DELAY_MS"):
            self.rate_limit_delay_seconds = int(delay_ms) / 1000
        if mode := os.getenv("FIPE_PRICE_MODE"):
            self.price_mode = mode
        if brands := os.getenv("FIPE_MAX_BRANDS"):
            self.max_brands = int(brands)
        if models := os.getenv("FIPE_MAX_MODELS"):
            self.max_models = int(models)

        self.api_base_url = self.api_base_url.rstrip("/")
        if self.price_mode not in PRICE_MODES:
            raise ValueError(
                f"price_mode must be one of {PRICE_MODES}, got {self.price_mode!r}"
            )
