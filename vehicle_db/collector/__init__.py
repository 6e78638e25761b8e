"""Live collection - HTTP client, retry policy, FIPE API and HTML sources."""

from .config import Config
from .fipe_collector import FipeCollector, parse_brl, parse_year
from .html_source import AuxiliarySource, HtmlTableSource, NullSource, raw_to_records
from .http_client import HTTPClient
from .rate_limiter import RateLimiter
from .retry import RetryPolicy

__all__ = [
    "AuxiliarySource",
    "Config",
    "FipeCollector",
    "HTTPClient",
    "HtmlTableSource",
    "NullSource",
    "RateLimiter",
    "RetryPolicy",
    "parse_brl",
    "parse_year",
    "raw_to_records",
]
