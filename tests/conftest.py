"""Shared test fixtures for the vehicle dataset builder."""

import json
import sys
import time
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Ensure the package is importable without installation
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import requests

from vehicle_db.collector.config import Config
from vehicle_db.collector.http_client import HTTPClient
from vehicle_db.collector.rate_limiter import RateLimiter
from vehicle_db.collector.retry import RetryPolicy

API = "https://fipe.test/api/v1"


class FakeResponse:
    """Minimal stand-in for requests.Response.

    ``on_chunk`` is called before each body chunk is handed out, which lets
    a test simulate a server that drips bytes slowly.
    """

    def __init__(self, status_code=200, text="", headers=None, chunk_size=None, on_chunk=None):
        self.status_code = status_code
        self.text = text
        self.headers = headers or {}
        self.encoding = "utf-8"
        self.closed = False
        self._chunk_size = chunk_size
        self._on_chunk = on_chunk

    def iter_content(self, chunk_size=1):
        body = self.text.encode(self.encoding)
        size = self._chunk_size or max(len(body), 1)
        for start in range(0, len(body), size):
            if self._on_chunk:
                self._on_chunk()
            yield body[start:start + size]

    def close(self):
        self.closed = True


class FakeClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


def _to_response(value):
    if isinstance(value, FakeResponse):
        return value
    return FakeResponse(200, json.dumps(value))


class FakeSession:
    """Routes GET requests to canned responses.

    A route value may be a JSON payload, a FakeResponse, an exception
    instance (raised), or a list of those consumed in order with the last
    one repeating. Unknown URLs answer 404.
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls: list[str] = []

    def get(self, url, headers=None, timeout=None, allow_redirects=True, stream=False):
        self.calls.append(url)
        if url not in self.routes:
            return FakeResponse(404, "not found")
        value = self.routes[url]
        if isinstance(value, list) and value and isinstance(value[0], (FakeResponse, Exception)):
            value = value.pop(0) if len(value) > 1 else value[0]
        if isinstance(value, Exception):
            raise value
        return _to_response(value)

    def count(self, url):
        return self.calls.count(url)

    def close(self):
        pass


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 7, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def test_config() -> Config:
    """Config with no rate-limit gap, pointing at a fake API host."""
    return Config(
        api_base_url=API,
        rate_limit_delay_seconds=0,
        rotate_user_agent=False,
    )


@pytest.fixture
def sleeps() -> list:
    """Collects every backoff wait instead of sleeping."""
    return []


@pytest.fixture
def make_client(test_config, sleeps):
    """Factory: HTTPClient over a FakeSession with the given routes."""

    def _make(routes=None, config=None, clock=None):
        session = FakeSession(routes)
        cfg = config or test_config
        client = HTTPClient(
            cfg,
            session=session,
            retry_policy=RetryPolicy(
                max_attempts=cfg.max_retries,
                base_delay=cfg.backoff_base_seconds,
                max_jitter=0,
                sleep=sleeps.append,
            ),
            rate_limiter=RateLimiter(0),
            clock=clock or time.monotonic,
        )
        return client, session

    return _make


@pytest.fixture
def fake_response():
    return FakeResponse


@pytest.fixture
def timeout_error():
    return requests.Timeout("read timed out")


@pytest.fixture
def fipe_routes():
    """Factory for a small FIPE tree: {brand_name: {model_name: [years]}}."""

    def _build(category, tree, price="R$ 10.000,00"):
        routes = {}
        brands = []
        for b_idx, (brand, models) in enumerate(tree.items(), start=1):
            b_code = str(b_idx)
            brands.append({"codigo": b_code, "nome": brand})
            model_entries = []
            for m_idx, (model, years) in enumerate(models.items(), start=1):
                m_code = str(b_idx * 100 + m_idx)
                model_entries.append({"codigo": m_code, "nome": model})
                years_url = f"{API}/{category}/marcas/{b_code}/modelos/{m_code}/anos"
                routes[years_url] = [
                    {"codigo": f"{y}-1", "nome": f"{y} Gasolina"} for y in years
                ]
                for y in years:
                    routes[f"{years_url}/{y}-1"] = {
                        "Valor": price,
                        "Marca": brand,
                        "Modelo": model,
                        "AnoModelo": y,
                        "CodigoFipe": f"{b_code:0>3}{m_code:0>3}-{y % 10}",
                    }
            routes[f"{API}/{category}/marcas/{b_code}/modelos"] = {
                "modelos": model_entries,
                "anos": [],
            }
        routes[f"{API}/{category}/marcas"] = brands
        return routes

    return _build


@pytest.fixture
def fake_clock():
    return FakeClock()
