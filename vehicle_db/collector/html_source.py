"""Auxiliary HTML price sources.

An auxiliary source hands back loosely typed rows for a vehicle type. It
may return nothing at all; absence or failure of a source is a normal
outcome and never interrupts the pipeline.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Protocol

from bs4 import BeautifulSoup

from ..common.errors import NetworkError, ParseError
from ..common.models import RawRecord, VehicleRecord, VehicleType
from ..seed.pricing import synthesize_price
from .fipe_collector import parse_brl, parse_year
from .http_client import HTTPClient

logger = logging.getLogger(__name__)

HTML_SOURCE_CODE = "HTML-SCRAPE"


class AuxiliarySource(Protocol):
    def fetch_records(self, vehicle_type: VehicleType) -> list[RawRecord]: ...


class NullSource:
    """Source used when no auxiliary site is configured."""

    def fetch_records(self, vehicle_type: VehicleType) -> list[RawRecord]:
        return []


class HtmlTableSource:
    """Reads ``brand | model | year | price`` rows from an HTML table.

    The first ``<table>`` on the page whose rows have at least four cells
    is used; header rows (``<th>`` only) are ignored.
    """

    def __init__(self, client: HTTPClient, urls: dict[str, str]) -> None:
        self._client = client
        self._urls = urls

    def fetch_records(self, vehicle_type: VehicleType) -> list[RawRecord]:
        url = self._urls.get(VehicleType(vehicle_type).value)
        if not url:
            return []
        try:
            html = self._client.fetch_text(url)
        except (NetworkError, ParseError) as exc:
            logger.warning("Auxiliary source %s unavailable: %s", url, exc)
            return []

        rows = parse_price_table(html)
        logger.info("Auxiliary source %s: %d rows", url, len(rows))
        return rows


def parse_price_table(html: str) -> list[RawRecord]:
    """Extract raw rows from the first four-column table in ``html``."""
    soup = BeautifulSoup(html, "lxml")
    for table in soup.select("table"):
        rows: list[RawRecord] = []
        for tr in table.select("tr"):
            cells = [td.get_text(strip=True) for td in tr.find_all("td")]
            if len(cells) < 4:
                continue
            brand, model, year, price = cells[:4]
            rows.append(RawRecord(brand=brand, model=model, year=year, price=price))
        if rows:
            return rows
    return []


def raw_to_records(
    raw_rows: list[RawRecord],
    vehicle_type: VehicleType,
    *,
    current_year: int | None = None,
    collected_at: datetime | None = None,
) -> list[VehicleRecord]:
    """Convert raw rows into records, dropping incomplete ones.

    Rows without brand, model or a parseable year are dropped. Rows without
    a usable price get the algorithmic estimate.
    """
    vehicle_type = VehicleType(vehicle_type)
    collected_at = collected_at or datetime.now(timezone.utc)
    current_year = current_year or collected_at.year

    records: list[VehicleRecord] = []
    for raw in raw_rows:
        brand = (raw.brand or "").strip()
        model = (raw.model or "").strip()
        year = parse_year(raw.year, current_year) if raw.year is not None else None
        if not brand or not model or year is None:
            continue

        price = parse_brl(raw.price) if raw.price is not None else 0
        if price <= 0:
            price = synthesize_price(vehicle_type, brand, model, year, current_year=current_year)
        if price <= 0:
            continue

        try:
            records.append(
                VehicleRecord.build(
                    vehicle_type, brand, model, year, price,
                    source_code=HTML_SOURCE_CODE,
                    last_updated=collected_at,
                )
            )
        except ValueError:
            logger.debug("Dropping invalid auxiliary row: %r", raw)
    return records
