"""Hierarchical collector for the FIPE pricing API.

Walks brand -> model -> year -> price for one API category. Failures are
isolated per node: a model whose year list cannot be fetched, or a year
whose price cannot be fetched, is logged and skipped while its siblings
carry on. Only a failed brand list escalates, as ``CategoryFailed``.

Requests are serialized through the shared ``HTTPClient``, whose rate
limiter keeps a fixed gap between consecutive calls.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from ..common.errors import BranchSkipped, CategoryFailed, NetworkError, ParseError
from ..common.models import API_CATEGORY_TYPES, ApiCategory, VehicleRecord, VehicleType
from ..seed.pricing import synthesize_price
from .config import Config
from .http_client import HTTPClient

logger = logging.getLogger(__name__)

# Upstream year code for brand-new ("zero km") vehicles
ZERO_KM_YEAR = 32000

_YEAR_PREFIX = re.compile(r"\s*(\d{4,5})")
# A lone dot followed by exactly two digits, as in "45123.50"
_DOT_DECIMAL = re.compile(r"^\d+\.\d{2}$")


def parse_year(code: object, current_year: int) -> int | None:
    """Extract the model year from an upstream year code such as ``2014-1``.

    Returns None when no integer year can be read.
    """
    if isinstance(code, int):
        year = code
    else:
        match = _YEAR_PREFIX.match(str(code or ""))
        if not match:
            return None
        year = int(match.group(1))
    if year == ZERO_KM_YEAR:
        return current_year + 1
    return year if year > 0 else None


def parse_brl(value: object) -> int:
    """Parse a currency amount to whole reais, rounding half-up.

    Accepts the Brazilian form (``R$ 45.123,50``) and, for auxiliary pages,
    a plain dot-decimal form (``45123.50``). A single dot followed by
    exactly two digits is a decimal point; any other dot groups thousands.
    Returns 0 for anything that does not yield a finite positive amount.
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        amount = float(value)
    else:
        text = re.sub(r"[^\d,.]", "", str(value or ""))
        if "," in text:
            integer, _, decimals = text.replace(".", "").partition(",")
        elif _DOT_DECIMAL.match(text):
            integer, _, decimals = text.partition(".")
        else:
            integer, decimals = text.replace(".", ""), ""
        if not integer and not decimals:
            return 0
        try:
            amount = float(f"{integer or '0'}.{decimals or '0'}")
        except ValueError:
            return 0
    if not math.isfinite(amount) or amount <= 0:
        return 0
    return int(math.floor(amount + 0.5))


@dataclass
class CollectStats:
    """Counters for one ``collect_category`` call."""

    category: str
    brands: int = 0
    models: int = 0
    records: int = 0
    skipped_branches: int = 0
    discarded_leaves: int = 0


class FipeCollector:
    """Collector for the Parallelum FIPE API (``/fipe/api/v1``).

    Usage:
        with HTTPClient(config) as client:
            collector = FipeCollector(client, config)
            records = collector.collect_category(ApiCategory.MOTORCYCLES)
    """

    def __init__(
        self,
        client: HTTPClient,
        config: Config | None = None,
        *,
        current_year: int | None = None,
    ) -> None:
        self.config = config or client.config
        self._client = client
        self._current_year = current_year
        self.last_stats: CollectStats | None = None

    def collect_category(
        self,
        api_category: ApiCategory,
        vehicle_type: VehicleType | None = None,
        *,
        collected_at: datetime | None = None,
    ) -> list[VehicleRecord]:
        """Collect every reachable priced (brand, model, year) of a category.

        Raises:
            CategoryFailed: The brand list could not be fetched or parsed.
        """
        api_category = ApiCategory(api_category)
        vehicle_type = vehicle_type or API_CATEGORY_TYPES[api_category]
        collected_at = collected_at or datetime.now(timezone.utc)
        current_year = self._current_year or collected_at.year
        stats = CollectStats(category=api_category.value)
        self.last_stats = stats

        brands_url = f"{self.config.api_base_url}/{api_category.value}/marcas"
        logger.info("Fetching brands for %s...", api_category.value)
        try:
            brands = self._client.fetch_json(brands_url)
        except (NetworkError, ParseError) as exc:
            logger.error("Failed to fetch brands for %s: %s", api_category.value, exc)
            raise CategoryFailed(api_category.value, exc) from exc
        if not isinstance(brands, list):
            raise CategoryFailed(
                api_category.value,
                ParseError(f"Expected a brand list, got {type(brands).__name__}", brands_url),
            )

        if self.config.max_brands is not None:
            brands = brands[: self.config.max_brands]
        logger.info("  Found %d brands.", len(brands))

        records: list[VehicleRecord] = []
        for index, brand in enumerate(brands, start=1):
            entry = _code_and_name(brand)
            if entry is None:
                logger.debug("Ignoring malformed brand entry: %r", brand)
                continue
            brand_code, brand_name = entry
            logger.debug(
                "  [%d/%d] Fetching models for %s", index, len(brands), brand_name
            )
            stats.brands += 1
            try:
                records.extend(
                    self._collect_brand(
                        api_category, vehicle_type, brand_code, brand_name,
                        current_year, collected_at, stats,
                    )
                )
            except BranchSkipped as exc:
                stats.skipped_branches += 1
                logger.warning("  Skipping brand %s: %s", brand_name, exc)

        stats.records = len(records)
        logger.info(
            "  %s: %d records from %d brands / %d models (%d branches skipped)",
            api_category.value,
            stats.records,
            stats.brands,
            stats.models,
            stats.skipped_branches,
        )
        return records

    def _collect_brand(
        self,
        api_category: ApiCategory,
        vehicle_type: VehicleType,
        brand_code: str,
        brand_name: str,
        current_year: int,
        collected_at: datetime,
        stats: CollectStats,
    ) -> list[VehicleRecord]:
        url = f"{self.config.api_base_url}/{api_category.value}/marcas/{brand_code}/modelos"
        doc = self._fetch_node(url, f"models of brand {brand_name}")
        models = doc.get("modelos", []) if isinstance(doc, dict) else doc
        if not isinstance(models, list):
            raise BranchSkipped(f"unexpected models payload from {url}")
        if self.config.max_models is not None:
            models = models[: self.config.max_models]

        records: list[VehicleRecord] = []
        for model in models:
            entry = _code_and_name(model)
            if entry is None:
                continue
            model_code, model_name = entry
            stats.models += 1
            try:
                records.extend(
                    self._collect_model(
                        url, vehicle_type, brand_code, brand_name, model_code,
                        model_name, current_year, collected_at, stats,
                    )
                )
            except BranchSkipped as exc:
                stats.skipped_branches += 1
                logger.warning("  Skipping model %s %s: %s", brand_name, model_name, exc)
        return records

    def _collect_model(
        self,
        models_url: str,
        vehicle_type: VehicleType,
        brand_code: str,
        brand_name: str,
        model_code: str,
        model_name: str,
        current_year: int,
        collected_at: datetime,
        stats: CollectStats,
    ) -> list[VehicleRecord]:
        years_url = f"{models_url}/{model_code}/anos"
        years = self._fetch_node(years_url, f"years of {brand_name} {model_name}")
        if not isinstance(years, list):
            raise BranchSkipped(f"unexpected years payload from {years_url}")

        composite_code = f"{brand_code}-{model_code}"
        records: list[VehicleRecord] = []
        for year_entry in years:
            year_code = year_entry.get("codigo") if isinstance(year_entry, dict) else year_entry
            year = parse_year(year_code, current_year)
            if year is None:
                stats.discarded_leaves += 1
                continue

            if self.config.price_mode == "synthetic":
                price = synthesize_price(
                    vehicle_type, brand_name, model_name, year, current_year=current_year
                )
                source_code = composite_code
            else:
                try:
                    price_doc = self._fetch_node(
                        f"{years_url}/{year_code}",
                        f"price of {brand_name} {model_name} {year_code}",
                    )
                except BranchSkipped as exc:
                    stats.skipped_branches += 1
                    logger.warning("  Skipping year %s: %s", year_code, exc)
                    continue
                if not isinstance(price_doc, dict):
                    stats.discarded_leaves += 1
                    continue
                price = parse_brl(price_doc.get("Valor"))
                source_code = price_doc.get("CodigoFipe") or composite_code

            if price <= 0:
                stats.discarded_leaves += 1
                continue

            try:
                record = VehicleRecord.build(
                    vehicle_type, brand_name, model_name, year, price,
                    source_code=source_code,
                    last_updated=collected_at,
                )
            except ValueError as exc:
                stats.discarded_leaves += 1
                logger.debug("  Discarding %s %s %s: %s", brand_name, model_name, year, exc)
                continue
            records.append(record)
        return records

    def _fetch_node(self, url: str, what: str) -> Any:
        """Fetch one child node, converting failures into ``BranchSkipped``."""
        try:
            return self._client.fetch_json(url)
        except (NetworkError, ParseError) as exc:
            raise BranchSkipped(f"failed to fetch {what}: {exc}") from exc


def _code_and_name(entry: Any) -> tuple[str, str] | None:
    """Read ``codigo``/``nome`` from an upstream list entry."""
    if not isinstance(entry, dict):
        return None
    code = entry.get("codigo")
    name = str(entry.get("nome") or "").strip()
    if code in (None, "") or not name:
        return None
    return str(code), name
