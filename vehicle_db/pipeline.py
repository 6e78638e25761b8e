"""Fetch-merge pipeline over every vehicle category.

Categories run one after another. For each one the live collector is
tried first (when the API exposes the category and live collection is
enabled), auxiliary HTML rows are added, and when the yield stays under
``min_live_records`` the seed generator fills the category in.

Merge order, last write wins:
    previous dataset rows -> live + auxiliary rows -> seed rows
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable

from .collector.fipe_collector import FipeCollector
from .collector.html_source import AuxiliarySource, NullSource, raw_to_records
from .common.config import Settings, settings as default_settings
from .common.errors import CategoryFailed
from .common.models import CATEGORY_ORDER, Dataset, VehicleRecord, VehicleType, api_category_for
from .dataset.merge import merge
from .seed.generator import generate_seed

logger = logging.getLogger(__name__)

# Fallback reasons
NOT_IN_API = "not-in-api"
LIVE_DISABLED = "live-disabled"
CATEGORY_FAILED = "category-failed"
INSUFFICIENT_YIELD = "insufficient-yield"


@dataclass
class CategoryResult:
    """Outcome of one category."""

    vehicle_type: VehicleType
    live_records: list[VehicleRecord] = field(default_factory=list)
    seed_records: list[VehicleRecord] = field(default_factory=list)
    live_count: int = 0
    aux_count: int = 0
    fallback_reason: str | None = None
    error: str | None = None

    @property
    def fell_back(self) -> bool:
        return self.fallback_reason is not None

    @property
    def seed_count(self) -> int:
        return len(self.seed_records)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.vehicle_type.value,
            "live": self.live_count,
            "auxiliary": self.aux_count,
            "seed": self.seed_count,
            "fallback_reason": self.fallback_reason,
            "error": self.error,
        }


@dataclass
class RunSummary:
    """Per-run report, produced even when some categories failed."""

    categories: list[CategoryResult] = field(default_factory=list)
    previous_count: int = 0
    stats: dict[str, int] = field(default_factory=dict)

    @property
    def fallback_types(self) -> list[str]:
        return [c.vehicle_type.value for c in self.categories if c.fell_back]

    @property
    def errors(self) -> dict[str, str]:
        return {c.vehicle_type.value: c.error for c in self.categories if c.error}

    def to_dict(self) -> dict[str, Any]:
        return {
            "previous_count": self.previous_count,
            "categories": [c.to_dict() for c in self.categories],
            "fallback_types": self.fallback_types,
            "errors": self.errors,
            "stats": self.stats,
        }


class VehiclePipeline:
    """Builds the merged dataset from live, auxiliary and seed sources.

    Args:
        collector: Live FIPE collector, or None to seed every category.
        aux_source: Optional auxiliary HTML source.
        settings: Application settings (pricing, seed, thresholds).
        categories: Processing order.
    """

    def __init__(
        self,
        collector: FipeCollector | None = None,
        aux_source: AuxiliarySource | None = None,
        *,
        settings: Settings | None = None,
        categories: Iterable[VehicleType] = CATEGORY_ORDER,
    ) -> None:
        self._collector = collector
        self._aux_source = aux_source or NullSource()
        self._settings = settings or default_settings
        self._categories = tuple(categories)

    def run(
        self,
        previous: list[dict[str, Any]] | None = None,
        *,
        now: datetime | None = None,
    ) -> tuple[Dataset, RunSummary]:
        """Collect every category and merge.

        Raises:
            EmptyDatasetError: Nothing valid to publish.
        """
        now = now or datetime.now(timezone.utc)
        previous = previous or []
        summary = RunSummary(previous_count=len(previous))

        for vehicle_type in self._categories:
            result = self.process_category(vehicle_type, now=now)
            summary.categories.append(result)

        ordered: list[VehicleRecord | dict[str, Any]] = list(previous)
        for result in summary.categories:
            ordered.extend(result.live_records)
        for result in summary.categories:
            ordered.extend(result.seed_records)

        dataset = merge(ordered, generated_at=now)
        summary.stats = dict(dataset.stats)
        log_summary(summary)
        return dataset, summary

    def process_category(self, vehicle_type: VehicleType, *, now: datetime) -> CategoryResult:
        """Live collection, auxiliary rows and seed fallback for one category."""
        result = CategoryResult(vehicle_type=vehicle_type)
        api_category = api_category_for(vehicle_type)
        reason: str | None = None

        if api_category is None:
            reason = NOT_IN_API
            logger.info("Category %s is not in the API, using seed catalog", vehicle_type.value)
        elif self._collector is None:
            reason = LIVE_DISABLED
        else:
            logger.info("Processing API category %s (%s)", api_category.value, vehicle_type.value)
            try:
                live = self._collector.collect_category(
                    api_category, vehicle_type, collected_at=now
                )
            except CategoryFailed as exc:
                result.error = str(exc)
                reason = CATEGORY_FAILED
            else:
                result.live_records.extend(live)
                result.live_count = len(live)

        aux = raw_to_records(
            self._aux_source.fetch_records(vehicle_type),
            vehicle_type,
            collected_at=now,
        )
        result.live_records.extend(aux)
        result.aux_count = len(aux)

        threshold = self._settings.pipeline.min_live_records
        if reason is None and len(result.live_records) < threshold:
            reason = INSUFFICIENT_YIELD
            logger.warning(
                "Category %s yielded %d records (< %d), falling back to seed data",
                vehicle_type.value, len(result.live_records), threshold,
            )

        if reason is not None:
            result.fallback_reason = reason
            result.seed_records = generate_seed(
                vehicle_type,
                generated_at=now,
                rng=self._rng_for(vehicle_type),
                pricing=self._settings.pricing,
                seed_settings=self._settings.seed,
            )
        return result

    def _rng_for(self, vehicle_type: VehicleType) -> random.Random | None:
        seed_settings = self._settings.seed
        if vehicle_type.value not in seed_settings.randomized_types:
            return None
        return random.Random(f"{seed_settings.random_seed}:{vehicle_type.value}")


def log_summary(summary: RunSummary) -> None:
    logger.info("=== Run summary ===")
    for result in summary.categories:
        logger.info(
            "  %-10s live=%d aux=%d seed=%d%s",
            result.vehicle_type.value,
            result.live_count,
            result.aux_count,
            result.seed_count,
            f" (fallback: {result.fallback_reason})" if result.fell_back else "",
        )
        if result.error:
            logger.error("  %-10s error: %s", result.vehicle_type.value, result.error)
    logger.info("  stats: %s", summary.stats)
