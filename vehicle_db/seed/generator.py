"""Seed/fallback dataset generation (no network)."""

from __future__ import annotations

import logging
import random
from datetime import datetime, timezone
from typing import Iterable

from ..common.config import PricingSettings, SeedSettings, settings
from ..common.models import SEED_SOURCE_CODE, VehicleRecord, VehicleType
from .catalogs import SEED_CATALOGS, Catalog, year_range
from .pricing import synthesize_price, synthesize_price_jittered

logger = logging.getLogger(__name__)


def generate_seed(
    vehicle_type: VehicleType,
    catalog: Catalog | None = None,
    *,
    years: Iterable[int] | None = None,
    current_year: int | None = None,
    generated_at: datetime | None = None,
    rng: random.Random | None = None,
    pricing: PricingSettings | None = None,
    seed_settings: SeedSettings | None = None,
) -> list[VehicleRecord]:
    """Emit one record per (brand, model, year) of a catalog.

    Args:
        vehicle_type: Domain type stamped on every row.
        catalog: ``{brand: [models]}``; defaults to the built-in catalog.
        years: Model years; defaults to :func:`year_range` for the type.
        current_year: Reference year for depreciation.
        generated_at: ``last_updated`` stamp. Fix it for reproducible output.
        rng: When given, prices come from the seeded-random variant.

    Returns:
        Records in catalog order, brand then model then year. Rows whose
        price estimate is not positive are left out.
    """
    vehicle_type = VehicleType(vehicle_type)
    catalog = catalog if catalog is not None else SEED_CATALOGS[vehicle_type]
    generated_at = generated_at or datetime.now(timezone.utc)
    current_year = current_year if current_year is not None else generated_at.year
    pricing = pricing or settings.pricing
    seed_settings = seed_settings or settings.seed
    years = list(years) if years is not None else list(
        year_range(vehicle_type, current_year, seed_settings)
    )

    records: list[VehicleRecord] = []
    skipped = 0
    for brand, models in catalog.items():
        for model in models:
            for year in years:
                if rng is not None:
                    price = synthesize_price_jittered(
                        vehicle_type, brand, model, year, rng,
                        current_year=current_year,
                        pricing=pricing,
                        seed_settings=seed_settings,
                    )
                else:
                    price = synthesize_price(
                        vehicle_type, brand, model, year,
                        current_year=current_year,
                        pricing=pricing,
                    )
                if price <= 0:
                    skipped += 1
                    continue
                records.append(
                    VehicleRecord.build(
                        vehicle_type, brand, model, year, price,
                        source_code=SEED_SOURCE_CODE,
                        last_updated=generated_at,
                    )
                )

    if skipped:
        logger.warning("Seed %s: %d rows without a usable price", vehicle_type.value, skipped)
    logger.info(
        "Seed %s: %d records (%d brands, years %s-%s)",
        vehicle_type.value,
        len(records),
        len(catalog),
        years[0] if years else "-",
        years[-1] if years else "-",
    )
    return records
