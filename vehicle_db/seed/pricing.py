"""Algorithmic price estimates from vehicle attributes.

The estimate is used for seed catalogs and whenever a live price is
unavailable. It is a pure function of its inputs and the pricing table:

    base(type) + hash(brand + model) * scale
      -> depreciation ** age (bounded below by the residual floor)
      -> luxury brand multiplier
      -> premium model line multiplier
      -> rounded half-up to whole reais

A seeded-random variant exists for catalogs that want visible spread;
it is always driven by an explicit ``random.Random``.
"""

from __future__ import annotations

import math
import random
from datetime import date

from ..common.config import PricingSettings, SeedSettings, settings
from ..common.models import VehicleType

# Relative spread applied by the seeded-random variant before clamping
JITTER_SPREAD = 0.2


def name_hash(brand: str, model: str) -> int:
    """Character-code sum of ``brand + model``."""
    return sum(ord(ch) for ch in brand + model)


def base_price(vehicle_type: VehicleType | str, pricing: PricingSettings | None = None) -> int:
    pricing = pricing or settings.pricing
    key = VehicleType(vehicle_type).value
    try:
        return pricing.base_prices[key]
    except KeyError:
        raise ValueError(f"No base price configured for vehicle type {key!r}") from None


def is_luxury_brand(brand: str, pricing: PricingSettings | None = None) -> bool:
    pricing = pricing or settings.pricing
    return any(luxury in brand for luxury in pricing.luxury_brands)


def _raw_price(
    vehicle_type: VehicleType,
    brand: str,
    model: str,
    year: int,
    current_year: int,
    pricing: PricingSettings,
) -> float:
    price = float(base_price(vehicle_type, pricing))
    price += name_hash(brand, model) * pricing.hash_scale

    age = current_year - year
    if age > 0:
        price *= max(pricing.depreciation_rate ** age, pricing.residual_floor)

    if is_luxury_brand(brand, pricing):
        price *= pricing.luxury_multiplier

    for rule in pricing.model_multipliers:
        if rule.vehicle_type == vehicle_type.value and any(s in model for s in rule.substrings):
            price *= rule.multiplier

    return price


def _round_half_up(value: float) -> int:
    if not math.isfinite(value) or value <= 0:
        return 0
    rounded = int(math.floor(value + 0.5))
    return rounded if rounded > 0 else 0


def synthesize_price(
    vehicle_type: VehicleType | str,
    brand: str,
    model: str,
    year: int,
    *,
    current_year: int | None = None,
    pricing: PricingSettings | None = None,
) -> int:
    """Deterministic price estimate in BRL.

    Returns 0 when the computation does not produce a finite positive
    amount; callers treat 0 as "no price" and drop the row.
    """
    vehicle_type = VehicleType(vehicle_type)
    current_year = current_year if current_year is not None else date.today().year
    pricing = pricing or settings.pricing
    return _round_half_up(
        _raw_price(vehicle_type, brand, model, int(year), current_year, pricing)
    )


def synthesize_price_jittered(
    vehicle_type: VehicleType | str,
    brand: str,
    model: str,
    year: int,
    rng: random.Random,
    *,
    current_year: int | None = None,
    pricing: PricingSettings | None = None,
    seed_settings: SeedSettings | None = None,
) -> int:
    """Seeded-random variant of :func:`synthesize_price`.

    The deterministic estimate is scaled by up to +/-20% and clamped to
    ``[jitter_floor, jitter_ceiling] * base_price(type)``.
    """
    vehicle_type = VehicleType(vehicle_type)
    current_year = current_year if current_year is not None else date.today().year
    pricing = pricing or settings.pricing
    seed_settings = seed_settings or settings.seed

    price = _raw_price(vehicle_type, brand, model, int(year), current_year, pricing)
    price *= rng.uniform(1 - JITTER_SPREAD, 1 + JITTER_SPREAD)

    base = base_price(vehicle_type, pricing)
    floor = base * seed_settings.jitter_floor
    ceiling = base * seed_settings.jitter_ceiling
    return _round_half_up(min(max(price, floor), ceiling))
