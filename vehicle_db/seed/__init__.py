"""Seed Module - catalogs, algorithmic pricing and fallback generation."""

from .catalogs import SEED_CATALOGS, catalog_size, year_range
from .generator import generate_seed
from .pricing import synthesize_price, synthesize_price_jittered

__all__ = [
    "SEED_CATALOGS",
    "catalog_size",
    "generate_seed",
    "synthesize_price",
    "synthesize_price_jittered",
    "year_range",
]
