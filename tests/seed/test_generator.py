"""Tests for seed catalogs and the fallback generator."""

from __future__ import annotations

import json
import random
from datetime import datetime, timezone

from vehicle_db.common.config import SeedSettings
from vehicle_db.common.models import SEED_SOURCE_CODE, VehicleType
from vehicle_db.seed.catalogs import SEED_CATALOGS, TRACTORS, catalog_size, year_range
from vehicle_db.seed.generator import generate_seed

NOW = datetime(2026, 3, 7, tzinfo=timezone.utc)


class TestCatalogs:
    def test_every_type_has_a_catalog(self):
        assert set(SEED_CATALOGS) == set(VehicleType)
        assert all(catalog_size(c) > 0 for c in SEED_CATALOGS.values())

    def test_repeated_brands_are_folded(self):
        assert "S430 (Colheitadeira)" in TRACTORS["John Deere"]
        assert "5075E" in TRACTORS["John Deere"]
        assert len(TRACTORS) == 8

    def test_default_year_range(self):
        years = year_range(VehicleType.CAR, 2026)
        assert years[0] == 2010
        assert years[-1] == 2027

    def test_trailing_window(self):
        years = year_range(VehicleType.TRUCK, 2026)
        assert len(years) == 15
        assert years[-1] == 2027

    def test_custom_settings(self):
        settings = SeedSettings(first_year=2020, trailing_years={})
        assert list(year_range(VehicleType.TRACTOR, 2024, settings)) == [2020, 2021, 2022, 2023, 2024, 2025]


class TestGenerateSeed:
    def test_one_record_per_combination(self):
        catalog = {"Focker": ["160", "210"], "Phantom": ["303"]}
        records = generate_seed(VehicleType.BOAT, catalog, years=range(2020, 2023), generated_at=NOW)

        assert len(records) == 3 * 3
        assert all(r.source_code == SEED_SOURCE_CODE for r in records)
        assert all(r.type == VehicleType.BOAT for r in records)
        assert [r.id for r in records[:3]] == [
            "boat-focker-160-2020",
            "boat-focker-160-2021",
            "boat-focker-160-2022",
        ]

    def test_tractor_catalog_product(self):
        records = generate_seed(VehicleType.TRACTOR, generated_at=NOW)
        expected = catalog_size(TRACTORS) * len(year_range(VehicleType.TRACTOR, 2026))
        assert len(records) == expected
        assert len({r.id for r in records}) == expected

    def test_idempotent(self):
        first = generate_seed(VehicleType.CAR, generated_at=NOW)
        second = generate_seed(VehicleType.CAR, generated_at=NOW)
        dump = lambda rs: json.dumps([r.model_dump(mode="json") for r in rs])
        assert dump(first) == dump(second)

    def test_seeded_random_variant(self):
        plain = generate_seed(VehicleType.BOAT, generated_at=NOW)
        a = generate_seed(VehicleType.BOAT, generated_at=NOW, rng=random.Random(3))
        b = generate_seed(VehicleType.BOAT, generated_at=NOW, rng=random.Random(3))

        assert [r.price for r in a] == [r.price for r in b]
        assert [r.price for r in a] != [r.price for r in plain]
        assert [r.id for r in a] == [r.id for r in plain]

    def test_empty_catalog(self):
        assert generate_seed(VehicleType.CAR, {}, generated_at=NOW) == []
