"""Tests for merge/deduplication and validation."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from vehicle_db.common.errors import EmptyDatasetError
from vehicle_db.common.models import VehicleRecord, VehicleType
from vehicle_db.dataset.merge import merge

NOW = datetime(2026, 3, 7, tzinfo=timezone.utc)


def _record(brand="Fiat", model="Argo", year=2022, price=80_000, vtype=VehicleType.CAR, code=None):
    return VehicleRecord.build(vtype, brand, model, year, price, source_code=code, last_updated=NOW)


class TestMerge:
    def test_last_write_wins(self):
        live = [_record(price=80_000, code="001004-1")]
        seed = [_record(price=95_000, code="MANUAL-SEED")]

        dataset = merge(live + seed, generated_at=NOW)

        assert len(dataset.vehicles) == 1
        assert dataset.vehicles[0].price == 95_000
        assert dataset.vehicles[0].source_code == "MANUAL-SEED"

    def test_stats_count_survivors(self):
        records = [
            _record(model="Argo"),
            _record(model="Mobi"),
            _record(model="Argo"),
            _record(brand="Honda", model="Biz", vtype=VehicleType.MOTORCYCLE),
        ]
        dataset = merge(records, generated_at=NOW)
        assert dataset.stats == {"car": 2, "motorcycle": 1}
        assert sum(dataset.stats.values()) == len(dataset.vehicles)

    def test_drops_invalid_rows(self):
        valid = _record()
        rows = [
            valid,
            {"id": "car-x-y-2020", "type": "car", "brand": "X", "model": "Y", "year": 2020, "price": 0},
            {"id": "car-x-z-2020", "type": "car", "brand": "", "model": "Z", "year": 2020, "price": 10},
            {"id": "car-x-w", "type": "car", "brand": "X", "model": "W", "price": 10},
            {"id": "car-x-v-abc", "type": "car", "brand": "X", "model": "V", "year": "abc", "price": 10},
            {"id": "plane-x-v-2020", "type": "plane", "brand": "X", "model": "V", "year": 2020, "price": 10},
            VehicleRecord.model_construct(
                id="car-bad-1", type=VehicleType.CAR, brand="Bad", model="One", year=2020, price=-1
            ),
        ]
        dataset = merge(rows, generated_at=NOW)
        assert [v.id for v in dataset.vehicles] == [valid.id]

    def test_accepts_previous_dataset_rows(self):
        previous = [_record(price=70_000).model_dump(mode="json")]
        dataset = merge(previous + [_record(model="Mobi")], generated_at=NOW)
        assert {v.model for v in dataset.vehicles} == {"Argo", "Mobi"}

    def test_version_from_generation_date(self):
        dataset = merge([_record()], generated_at=NOW)
        assert dataset.version == "2026.03.07"
        assert dataset.generated_at == NOW

    def test_empty_is_fatal(self):
        with pytest.raises(EmptyDatasetError):
            merge([], generated_at=NOW)

    def test_all_invalid_is_fatal(self):
        with pytest.raises(EmptyDatasetError):
            merge([{"id": "x", "price": -1}], generated_at=NOW)
