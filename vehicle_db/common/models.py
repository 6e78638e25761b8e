"""Shared Pydantic data models for the vehicle dataset.

These models define the contract between the collectors, the seed
generator and the dataset writer. All modules import from here.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from .identifiers import normalize_id

SEED_SOURCE_CODE = "MANUAL-SEED"


# === Enums ===

class VehicleType(str, Enum):
    """Domain vehicle categories written to the dataset."""
    CAR = "car"
    MOTORCYCLE = "motorcycle"
    TRUCK = "truck"
    TRACTOR = "tractor"
    BOAT = "boat"


class ApiCategory(str, Enum):
    """Category path segments of the upstream FIPE API."""
    CARS = "carros"
    MOTORCYCLES = "motos"
    TRUCKS = "caminhoes"


# The only translation between upstream and domain vocabulary.
API_CATEGORY_TYPES: dict[ApiCategory, VehicleType] = {
    ApiCategory.CARS: VehicleType.CAR,
    ApiCategory.MOTORCYCLES: VehicleType.MOTORCYCLE,
    ApiCategory.TRUCKS: VehicleType.TRUCK,
}

CATEGORY_ORDER: tuple[VehicleType, ...] = (
    VehicleType.CAR,
    VehicleType.MOTORCYCLE,
    VehicleType.TRUCK,
    VehicleType.TRACTOR,
    VehicleType.BOAT,
)


def api_category_for(vehicle_type: VehicleType) -> ApiCategory | None:
    """Return the upstream category for a vehicle type, if the API has one."""
    for api_category, mapped in API_CATEGORY_TYPES.items():
        if mapped is vehicle_type:
            return api_category
    return None


# === Records ===

class VehicleRecord(BaseModel):
    """One priced (type, brand, model, year) row of the dataset."""
    id: str = Field(min_length=1)
    type: VehicleType
    brand: str = Field(min_length=1)
    model: str = Field(min_length=1)
    year: int
    price: int = Field(gt=0, description="Price in BRL")
    source_code: str | None = None
    last_updated: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("brand", "model")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @classmethod
    def build(
        cls,
        vehicle_type: VehicleType,
        brand: str,
        model: str,
        year: int,
        price: int,
        *,
        source_code: str | None = None,
        last_updated: datetime | None = None,
    ) -> VehicleRecord:
        """Create a record with its ID derived from the identity fields."""
        fields = {
            "id": normalize_id(vehicle_type, brand, model, year),
            "type": vehicle_type,
            "brand": brand,
            "model": model,
            "year": year,
            "price": price,
            "source_code": source_code,
        }
        if last_updated is not None:
            fields["last_updated"] = last_updated
        return cls(**fields)


class Dataset(BaseModel):
    """The merged dataset as persisted to vehicles_db.json."""
    version: str
    generated_at: datetime
    vehicles: list[VehicleRecord]
    stats: dict[str, int] = Field(default_factory=dict)


class DatasetMetadata(BaseModel):
    """Summary published next to the dataset after verification."""
    version: str
    generated_at: datetime
    vehicles_count: int = Field(ge=0)
    json_size_bytes: int = Field(ge=0)
    gzip_size_bytes: int = Field(ge=0)
    stats: dict[str, int] = Field(default_factory=dict)


@dataclass
class RawRecord:
    """Loosely typed row from an auxiliary HTML source."""

    brand: str | None = None
    model: str | None = None
    year: int | str | None = None
    price: int | float | str | None = None


def dataset_version(moment: datetime) -> str:
    """Date-derived version tag, e.g. ``2026.03.07``."""
    return moment.strftime("%Y.%m.%d")
