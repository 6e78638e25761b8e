"""Project configuration and paths.

Loads settings from config/settings.yaml and environment variables.
"""

from __future__ import annotations

from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

# === Paths ===
PROJECT_ROOT = Path(__file__).parent.parent.parent
CONFIG_DIR = PROJECT_ROOT / "config"
DIST_DIR = PROJECT_ROOT / "dist-fipe"

# Load .env from project root
load_dotenv(PROJECT_ROOT / ".env")


class ModelMultiplier(BaseModel):
    """Premium model lines that get a price bump within one vehicle type."""
    vehicle_type: str
    substrings: list[str]
    multiplier: float = Field(gt=0)


class PricingSettings(BaseModel):
    """Constants for the algorithmic price estimate.

    Values are reference figures in BRL, not market data.
    """
    base_prices: dict[str, int] = Field(
        default_factory=lambda: {
            "motorcycle": 25_000,
            "car": 90_000,
            "tractor": 120_000,
            "boat": 150_000,
            "truck": 500_000,
        }
    )
    hash_scale: int = 100
    depreciation_rate: float = Field(default=0.92, ge=0.90, le=0.94)
    # Fraction of the undepreciated price below which age no longer matters
    residual_floor: float = Field(default=0.10, gt=0, lt=1)
    luxury_brands: list[str] = Field(
        default_factory=lambda: [
            "BMW", "Audi", "Mercedes-Benz", "Volvo", "Land Rover",
            "Porsche", "Ferrari", "Lamborghini", "Jaguar", "Lexus",
        ]
    )
    luxury_multiplier: float = 2.5
    model_multipliers: list[ModelMultiplier] = Field(
        default_factory=lambda: [
            ModelMultiplier(vehicle_type="truck", substrings=["FH", "R 450"], multiplier=1.5),
            ModelMultiplier(
                vehicle_type="motorcycle",
                substrings=["CB 1000", "R1", "S 1000"],
                multiplier=1.8,
            ),
        ]
    )


class SeedSettings(BaseModel):
    """Year windows and jitter bounds for generated rows."""
    first_year: int = 2010
    # Heavier categories only cover a trailing window of model years
    trailing_years: dict[str, int] = Field(
        default_factory=lambda: {"truck": 15, "tractor": 15}
    )
    # Types priced with the seeded-random variant instead of the plain estimate
    randomized_types: list[str] = Field(default_factory=list)
    random_seed: int = 2010
    jitter_floor: float = 0.5
    jitter_ceiling: float = 3.0


class PipelineSettings(BaseModel):
    """Dataset assembly settings."""
    min_live_records: int = 10
    output_dir: str = str(DIST_DIR)
    db_filename: str = "vehicles_db.json"
    metadata_filename: str = "metadata.json"
    # vehicle type -> HTML listing page with a price table
    auxiliary_urls: dict[str, str] = Field(default_factory=dict)


class Settings(BaseModel):
    """Top-level application settings."""
    pricing: PricingSettings = Field(default_factory=PricingSettings)
    seed: SeedSettings = Field(default_factory=SeedSettings)
    pipeline: PipelineSettings = Field(default_factory=PipelineSettings)

    @classmethod
    def load(cls, path: Path | None = None) -> Settings:
        """Load settings from config/settings.yaml, falling back to defaults."""
        settings_path = path or CONFIG_DIR / "settings.yaml"
        if settings_path.exists():
            with open(settings_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            return cls(**data)
        return cls()


# Singleton settings instance
settings = Settings.load()
