"""Deterministic slug IDs for vehicle records."""

from __future__ import annotations

import re
import unicodedata

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(value: object) -> str:
    """Lowercase, strip diacritics, collapse anything else to single hyphens.

    >>> slugify("Citroën C4 Cactus")
    'citroen-c4-cactus'
    """
    text = unicodedata.normalize("NFD", str(value).lower())
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    return _NON_ALNUM.sub("-", text).strip("-")


def normalize_id(vehicle_type: object, brand: str, model: str, year: int | str) -> str:
    """Build the record ID from (type, brand, model, year).

    Inputs that differ only in accents or punctuation map to the same ID;
    the merge step resolves such collisions last-write-wins.

    Raises:
        ValueError: A component has no letters or digits to keep.
    """
    type_value = getattr(vehicle_type, "value", vehicle_type)
    parts = (slugify(type_value), slugify(brand), slugify(model), slugify(year))
    if not all(parts):
        raise ValueError(
            f"Cannot build an ID from {(type_value, brand, model, year)!r}: empty component"
        )
    return "-".join(parts)
