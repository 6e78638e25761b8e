"""Deduplicate and validate records from every source into one Dataset."""

from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Iterable

from pydantic import ValidationError

from ..common.errors import EmptyDatasetError
from ..common.models import Dataset, VehicleRecord, dataset_version

logger = logging.getLogger(__name__)


def _is_valid(record: VehicleRecord) -> bool:
    return (
        bool(record.id)
        and isinstance(record.year, int)
        and isinstance(record.price, (int, float))
        and record.price > 0
        and bool(str(record.brand).strip())
        and bool(str(record.model).strip())
    )


def _coerce(item: VehicleRecord | dict[str, Any]) -> VehicleRecord | None:
    """Return a valid record or None. Dicts come from previously written datasets."""
    if isinstance(item, VehicleRecord):
        return item if _is_valid(item) else None
    try:
        return VehicleRecord.model_validate(item)
    except ValidationError:
        return None


def merge(
    records: Iterable[VehicleRecord | dict[str, Any]],
    *,
    generated_at: datetime | None = None,
) -> Dataset:
    """Build the dataset, last write wins on duplicate IDs.

    Callers order ``records`` so that the preferred source comes last:
    previous dataset, then live/auxiliary rows, then seed rows.

    Raises:
        EmptyDatasetError: No valid record survived.
    """
    generated_at = generated_at or datetime.now(timezone.utc)

    by_id: dict[str, VehicleRecord] = {}
    seen = 0
    invalid = 0
    for item in records:
        seen += 1
        record = _coerce(item)
        if record is None:
            invalid += 1
            continue
        by_id[record.id] = record

    if not by_id:
        raise EmptyDatasetError(
            f"No valid vehicle records to publish ({seen} seen, {invalid} invalid)"
        )

    vehicles = list(by_id.values())
    stats = dict(Counter(v.type.value for v in vehicles))

    logger.info(
        "Merged %d records into %d unique vehicles (%d invalid, %d duplicates)",
        seen,
        len(vehicles),
        invalid,
        seen - invalid - len(vehicles),
    )
    return Dataset(
        version=dataset_version(generated_at),
        generated_at=generated_at,
        vehicles=vehicles,
        stats=stats,
    )
