"""Dataset serialization, gzip compression and integrity verification.

Write order:
    1. vehicles_db.json       canonical JSON
    2. vehicles_db.json.gz    gzip level 9, mtime 0
    3. read (2) back, decompress, parse, compare record counts
    4. metadata.json          only after (3) passed

A dry run performs the same serialization and verification in memory
and writes nothing.
"""

from __future__ import annotations

import gzip
import json
import logging
import zlib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..common.errors import IntegrityError
from ..common.models import Dataset, DatasetMetadata

logger = logging.getLogger(__name__)

GZIP_LEVEL = 9


@dataclass
class WriteResult:
    """Sizes and locations of the written artifacts."""

    json_bytes: int
    gzip_bytes: int
    metadata: DatasetMetadata
    json_path: Path | None = None
    gzip_path: Path | None = None
    metadata_path: Path | None = None

    @property
    def dry_run(self) -> bool:
        return self.json_path is None


def serialize_dataset(dataset: Dataset) -> bytes:
    """Canonical compact UTF-8 JSON for a dataset."""
    payload = dataset.model_dump(mode="json")
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":")).encode("utf-8")


def compress(data: bytes) -> bytes:
    """Deterministic maximum-ratio gzip."""
    return gzip.compress(data, compresslevel=GZIP_LEVEL, mtime=0)


def verify_compressed(blob: bytes, expected_count: int) -> None:
    """Decompress and parse ``blob``; its vehicle count must equal ``expected_count``.

    Raises:
        IntegrityError: Corrupt stream, invalid JSON or count mismatch.
    """
    try:
        document = json.loads(gzip.decompress(blob).decode("utf-8"))
    except (OSError, EOFError, zlib.error, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise IntegrityError(f"Compressed artifact is unreadable: {exc}") from exc

    vehicles = document.get("vehicles") if isinstance(document, dict) else None
    if not isinstance(vehicles, list):
        raise IntegrityError("Compressed artifact has no vehicles list")
    if len(vehicles) != expected_count:
        raise IntegrityError(
            f"Record count mismatch: {len(vehicles)} in artifact, {expected_count} in memory"
        )


class DatasetWriter:
    """Write the dataset artifacts into one output directory."""

    def __init__(
        self,
        output_dir: str | Path,
        *,
        db_filename: str = "vehicles_db.json",
        metadata_filename: str = "metadata.json",
        dry_run: bool = False,
    ) -> None:
        self.output_dir = Path(output_dir)
        self.json_path = self.output_dir / db_filename
        self.gzip_path = self.output_dir / f"{db_filename}.gz"
        self.metadata_path = self.output_dir / metadata_filename
        self.dry_run = dry_run

    def write(self, dataset: Dataset) -> WriteResult:
        """Serialize, compress, verify, then publish metadata.

        Raises:
            IntegrityError: The compressed artifact failed verification;
                metadata.json is not written.
        """
        raw = serialize_dataset(dataset)
        packed = compress(raw)
        expected = len(dataset.vehicles)

        if self.dry_run:
            verify_compressed(packed, expected)
        else:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            self.json_path.write_bytes(raw)
            self.gzip_path.write_bytes(packed)
            verify_compressed(self.gzip_path.read_bytes(), expected)

        metadata = DatasetMetadata(
            version=dataset.version,
            generated_at=dataset.generated_at,
            vehicles_count=expected,
            json_size_bytes=len(raw),
            gzip_size_bytes=len(packed),
            stats=dataset.stats,
        )

        if self.dry_run:
            logger.info(
                "Dry run: %d vehicles, projected %s bytes JSON / %s bytes gzip",
                expected, f"{len(raw):,}", f"{len(packed):,}",
            )
            return WriteResult(json_bytes=len(raw), gzip_bytes=len(packed), metadata=metadata)

        self.metadata_path.write_text(
            json.dumps(metadata.model_dump(mode="json"), ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
        logger.info(
            "Wrote %s (%s bytes) and %s (%s bytes)",
            self.json_path, f"{len(raw):,}", self.gzip_path.name, f"{len(packed):,}",
        )
        return WriteResult(
            json_bytes=len(raw),
            gzip_bytes=len(packed),
            metadata=metadata,
            json_path=self.json_path,
            gzip_path=self.gzip_path,
            metadata_path=self.metadata_path,
        )


def load_previous_vehicles(path: str | Path) -> list[dict[str, Any]]:
    """Read the vehicle rows of an earlier dataset for an incremental run.

    A missing or unreadable file yields an empty list.
    """
    path = Path(path)
    if not path.exists():
        return []
    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Ignoring unreadable previous dataset %s: %s", path, exc)
        return []

    vehicles = document.get("vehicles", []) if isinstance(document, dict) else []
    if not isinstance(vehicles, list):
        return []
    logger.info("Loaded %d vehicles from previous dataset %s", len(vehicles), path)
    return [v for v in vehicles if isinstance(v, dict)]
