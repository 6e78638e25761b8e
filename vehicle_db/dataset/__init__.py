"""Dataset Module - merge/validate and compress/verify write path."""

from .merge import merge
from .writer import DatasetWriter, WriteResult, load_previous_vehicles, serialize_dataset

__all__ = [
    "DatasetWriter",
    "WriteResult",
    "load_previous_vehicles",
    "merge",
    "serialize_dataset",
]
