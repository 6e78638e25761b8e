"""Exception hierarchy for the fetch-merge-verify pipeline."""

from __future__ import annotations


class VehicleDBError(Exception):
    """Base exception for dataset build errors."""


class NetworkError(VehicleDBError):
    """Timeout, connection failure or non-2xx status.

    ``retriable`` is False for client errors that a retry cannot fix.
    """

    def __init__(self, message: str, url: str = "", *, retriable: bool = True) -> None:
        super().__init__(message)
        self.url = url
        self.retriable = retriable


class RetryExhausted(NetworkError):
    """Raised when every attempt of a retry policy has failed."""

    def __init__(self, url: str, attempts: int, last_error: Exception | None = None) -> None:
        super().__init__(
            f"Giving up on {url} after {attempts} attempt(s): {last_error}",
            url,
            retriable=False,
        )
        self.attempts = attempts
        self.last_error = last_error


class ParseError(VehicleDBError):
    """Response body could not be parsed."""

    def __init__(self, message: str, url: str = "") -> None:
        super().__init__(message)
        self.url = url


class BranchSkipped(VehicleDBError):
    """One brand/model/year node failed; siblings carry on."""


class CategoryFailed(VehicleDBError):
    """The brand list of a category could not be fetched."""

    def __init__(self, category: str, cause: Exception) -> None:
        super().__init__(f"Category {category} failed: {cause}")
        self.category = category
        self.cause = cause


class EmptyDatasetError(VehicleDBError):
    """No valid record survived the merge."""


class IntegrityError(VehicleDBError):
    """Compressed artifact does not round-trip to the in-memory dataset."""
