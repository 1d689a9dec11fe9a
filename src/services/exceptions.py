"""
Service-level exceptions.

This module contains exceptions that can be raised by the statistics,
scoring and storage services in the application.
"""
from typing import Optional


class StatisticsError(Exception):
    """Base exception for statistics calculation errors."""
    pass


class ObservationValidationError(StatisticsError):
    """Raised when a raw observation record is missing or has invalid fields."""

    def __init__(self, index: int, field: Optional[str], message: str):
        self.index = index
        self.field = field
        location = f"record {index}" if field is None else f"record {index}, field '{field}'"
        super().__init__(f"Invalid observation ({location}): {message}")


class InvalidWindowError(StatisticsError, ValueError):
    """Raised when a reporting window is not one of the supported sizes."""
    pass


class StorageError(Exception):
    """Raised when reading or writing tracking data fails."""
    pass
