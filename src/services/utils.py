"""
Shared utility functions for statistics and scoring services.

These utilities are used across multiple service modules to handle common
operations like parsing raw records, filtering flow days, rounding and
reporting window arithmetic.
"""
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Generic, Iterable, List, Optional, Sequence, Tuple, Type, TypeVar

from aws_lambda_powertools import Logger
from pydantic import BaseModel, ValidationError

from src.models.observation import CycleObservation
from src.services.constants import REPORT_WINDOWS
from src.services.exceptions import InvalidWindowError, ObservationValidationError

logger = Logger()

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass
class ParsedObservations(Generic[ModelT]):
    """Observations parsed from raw records, with the number of rows skipped."""
    observations: List[ModelT] = field(default_factory=list)
    skipped: int = 0


def parse_observations(
    rows: Iterable[Dict[str, Any]],
    model: Type[ModelT],
    skip_invalid: bool = True
) -> ParsedObservations[ModelT]:
    """
    Parse raw storage rows into observation models.

    Args:
        rows: Raw records (DynamoDB items or API payloads)
        model: Observation model to validate against
        skip_invalid: Skip malformed rows instead of raising

    Returns:
        ParsedObservations with the valid observations and a skipped count

    Raises:
        ObservationValidationError: If a row is malformed and skip_invalid is False

    Example:
        >>> parsed = parse_observations(items, CycleObservation)
        >>> if parsed.skipped:
        ...     print(f"Ignored {parsed.skipped} malformed rows")
    """
    result: ParsedObservations[ModelT] = ParsedObservations()

    for index, row in enumerate(rows):
        try:
            result.observations.append(model.model_validate(row))
        except ValidationError as e:
            first_error = e.errors()[0]
            loc = first_error.get("loc") or ()
            field_name = str(loc[0]) if loc else None
            error = ObservationValidationError(index, field_name, first_error.get("msg", str(e)))

            if not skip_invalid:
                raise error from e

            result.skipped += 1
            logger.warning("Skipping malformed observation", extra={
                "model": model.__name__,
                "index": index,
                "field": field_name,
                "error": str(error)
            })

    return result


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, with halves rounded up.

    Python's round() rounds halves to even, which would turn an average
    cycle of 28.5 days into 28.
    """
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def round_half_up_tenths(value: float) -> float:
    """Round to one decimal place, with halves rounded up."""
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def get_flow_dates(observations: Iterable[CycleObservation]) -> List[date]:
    """
    Get the sorted, distinct dates that have a non-none flow.

    Args:
        observations: Cycle observations in any order

    Returns:
        Flow dates in ascending order
    """
    return sorted({o.date for o in observations if o.flow_intensity.is_flow})


def validate_window(window_days: int) -> int:
    """
    Check that a reporting window is one of the supported sizes.

    Raises:
        InvalidWindowError: If the window is not supported
    """
    if window_days not in REPORT_WINDOWS:
        raise InvalidWindowError(
            f"Unsupported window of {window_days} days, expected one of {list(REPORT_WINDOWS)}"
        )
    return window_days


def window_bounds(window_days: int, today: Optional[date] = None) -> Tuple[date, date]:
    """
    Get the inclusive date range covered by a trailing window.

    Args:
        window_days: Window size in days
        today: Last day of the window, defaults to current date

    Returns:
        Tuple of (start_date, end_date)
    """
    if today is None:
        today = date.today()
    return today - timedelta(days=window_days), today


def generate_dates_in_range(start_date: date, end_date: date) -> List[date]:
    """Generate list of dates between start and end dates inclusive."""
    dates = []
    current = start_date
    while current <= end_date:
        dates.append(current)
        current += timedelta(days=1)
    return dates


def has_user_data(stats: Optional[BaseModel], *observation_lists: Sequence[BaseModel]) -> bool:
    """Check if a user has stored statistics or any observation in a window."""
    return stats is not None or any(observation_lists)
