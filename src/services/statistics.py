"""
Statistics calculation service for cycle tracking data.

This module partitions flow observations into period events and derives
average cycle length, average period length and the next predicted period
start. The same segmentation is reused by the consistency scorer over a
reporting window.
"""
from datetime import date, timedelta
from statistics import mean
from typing import Iterable, List, Optional, Sequence

from aws_lambda_powertools import Logger

from src.models.observation import CycleObservation
from src.models.statistics import CycleStatistics, PeriodEvent
from src.services.constants import PERIOD_GAP_THRESHOLD_DAYS, PERIOD_LENGTH_LOOKAHEAD_DAYS
from src.services.utils import get_flow_dates, round_half_up

logger = Logger()


def segment_period_starts(flow_dates: Sequence[date], max_gap: int = PERIOD_GAP_THRESHOLD_DAYS) -> List[date]:
    """
    Find the first day of each period in a sorted sequence of flow dates.

    Args:
        flow_dates: Flow dates in ascending order
        max_gap: Largest gap in days that still belongs to the same period

    Returns:
        Period start dates in ascending order

    Note:
        The gap is measured from the previous flow date, not from the period
        start, so a period with one skipped logging day is not split.
    """
    starts = []
    last_date = None

    for flow_date in flow_dates:
        if last_date is None or (flow_date - last_date).days > max_gap:
            starts.append(flow_date)
        last_date = flow_date

    return starts


def find_period_starts(observations: Iterable[CycleObservation]) -> List[date]:
    """
    Find period start dates in a list of cycle observations.

    Args:
        observations: Cycle observations in any order

    Returns:
        Period start dates in ascending order
    """
    return segment_period_starts(get_flow_dates(observations))


def count_period_length(
    start: date,
    flow_dates: Iterable[date],
    lookahead: int = PERIOD_LENGTH_LOOKAHEAD_DAYS
) -> int:
    """
    Count the run of consecutive flow days beginning at a period start.

    The start itself counts as day one; a missing day ends the run even if
    later days still belong to the same period.

    Args:
        start: Period start date
        flow_dates: All flow dates
        lookahead: Maximum number of days checked after the start

    Returns:
        Run length in days (at least 1)
    """
    flow_set = set(flow_dates)
    length = 1
    current = start

    for _ in range(lookahead):
        current += timedelta(days=1)
        if current not in flow_set:
            break
        length += 1

    return length


def find_period_events(observations: Iterable[CycleObservation]) -> List[PeriodEvent]:
    """
    Partition cycle observations into period events.

    Args:
        observations: Cycle observations in any order

    Returns:
        Period events ordered by start date

    Example:
        >>> events = find_period_events(observations)
        >>> for event in events:
        ...     print(f"{event.start_date}: {event.inferred_length} days")
    """
    flow_dates = get_flow_dates(observations)
    return [
        PeriodEvent(start_date=start, inferred_length=count_period_length(start, flow_dates))
        for start in segment_period_starts(flow_dates)
    ]


def calculate_cycle_lengths(starts: Sequence[date]) -> List[int]:
    """
    Calculate the days between consecutive period starts.

    Args:
        starts: Period start dates in ascending order

    Returns:
        Cycle lengths in days, one fewer than the number of starts
    """
    return [(starts[i] - starts[i - 1]).days for i in range(1, len(starts))]


def derive_statistics(observations: Iterable[CycleObservation]) -> CycleStatistics:
    """
    Derive cycle statistics from a user's full cycle history.

    Args:
        observations: All cycle observations for a user, in any order

    Returns:
        CycleStatistics; fields are None when there is not enough data

    Example:
        >>> stats = derive_statistics(store.load_all_cycle_observations(user_id))
        >>> if stats.next_predicted_date:
        ...     print(f"Next period expected on {stats.next_predicted_date}")
    """
    events = find_period_events(observations)

    if not events:
        logger.debug("No flow days found, statistics unavailable")
        return CycleStatistics()

    starts = [event.start_date for event in events]
    cycle_lengths = calculate_cycle_lengths(starts)

    average_cycle_length: Optional[int] = None
    if cycle_lengths:
        average_cycle_length = round_half_up(mean(cycle_lengths))

    average_period_length = round_half_up(mean(event.inferred_length for event in events))

    last_start = starts[-1]
    next_predicted_date = None
    if average_cycle_length:
        next_predicted_date = last_start + timedelta(days=average_cycle_length)

    logger.info("Derived cycle statistics", extra={
        "period_count": len(events),
        "average_cycle_length": average_cycle_length,
        "average_period_length": average_period_length,
        "last_cycle_start_date": str(last_start),
        "next_predicted_date": str(next_predicted_date) if next_predicted_date else None
    })

    return CycleStatistics(
        average_cycle_length=average_cycle_length,
        average_period_length=average_period_length,
        last_cycle_start_date=last_start,
        next_predicted_date=next_predicted_date
    )
