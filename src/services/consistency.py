"""
Tracking consistency scoring service.

This module scores how frequently, completely and regularly a user tracks
within a reporting window. The score is made of three sub-scores:

- tracking frequency (0-40): distinct tracked days against an expectation
  capped at 30 days
- completeness (0-30): share of tracked days with flow, mood and symptom
  entries all present
- regularity (0-30): graded by the coefficient of variation of the cycle
  lengths observed in the window

Typical usage:
    cycle, mood, symptoms = store.load_windowed_observations(user_id, 90)
    stats = store.load_statistics(user_id)
    score = compute_consistency_score(90, cycle, mood, symptoms, stats)
"""
from statistics import mean, pstdev
from typing import Optional, Sequence, Set
from datetime import date

from aws_lambda_powertools import Logger

from src.models.observation import CycleObservation, MoodObservation, SymptomObservation
from src.models.statistics import ConsistencyScore, CycleStatistics
from src.services.constants import (
    EXPECTED_TRACKING_DAYS_CAP,
    HISTORICAL_REGULARITY_SCORE,
    IRREGULAR_CYCLE_SCORE,
    MAX_COMPLETENESS_SCORE,
    MAX_FREQUENCY_SCORE,
    REGULARITY_TIERS,
    UNASSESSED_REGULARITY_SCORE,
)
from src.services.statistics import calculate_cycle_lengths, find_period_starts
from src.services.utils import round_half_up

logger = Logger()


def get_tracked_dates(
    cycle_obs: Sequence[CycleObservation],
    mood_obs: Sequence[MoodObservation],
    symptom_obs: Sequence[SymptomObservation]
) -> Set[date]:
    """Get every distinct date with at least one observation of any kind."""
    return (
        {o.date for o in cycle_obs}
        | {o.date for o in mood_obs}
        | {o.date for o in symptom_obs}
    )


def score_tracking_frequency(tracked_count: int, window_days: int) -> int:
    """
    Score how many days were tracked against the expected number of days.

    Args:
        tracked_count: Number of distinct tracked dates
        window_days: Reporting window size in days

    Returns:
        Score between 0 and 40
    """
    expected = min(window_days, EXPECTED_TRACKING_DAYS_CAP)
    if expected <= 0 or tracked_count <= 0:
        return 0
    return round_half_up(min(MAX_FREQUENCY_SCORE, tracked_count / expected * MAX_FREQUENCY_SCORE))


def score_completeness(
    tracked_dates: Set[date],
    cycle_obs: Sequence[CycleObservation],
    mood_obs: Sequence[MoodObservation],
    symptom_obs: Sequence[SymptomObservation]
) -> int:
    """
    Score the share of tracked days that have all three kinds of entry.

    Returns:
        Score between 0 and 30
    """
    if not tracked_dates:
        return 0

    complete_dates = (
        tracked_dates
        & {o.date for o in cycle_obs}
        & {o.date for o in mood_obs}
        & {o.date for o in symptom_obs}
    )
    return round_half_up(len(complete_dates) / len(tracked_dates) * MAX_COMPLETENESS_SCORE)


def coefficient_of_variation(values: Sequence[int]) -> float:
    """
    Calculate the population coefficient of variation as a percentage.

    Args:
        values: At least one positive value

    Returns:
        Standard deviation divided by mean, times 100
    """
    average = mean(values)
    if average == 0:
        return 0.0
    return pstdev(values) / average * 100


def grade_cycle_variation(cycle_lengths: Sequence[int]) -> int:
    """Map the variation of cycle lengths to a regularity score."""
    cov = coefficient_of_variation(cycle_lengths)
    for max_cov, score in REGULARITY_TIERS:
        if cov <= max_cov:
            return score
    return IRREGULAR_CYCLE_SCORE


def score_regularity(
    cycle_obs: Sequence[CycleObservation],
    stats: Optional[CycleStatistics]
) -> int:
    """
    Score cycle regularity within the window.

    Args:
        cycle_obs: Cycle observations within the window
        stats: All-time statistics, used when the window holds fewer than
            two period starts

    Returns:
        Score between 0 and 30
    """
    if not cycle_obs:
        return 0

    starts = find_period_starts(cycle_obs)
    if len(starts) >= 2:
        return grade_cycle_variation(calculate_cycle_lengths(starts))

    if stats is not None and stats.average_cycle_length is not None:
        return HISTORICAL_REGULARITY_SCORE

    return UNASSESSED_REGULARITY_SCORE


def calculate_consistency_breakdown(
    window_days: int,
    cycle_obs: Sequence[CycleObservation],
    mood_obs: Sequence[MoodObservation],
    symptom_obs: Sequence[SymptomObservation],
    stats: Optional[CycleStatistics] = None
) -> ConsistencyScore:
    """
    Calculate the consistency sub-scores for a reporting window.

    Args:
        window_days: Reporting window size in days
        cycle_obs: Cycle observations already limited to the window
        mood_obs: Mood observations already limited to the window
        symptom_obs: Symptom observations already limited to the window
        stats: Optional all-time cycle statistics

    Returns:
        ConsistencyScore with each sub-score within its bound
    """
    tracked_dates = get_tracked_dates(cycle_obs, mood_obs, symptom_obs)
    if not tracked_dates:
        return ConsistencyScore()

    score = ConsistencyScore(
        tracking_frequency=score_tracking_frequency(len(tracked_dates), window_days),
        completeness=score_completeness(tracked_dates, cycle_obs, mood_obs, symptom_obs),
        regularity=score_regularity(cycle_obs, stats)
    )

    logger.debug("Calculated consistency score", extra={
        "window_days": window_days,
        "tracked_days": len(tracked_dates),
        "tracking_frequency": score.tracking_frequency,
        "completeness": score.completeness,
        "regularity": score.regularity,
        "total": score.total
    })

    return score


def compute_consistency_score(
    window_days: int,
    cycle_obs: Sequence[CycleObservation],
    mood_obs: Sequence[MoodObservation],
    symptom_obs: Sequence[SymptomObservation],
    stats: Optional[CycleStatistics] = None
) -> int:
    """
    Compute the overall 0-100 tracking consistency score for a window.

    Example:
        >>> compute_consistency_score(30, [], [], [], None)
        0
    """
    return calculate_consistency_breakdown(window_days, cycle_obs, mood_obs, symptom_obs, stats).total
