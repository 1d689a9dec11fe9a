"""
Dashboard insight calculations built on tracking observations and statistics.

These functions prepare the data behind dashboard cards and charts: recent
cycle lengths, symptom frequencies, monthly mood averages, a daily series
for the last four weeks and the upcoming-period notice.
"""
from collections import Counter, defaultdict
from datetime import date, timedelta
from math import ceil
from statistics import mean
from typing import Any, Dict, List, Optional, Sequence

from src.models.observation import CycleObservation, MoodObservation, SymptomObservation
from src.models.statistics import CycleStatistics
from src.services.constants import (
    CYCLE_HISTORY_LIMIT,
    DAILY_SERIES_DAYS,
    DEFAULT_MOOD_AVERAGE,
    DEFAULT_SYMPTOM_COLOR,
    FLOW_LEVELS,
    MAX_DAILY_SYMPTOM_LEVEL,
    MOOD_TREND_MONTHS,
    OTHER_SYMPTOMS_LABEL,
    PREDICTION_NOTICE_DAYS,
    SYMPTOM_COLORS,
    SYMPTOM_SLICE_LIMIT,
)
from src.services.statistics import calculate_cycle_lengths, find_period_starts
from src.services.utils import generate_dates_in_range, round_half_up_tenths


def get_cycle_length_history(
    observations: Sequence[CycleObservation],
    limit: int = CYCLE_HISTORY_LIMIT
) -> List[Dict[str, int]]:
    """
    Get the most recent cycle lengths, numbered from 1.

    Args:
        observations: Cycle observations in any order
        limit: Maximum number of cycles returned

    Returns:
        List of {"cycle": n, "days": length} in chronological order
    """
    lengths = calculate_cycle_lengths(find_period_starts(observations))[-limit:]
    return [{"cycle": i + 1, "days": days} for i, days in enumerate(lengths)]


def get_symptom_distribution(
    symptoms: Sequence[SymptomObservation],
    max_slices: int = SYMPTOM_SLICE_LIMIT
) -> List[Dict[str, Any]]:
    """
    Count symptom occurrences by type, most frequent first.

    When there are more types than ``max_slices``, the least frequent are
    grouped under "Others" so the result has exactly ``max_slices`` entries.
    """
    counts = Counter(s.symptom_type for s in symptoms)
    slices = [
        {"name": name, "value": value, "color": SYMPTOM_COLORS.get(name, DEFAULT_SYMPTOM_COLOR)}
        for name, value in sorted(counts.items(), key=lambda item: -item[1])
    ]

    if len(slices) <= max_slices:
        return slices

    top = slices[:max_slices - 1]
    others = sum(s["value"] for s in slices[max_slices - 1:])
    return top + [{
        "name": OTHER_SYMPTOMS_LABEL,
        "value": others,
        "color": SYMPTOM_COLORS[OTHER_SYMPTOMS_LABEL]
    }]


def _month_start(day: date, months_back: int) -> date:
    month_index = day.year * 12 + (day.month - 1) - months_back
    return date(month_index // 12, month_index % 12 + 1, 1)


def get_mood_trend(
    moods: Sequence[MoodObservation],
    today: Optional[date] = None,
    months: int = MOOD_TREND_MONTHS
) -> List[Dict[str, Any]]:
    """
    Average mood score per calendar month for the last few months.

    Args:
        moods: Mood observations
        today: Reference date, defaults to current date
        months: Number of calendar months, ending with the current one

    Returns:
        List of {"month": "Jan", "average": 3.4}, oldest month first.
        Months without scores default to 3.0.
    """
    if today is None:
        today = date.today()

    scores = defaultdict(list)
    for mood in moods:
        if mood.mood_score is not None:
            scores[(mood.date.year, mood.date.month)].append(mood.mood_score)

    trend = []
    for months_back in range(months - 1, -1, -1):
        month = _month_start(today, months_back)
        month_scores = scores.get((month.year, month.month))
        average = round_half_up_tenths(mean(month_scores)) if month_scores else DEFAULT_MOOD_AVERAGE
        trend.append({"month": month.strftime("%b"), "average": average})
    return trend


def get_daily_series(
    cycle_obs: Sequence[CycleObservation],
    mood_obs: Sequence[MoodObservation],
    symptom_obs: Sequence[SymptomObservation],
    today: Optional[date] = None,
    days: int = DAILY_SERIES_DAYS
) -> List[Dict[str, Any]]:
    """
    Build one chart point per day for the last ``days`` days.

    Each point holds the flow level (0-4), a symptom level derived from the
    number of symptoms that day (0-5) and the mood score (0 when missing).
    """
    if today is None:
        today = date.today()

    flow_by_date = {o.date: FLOW_LEVELS[o.flow_intensity] for o in cycle_obs}
    mood_by_date = {o.date: o.mood_score or 0 for o in mood_obs}
    symptom_counts = Counter(o.date for o in symptom_obs)

    series = []
    start = today - timedelta(days=days - 1)
    for index, day in enumerate(generate_dates_in_range(start, today)):
        series.append({
            "day": str(index + 1),
            "date": day.isoformat(),
            "flow": flow_by_date.get(day, 0),
            "symptoms": min(ceil(symptom_counts.get(day, 0) / 2), MAX_DAILY_SYMPTOM_LEVEL),
            "mood": mood_by_date.get(day, 0)
        })
    return series


def get_prediction_notice(
    stats: Optional[CycleStatistics],
    today: Optional[date] = None
) -> Optional[Dict[str, Any]]:
    """
    Build a notice about the predicted next period, if one is due.

    Args:
        stats: Persisted cycle statistics
        today: Reference date, defaults to current date

    Returns:
        Dict with id, title, message and days_until, or None when no notice applies
    """
    if stats is None or stats.next_predicted_date is None:
        return None
    if today is None:
        today = date.today()

    days_until = (stats.next_predicted_date - today).days

    if 0 <= days_until <= PREDICTION_NOTICE_DAYS:
        if days_until == 0:
            when = "today"
        elif days_until == 1:
            when = "tomorrow"
        else:
            when = f"in {days_until} days"
        return {
            "id": "period-prediction",
            "title": "Period Coming Soon",
            "message": f"Your period is predicted to start {when}. Consider stocking up on supplies.",
            "days_until": days_until
        }

    if days_until == -1:
        return {
            "id": "period-started",
            "title": "Period Predicted Today",
            "message": "Your period is predicted to have started. Track your flow to improve future predictions.",
            "days_until": days_until
        }

    return None
