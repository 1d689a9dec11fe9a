"""Tests for statistics calculation service."""
from datetime import date

import pytest
from src.models.observation import CycleObservation, FlowIntensity
from src.models.statistics import CycleStatistics
from src.services.statistics import (
    calculate_cycle_lengths,
    count_period_length,
    derive_statistics,
    find_period_events,
    find_period_starts,
    segment_period_starts,
)
from tests.helpers import flow_days

def test_derive_statistics_with_two_periods(two_period_observations):
    """Two five-day periods 28 days apart."""
    stats = derive_statistics(two_period_observations)

    assert stats.average_period_length == 5
    assert stats.average_cycle_length == 28
    assert stats.last_cycle_start_date == date(2024, 1, 29)
    assert stats.next_predicted_date == date(2024, 2, 26)

def test_find_period_events_with_two_periods(two_period_observations):
    """Period events carry their start date and run length."""
    events = find_period_events(two_period_observations)

    assert [e.start_date for e in events] == [date(2024, 1, 1), date(2024, 1, 29)]
    assert [e.inferred_length for e in events] == [5, 5]

def test_derive_statistics_single_flow_day():
    """A single logged flow day has no cycle length or prediction."""
    stats = derive_statistics([
        CycleObservation(date=date(2024, 3, 10), flow_intensity=FlowIntensity.LIGHT)
    ])

    assert stats.average_period_length == 1
    assert stats.average_cycle_length is None
    assert stats.next_predicted_date is None
    assert stats.last_cycle_start_date == date(2024, 3, 10)

def test_small_gap_stays_in_same_period_but_breaks_run():
    """A two-day gap keeps one period, but its length only counts consecutive days."""
    observations = [
        CycleObservation(date=date(2024, 4, 1), flow_intensity=FlowIntensity.MEDIUM),
        CycleObservation(date=date(2024, 4, 3), flow_intensity=FlowIntensity.MEDIUM),
    ]

    events = find_period_events(observations)

    assert len(events) == 1
    assert events[0].start_date == date(2024, 4, 1)
    assert events[0].inferred_length == 1

def test_gap_threshold_boundary():
    """A gap of exactly 3 days continues the period, 4 days starts a new one."""
    assert segment_period_starts([date(2024, 1, 1), date(2024, 1, 4)]) == [date(2024, 1, 1)]
    assert segment_period_starts([date(2024, 1, 1), date(2024, 1, 5)]) == [
        date(2024, 1, 1), date(2024, 1, 5)
    ]

def test_gap_measured_from_previous_flow_day():
    """Spotting every three days never starts a new period."""
    dates = [date(2024, 1, 1), date(2024, 1, 4), date(2024, 1, 7), date(2024, 1, 10)]
    assert segment_period_starts(dates) == [date(2024, 1, 1)]

def test_derive_statistics_empty():
    """No observations yields all-None statistics."""
    assert derive_statistics([]) == CycleStatistics()

def test_none_flow_never_starts_or_extends_period():
    """Days logged with no flow are ignored."""
    observations = [
        CycleObservation(date=date(2024, 1, 1), flow_intensity=FlowIntensity.NONE),
        CycleObservation(date=date(2024, 1, 2), flow_intensity=FlowIntensity.HEAVY),
        CycleObservation(date=date(2024, 1, 3), flow_intensity=FlowIntensity.NONE),
        CycleObservation(date=date(2024, 1, 4), flow_intensity=FlowIntensity.LIGHT),
    ]

    events = find_period_events(observations)

    assert len(events) == 1
    assert events[0].start_date == date(2024, 1, 2)
    assert events[0].inferred_length == 1

def test_only_none_flow_yields_empty_statistics():
    """A history without flow days has no statistics at all."""
    observations = [
        CycleObservation(date=date(2024, 1, d), flow_intensity=FlowIntensity.NONE)
        for d in range(1, 6)
    ]

    stats = derive_statistics(observations)

    assert stats.average_period_length is None
    assert stats.last_cycle_start_date is None

def test_input_order_does_not_change_result(two_period_observations):
    """Statistics are computed on sorted observations."""
    shuffled = list(reversed(two_period_observations))
    shuffled = shuffled[3:] + shuffled[:3]

    assert derive_statistics(shuffled) == derive_statistics(two_period_observations)

def test_period_length_lookahead_is_capped():
    """A long run counts at most the start day plus ten days."""
    flow = [o.date for o in flow_days(date(2024, 1, 1), 15)]
    assert count_period_length(date(2024, 1, 1), flow) == 11

def test_average_cycle_length_rounds_half_up():
    """Averages of 28 and 29 days round to 29."""
    observations = (
        flow_days(date(2024, 1, 1), 1)
        + flow_days(date(2024, 1, 29), 1)
        + flow_days(date(2024, 2, 27), 1)
    )

    stats = derive_statistics(observations)

    assert calculate_cycle_lengths(find_period_starts(observations)) == [28, 29]
    assert stats.average_cycle_length == 29
    assert stats.next_predicted_date == date(2024, 3, 27)

def test_average_period_length_rounds_half_up():
    """Periods of 2 and 3 days average to 3."""
    observations = flow_days(date(2024, 1, 1), 2) + flow_days(date(2024, 1, 29), 3)
    assert derive_statistics(observations).average_period_length == 3

@pytest.mark.parametrize("starts,expected", [
    ([], []),
    ([date(2024, 1, 1)], []),
    ([date(2024, 1, 1), date(2024, 1, 29), date(2024, 2, 28)], [28, 30]),
])
def test_calculate_cycle_lengths(starts, expected):
    """Cycle lengths are the gaps between consecutive starts."""
    assert calculate_cycle_lengths(starts) == expected

def test_fewer_than_two_periods_has_no_cycle_length():
    """One period of several days still has no cycle length."""
    stats = derive_statistics(flow_days(date(2024, 6, 1), 4))

    assert stats.average_cycle_length is None
    assert stats.next_predicted_date is None
    assert stats.average_period_length == 4
