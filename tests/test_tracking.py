"""
Tests for saving tracking entries and refreshing statistics.
"""
import pytest
from datetime import date
from unittest.mock import Mock
from pydantic import ValidationError

from src.models.observation import FlowIntensity
from src.models.statistics import CycleStatistics
from src.services.tracking import (
    TrackingEntry,
    delete_cycle_entry,
    refresh_statistics,
    save_tracking_entry,
)
from tests.helpers import flow_days

@pytest.fixture
def store(two_period_observations):
    """Create a mocked observation store holding two periods."""
    mock_store = Mock()
    mock_store.load_all_cycle_observations.return_value = two_period_observations
    return mock_store

def test_refresh_statistics(store):
    """Statistics are derived from the full history and stored."""
    stats = refresh_statistics(store, "123")

    assert stats.average_cycle_length == 28
    store.load_all_cycle_observations.assert_called_once_with("123")
    store.upsert_statistics.assert_called_once_with("123", stats)

def test_refresh_statistics_empty_history():
    """An emptied history stores all-None statistics."""
    mock_store = Mock()
    mock_store.load_all_cycle_observations.return_value = []

    stats = refresh_statistics(mock_store, "123")

    assert stats == CycleStatistics()
    mock_store.upsert_statistics.assert_called_once_with("123", CycleStatistics())

def test_save_tracking_entry(store):
    """A day's entry is split into observations before statistics refresh."""
    entry = TrackingEntry(
        date=date(2024, 1, 29),
        flow_intensity="heavy",
        mood_score=2,
        energy_score=1,
        symptoms=["Cramps", "Fatigue", "Cramps"],
        notes="Rough day"
    )

    stats = save_tracking_entry(store, "123", entry)

    cycle = store.save_cycle_observation.call_args[0][1]
    assert cycle.flow_intensity == FlowIntensity.HEAVY
    assert cycle.notes == "Rough day"

    mood = store.save_mood_observation.call_args[0][1]
    assert mood.mood_score == 2
    assert mood.energy_score == 1

    user_id, day, symptoms = store.replace_symptom_observations.call_args[0]
    assert day == date(2024, 1, 29)
    assert [s.symptom_type for s in symptoms] == ["Cramps", "Fatigue"]
    assert all(s.severity == 1 for s in symptoms)

    assert stats.next_predicted_date == date(2024, 2, 26)
    assert store.upsert_statistics.called

def test_save_tracking_entry_without_symptoms_clears_day(store):
    """An empty symptom list removes the day's symptoms."""
    save_tracking_entry(store, "123", TrackingEntry(date=date(2024, 2, 1)))

    _, _, symptoms = store.replace_symptom_observations.call_args[0]
    assert symptoms == []

def test_tracking_entry_validation():
    """Scores outside 1-5 and unknown flow values are rejected."""
    with pytest.raises(ValidationError):
        TrackingEntry(date=date(2024, 1, 1), mood_score=6)
    with pytest.raises(ValidationError):
        TrackingEntry(date=date(2024, 1, 1), flow_intensity="extreme")
    with pytest.raises(ValidationError):
        TrackingEntry(date=date(2024, 1, 1), symptoms=[""])

def test_delete_cycle_entry(store):
    """Deleting a day refreshes statistics from the remaining history."""
    store.load_all_cycle_observations.return_value = flow_days(date(2024, 1, 1), 3)

    stats = delete_cycle_entry(store, "123", date(2024, 1, 29))

    store.delete_cycle_observation.assert_called_once_with("123", date(2024, 1, 29))
    assert stats.average_cycle_length is None
    assert stats.last_cycle_start_date == date(2024, 1, 1)
