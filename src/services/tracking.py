"""
Service module for recording daily tracking entries.

Every change to a user's cycle observations is followed by a statistics
refresh, so the persisted statistics always reflect the full flow history.

Typical usage:
    store = ObservationStore()
    stats = save_tracking_entry(store, user_id, entry)
"""
from datetime import date
from typing import Annotated, List, Optional

from pydantic import BaseModel, Field

from src.models.observation import (
    CycleObservation,
    FlowIntensity,
    MoodObservation,
    SymptomObservation,
)
from src.models.statistics import CycleStatistics
from src.services.observation_store import ObservationStore
from src.services.statistics import derive_statistics
from src.utils.logging import logger


class TrackingEntry(BaseModel):
    """Everything a user logs for one day."""
    date: date
    flow_intensity: FlowIntensity = FlowIntensity.NONE
    mood_score: Optional[int] = Field(None, ge=1, le=5)
    energy_score: Optional[int] = Field(None, ge=1, le=5)
    symptoms: List[Annotated[str, Field(min_length=1)]] = Field(default_factory=list)
    severity: Optional[int] = Field(1, ge=1, le=5)
    notes: Optional[str] = None


def refresh_statistics(store: ObservationStore, user_id: str) -> CycleStatistics:
    """
    Recompute and persist a user's cycle statistics from their full history.

    Args:
        store: Observation store
        user_id: User identifier

    Returns:
        The newly stored statistics
    """
    history = store.load_all_cycle_observations(user_id)
    stats = derive_statistics(history)
    store.upsert_statistics(user_id, stats)

    logger.info("Refreshed cycle statistics", extra={
        "user_id": user_id,
        "observation_count": len(history)
    })
    return stats


def save_tracking_entry(store: ObservationStore, user_id: str, entry: TrackingEntry) -> CycleStatistics:
    """
    Store a day's flow, mood and symptoms, then refresh statistics.

    The day's previous symptoms are replaced by the new list.

    Args:
        store: Observation store
        user_id: User identifier
        entry: The day's tracking entry

    Returns:
        Statistics recomputed after the write
    """
    store.save_cycle_observation(user_id, CycleObservation(
        date=entry.date,
        flow_intensity=entry.flow_intensity,
        notes=entry.notes
    ))
    store.save_mood_observation(user_id, MoodObservation(
        date=entry.date,
        mood_score=entry.mood_score,
        energy_score=entry.energy_score,
        notes=entry.notes
    ))
    store.replace_symptom_observations(user_id, entry.date, [
        SymptomObservation(date=entry.date, symptom_type=symptom, severity=entry.severity)
        for symptom in dict.fromkeys(entry.symptoms)
    ])

    logger.info("Saved tracking entry", extra={
        "user_id": user_id,
        "date": entry.date.isoformat(),
        "flow_intensity": entry.flow_intensity.value,
        "symptom_count": len(entry.symptoms)
    })

    return refresh_statistics(store, user_id)


def delete_cycle_entry(store: ObservationStore, user_id: str, day: date) -> CycleStatistics:
    """
    Remove a day's cycle observation, then refresh statistics.

    Returns:
        Statistics recomputed after the delete
    """
    store.delete_cycle_observation(user_id, day)
    logger.info("Deleted cycle observation", extra={"user_id": user_id, "date": day.isoformat()})
    return refresh_statistics(store, user_id)
