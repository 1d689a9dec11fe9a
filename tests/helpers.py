"""Helpers for building test observations."""
from datetime import date, timedelta
from typing import List

from src.models.observation import CycleObservation, FlowIntensity


def flow_days(start: date, count: int, intensity: FlowIntensity = FlowIntensity.MEDIUM) -> List[CycleObservation]:
    """Create ``count`` consecutive flow observations starting at ``start``."""
    return [
        CycleObservation(date=start + timedelta(days=i), flow_intensity=intensity)
        for i in range(count)
    ]
