"""
Observation models for daily flow, mood and symptom tracking.
"""
from datetime import date
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class FlowIntensity(str, Enum):
    """
    Menstrual flow intensity logged for a single day.
    """
    NONE = "none"
    LIGHT = "light"
    MEDIUM = "medium"
    HEAVY = "heavy"
    VERY_HEAVY = "very_heavy"

    @property
    def is_flow(self) -> bool:
        """Check if this intensity counts as a flow day."""
        return self != FlowIntensity.NONE


class CycleObservation(BaseModel):
    """
    Represents the flow observation for one calendar day.
    """
    date: date
    flow_intensity: FlowIntensity
    notes: Optional[str] = None


class MoodObservation(BaseModel):
    """
    Represents the mood and energy observation for one calendar day.
    """
    date: date
    mood_score: Optional[int] = Field(None, ge=1, le=5)
    energy_score: Optional[int] = Field(None, ge=1, le=5)
    notes: Optional[str] = None


class SymptomObservation(BaseModel):
    """
    Represents a single symptom logged on a day. Several may share a date.
    """
    date: date
    symptom_type: str = Field(..., min_length=1)
    severity: Optional[int] = Field(None, ge=1, le=5)
