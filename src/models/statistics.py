"""
Derived cycle statistics and consistency score models.
"""
from datetime import date
from typing import Optional
from pydantic import BaseModel, Field

from src.services.constants import MAX_COMPLETENESS_SCORE, MAX_FREQUENCY_SCORE, MAX_REGULARITY_SCORE


class PeriodEvent(BaseModel):
    """
    An inferred period, identified by its first flow day.
    """
    start_date: date
    inferred_length: int = Field(..., ge=1)


class CycleStatistics(BaseModel):
    """
    Cycle statistics derived from a user's full flow history.

    A None field means there is not enough data for that statistic.
    """
    average_cycle_length: Optional[int] = None
    average_period_length: Optional[int] = None
    last_cycle_start_date: Optional[date] = None
    next_predicted_date: Optional[date] = None


class ConsistencyScore(BaseModel):
    """
    Tracking consistency for one reporting window.
    """
    tracking_frequency: int = Field(0, ge=0, le=MAX_FREQUENCY_SCORE)
    completeness: int = Field(0, ge=0, le=MAX_COMPLETENESS_SCORE)
    regularity: int = Field(0, ge=0, le=MAX_REGULARITY_SCORE)

    @property
    def total(self) -> int:
        """Overall score between 0 and 100."""
        return self.tracking_frequency + self.completeness + self.regularity
