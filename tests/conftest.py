"""
Pytest configuration and shared fixtures.
"""
import pytest
from dataclasses import dataclass
from datetime import date, timedelta
from typing import List
from unittest.mock import Mock

from src.models.observation import (
    CycleObservation,
    FlowIntensity,
    MoodObservation,
    SymptomObservation,
)
from src.models.statistics import CycleStatistics
from tests.helpers import flow_days


@pytest.fixture
def two_period_observations() -> List[CycleObservation]:
    """Two five-day periods starting 28 days apart, with non-flow days between."""
    return (
        flow_days(date(2024, 1, 1), 5)
        + [CycleObservation(date=date(2024, 1, 10), flow_intensity=FlowIntensity.NONE)]
        + flow_days(date(2024, 1, 29), 5)
    )


@pytest.fixture
def regular_cycle_observations() -> List[CycleObservation]:
    """Four periods exactly 28 days apart."""
    observations = []
    for i in range(4):
        observations.extend(flow_days(date(2024, 1, 1) + timedelta(days=i * 28), 4))
    return observations


@pytest.fixture
def complete_tracking_days():
    """Cycle, mood and symptom entries on the same ten dates."""
    days = [date(2024, 5, 1) + timedelta(days=i) for i in range(10)]
    cycle = [CycleObservation(date=d, flow_intensity=FlowIntensity.NONE) for d in days]
    mood = [MoodObservation(date=d, mood_score=4, energy_score=3) for d in days]
    symptoms = [SymptomObservation(date=d, symptom_type="Cramps", severity=2) for d in days]
    return cycle, mood, symptoms


@pytest.fixture
def known_statistics() -> CycleStatistics:
    """All-time statistics with a known average cycle length."""
    return CycleStatistics(
        average_cycle_length=28,
        average_period_length=5,
        last_cycle_start_date=date(2024, 1, 29),
        next_predicted_date=date(2024, 2, 26)
    )


@pytest.fixture
def mock_dynamo() -> Mock:
    """Create mock DynamoDB client with an empty table."""
    dynamo = Mock()
    dynamo.query_items.return_value = []
    dynamo.get_item.return_value = None
    return dynamo


@dataclass
class LambdaContext:
    """Minimal Lambda context for invoking decorated handlers."""
    function_name: str = "test"
    memory_limit_in_mb: int = 128
    invoked_function_arn: str = "arn:aws:lambda:us-east-1:123456789012:function:test"
    aws_request_id: str = "da658bd3-2d6f-4e7b-8ec2-937234644fdc"


@pytest.fixture
def lambda_context() -> LambdaContext:
    """Create a Lambda context."""
    return LambdaContext()
