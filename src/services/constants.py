"""
Constants and shared policy values for cycle statistics and scoring.
"""
from typing import Dict, List, Tuple

from src.models.observation import FlowIntensity

# A gap of up to this many days between flow dates stays in the same period
PERIOD_GAP_THRESHOLD_DAYS = 3

# Maximum days looked ahead when counting a period's consecutive flow run
PERIOD_LENGTH_LOOKAHEAD_DAYS = 10

# Reporting windows offered to dashboards and reports
REPORT_WINDOWS: Tuple[int, ...] = (7, 30, 90, 180, 365)
DEFAULT_REPORT_WINDOW = 30

# Consistency score caps
MAX_FREQUENCY_SCORE = 40
MAX_COMPLETENESS_SCORE = 30
MAX_REGULARITY_SCORE = 30

# Daily tracking beyond a month is not additionally rewarded
EXPECTED_TRACKING_DAYS_CAP = 30

# (max coefficient of variation in percent, score), checked in order
REGULARITY_TIERS: List[Tuple[float, int]] = [
    (5.0, 30),
    (10.0, 25),
    (15.0, 20),
    (25.0, 15),
]
IRREGULAR_CYCLE_SCORE = 10
HISTORICAL_REGULARITY_SCORE = 15
UNASSESSED_REGULARITY_SCORE = 10

FLOW_LEVELS: Dict[FlowIntensity, int] = {
    FlowIntensity.NONE: 0,
    FlowIntensity.LIGHT: 1,
    FlowIntensity.MEDIUM: 2,
    FlowIntensity.HEAVY: 3,
    FlowIntensity.VERY_HEAVY: 4,
}

# Insights
CYCLE_HISTORY_LIMIT = 6
SYMPTOM_SLICE_LIMIT = 5
OTHER_SYMPTOMS_LABEL = "Others"
MOOD_TREND_MONTHS = 6
DEFAULT_MOOD_AVERAGE = 3.0
DAILY_SERIES_DAYS = 28
MAX_DAILY_SYMPTOM_LEVEL = 5
PREDICTION_NOTICE_DAYS = 5

SYMPTOM_COLORS: Dict[str, str] = {
    "Cramps": "#8b5cf6",
    "Headache": "#14b8a6",
    "Bloating": "#f43f5e",
    "Fatigue": "#a78bfa",
    "Backache": "#ec4899",
    "Nausea": "#10b981",
    "Spotting": "#f97316",
    "Breast Tenderness": "#8b5cf6",
    "Mood Swings": "#06b6d4",
    "Acne": "#f59e0b",
    OTHER_SYMPTOMS_LABEL: "#7c3aed",
}
DEFAULT_SYMPTOM_COLOR = "#7c3aed"
