"""
Lambda handler for the cycle insights dashboard.
"""
from datetime import date
from typing import Any, Dict, Optional

from aws_lambda_powertools import Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from src.services.consistency import calculate_consistency_breakdown
from src.services.exceptions import InvalidWindowError
from src.services.insights import (
    get_cycle_length_history,
    get_daily_series,
    get_mood_trend,
    get_prediction_notice,
    get_symptom_distribution,
)
from src.services.observation_store import ObservationStore
from src.services.utils import has_user_data
from src.utils.api import error_response, get_query_params, json_response, parse_window_days
from src.utils.logging import logger

tracer = Tracer()

# Initialize shared store (lazy loading)
_store = None

# Mood trend always covers the last six months
MOOD_TREND_WINDOW = 180

def get_store() -> ObservationStore:
    """Get or create the observation store."""
    global _store
    if _store is None:
        _store = ObservationStore()
    return _store

def build_dashboard(
    store: ObservationStore,
    user_id: str,
    window_days: int,
    today: Optional[date] = None
) -> Optional[Dict[str, Any]]:
    """
    Collect statistics, consistency score and chart data for a user.

    Args:
        store: Observation store
        user_id: User identifier
        window_days: Reporting window in days
        today: Last day of the window, defaults to current date

    Returns:
        Dashboard payload, or None when the user has no statistics and
        nothing tracked in the window
    """
    if today is None:
        today = date.today()

    cycle, mood, symptoms = store.load_windowed_observations(user_id, window_days, today=today)
    stats = store.load_statistics(user_id)

    if not has_user_data(stats, cycle, mood, symptoms):
        logger.info("No tracking data for dashboard", extra={"user_id": user_id, "window_days": window_days})
        return None

    score = calculate_consistency_breakdown(window_days, cycle, mood, symptoms, stats)

    trend_moods = mood
    if window_days != MOOD_TREND_WINDOW:
        _, trend_moods, _ = store.load_windowed_observations(user_id, MOOD_TREND_WINDOW, today=today)

    logger.info("Built dashboard", extra={
        "user_id": user_id,
        "window_days": window_days,
        "consistency_score": score.total,
        "has_statistics": stats is not None
    })

    return {
        "user_id": user_id,
        "window_days": window_days,
        "statistics": stats.model_dump(mode="json") if stats else None,
        "consistency": {**score.model_dump(), "total": score.total},
        "prediction_notice": get_prediction_notice(stats, today=today),
        "cycle_chart": get_daily_series(cycle, mood, symptoms, today=today),
        "symptom_distribution": get_symptom_distribution(symptoms),
        "mood_trend": get_mood_trend(trend_moods, today=today),
        "cycle_lengths": get_cycle_length_history(store.load_all_cycle_observations(user_id))
    }

@logger.inject_lambda_context
@tracer.capture_lambda_handler
def handler(event: Dict, context: LambdaContext) -> Dict:
    """
    Handle dashboard request.

    Query parameters:
        user_id: Required user identifier
        window_days: Optional reporting window (7, 30, 90, 180 or 365)

    Args:
        event: API Gateway event
        context: Lambda context

    Returns:
        API Gateway response
    """
    try:
        query_params = get_query_params(event)
        user_id = query_params.get("user_id")

        if not user_id:
            return error_response(400, "user_id is required")

        try:
            window_days = parse_window_days(query_params.get("window_days"))
        except (InvalidWindowError, ValueError) as e:
            return error_response(400, str(e))

        dashboard = build_dashboard(get_store(), user_id, window_days)
        if dashboard is None:
            return error_response(404, "No tracking data found for user")

        return json_response(200, dashboard)

    except Exception as e:
        logger.exception("Error building dashboard")
        return error_response(500, str(e))
