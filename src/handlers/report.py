"""
Lambda handler for report data requests.

Reports bundle the raw observations of a window with the user's cycle
statistics and consistency score, for rendering by the report builder.
"""
from datetime import date
from typing import Any, Dict, List, Optional
import json

from aws_lambda_powertools import Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import BaseModel, Field, ValidationError, field_validator

from src.services.consistency import calculate_consistency_breakdown
from src.services.constants import DEFAULT_REPORT_WINDOW
from src.services.observation_store import ObservationStore
from src.services.utils import has_user_data, validate_window, window_bounds
from src.utils.api import error_response, json_response
from src.utils.logging import logger

tracer = Tracer()

DATA_TYPES = ("all", "cycle", "mood", "symptoms")

# Initialize shared store (lazy loading)
_store = None

def get_store() -> ObservationStore:
    """Get or create the observation store."""
    global _store
    if _store is None:
        _store = ObservationStore()
    return _store

class ReportRequest(BaseModel):
    """Report data request model."""
    user_id: str = Field(..., min_length=1)
    window_days: int = DEFAULT_REPORT_WINDOW
    data_types: List[str] = Field(default_factory=lambda: ["all"])

    @field_validator("window_days")
    @classmethod
    def check_window(cls, value: int) -> int:
        return validate_window(value)

    @field_validator("data_types")
    @classmethod
    def check_data_types(cls, value: List[str]) -> List[str]:
        unknown = [t for t in value if t not in DATA_TYPES]
        if unknown:
            raise ValueError(f"Unknown data types: {', '.join(unknown)}")
        return value or ["all"]

    def includes(self, data_type: str) -> bool:
        """Check if a data type was requested."""
        return "all" in self.data_types or data_type in self.data_types

def fetch_report_data(
    store: ObservationStore,
    request: ReportRequest,
    today: Optional[date] = None
) -> Optional[Dict[str, Any]]:
    """
    Collect report data for the requested window and data types.

    Args:
        store: Observation store
        request: Validated report request
        today: Last day of the window, defaults to current date

    Returns:
        Report payload with window bounds, requested observations,
        statistics and consistency score, or None when the user has no
        statistics and nothing tracked in the window
    """
    if today is None:
        today = date.today()

    cycle, mood, symptoms = store.load_windowed_observations(request.user_id, request.window_days, today=today)
    stats = store.load_statistics(request.user_id)

    if not has_user_data(stats, cycle, mood, symptoms):
        logger.info("No tracking data for report", extra={
            "user_id": request.user_id,
            "window_days": request.window_days
        })
        return None

    score = calculate_consistency_breakdown(request.window_days, cycle, mood, symptoms, stats)
    start, end = window_bounds(request.window_days, today)

    report: Dict[str, Any] = {
        "period": request.window_days,
        "start_date": start.isoformat(),
        "end_date": end.isoformat(),
        "statistics": stats.model_dump(mode="json") if stats else None,
        "consistency": {**score.model_dump(), "total": score.total}
    }

    if request.includes("cycle"):
        report["cycle_data"] = [o.model_dump(mode="json") for o in cycle]
    if request.includes("symptoms"):
        report["symptoms_data"] = [o.model_dump(mode="json") for o in symptoms]
    if request.includes("mood"):
        report["mood_data"] = [o.model_dump(mode="json") for o in mood]

    logger.info("Collected report data", extra={
        "user_id": request.user_id,
        "window_days": request.window_days,
        "data_types": request.data_types,
        "consistency_score": score.total
    })
    return report

@logger.inject_lambda_context
@tracer.capture_lambda_handler
def handler(event: Dict, context: LambdaContext) -> Dict:
    """
    Handle report data request.

    Args:
        event: API Gateway Lambda proxy event
        context: Lambda context

    Returns:
        API Gateway Lambda proxy response
    """
    try:
        try:
            request = ReportRequest.model_validate(json.loads(event.get("body") or "{}"))
        except json.JSONDecodeError:
            return error_response(400, "Request body must be valid JSON")
        except ValidationError as e:
            return error_response(400, f"Invalid report request: {e.errors(include_url=False)[0]['msg']}")

        report = fetch_report_data(get_store(), request)
        if report is None:
            return error_response(404, "No tracking data found for user")

        return json_response(200, report)

    except Exception as e:
        logger.exception("Error generating report data")
        return error_response(500, str(e))
