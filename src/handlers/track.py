"""
Lambda handler for saving and deleting daily tracking entries.
"""
from datetime import date
from typing import Dict
import json

from aws_lambda_powertools import Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError

from src.services.observation_store import ObservationStore
from src.services.tracking import TrackingEntry, delete_cycle_entry, save_tracking_entry
from src.utils.api import error_response, get_query_params, json_response
from src.utils.logging import log_exception, logger

tracer = Tracer()

# Initialize shared store (lazy loading)
_store = None

def get_store() -> ObservationStore:
    """Get or create the observation store."""
    global _store
    if _store is None:
        _store = ObservationStore()
    return _store

def handle_save(event: Dict) -> Dict:
    """Store the entry in the request body and return refreshed statistics."""
    try:
        body = json.loads(event.get("body") or "{}")
    except json.JSONDecodeError:
        return error_response(400, "Request body must be valid JSON")

    if not isinstance(body, dict):
        return error_response(400, "Request body must be a JSON object")

    user_id = body.pop("user_id", None)
    if not user_id:
        return error_response(400, "user_id is required")

    try:
        entry = TrackingEntry(**body)
    except ValidationError as e:
        logger.warning("Invalid tracking entry", extra={
            "user_id": user_id,
            "errors": e.errors(include_url=False)
        })
        return error_response(400, f"Invalid tracking entry: {e.error_count()} error(s)")

    stats = save_tracking_entry(get_store(), user_id, entry)
    return json_response(200, {
        "message": "Entry saved",
        "user_id": user_id,
        "date": entry.date.isoformat(),
        "statistics": stats.model_dump(mode="json")
    })

def handle_delete(event: Dict) -> Dict:
    """Delete the cycle observation for the requested date."""
    query_params = get_query_params(event)
    user_id = query_params.get("user_id")
    date_str = query_params.get("date")

    if not user_id or not date_str:
        return error_response(400, "user_id and date are required")

    try:
        day = date.fromisoformat(date_str)
    except ValueError:
        return error_response(400, "date must be in YYYY-MM-DD format")

    stats = delete_cycle_entry(get_store(), user_id, day)
    return json_response(200, {
        "message": "Entry deleted",
        "user_id": user_id,
        "date": day.isoformat(),
        "statistics": stats.model_dump(mode="json")
    })

@logger.inject_lambda_context
@tracer.capture_lambda_handler
def handler(event: Dict, context: LambdaContext) -> Dict:
    """
    Handle tracking entry requests.

    POST stores a day's entry; DELETE removes a day's cycle observation.
    Both refresh the user's cycle statistics before responding.

    Args:
        event: API Gateway event
        context: Lambda context

    Returns:
        API Gateway response
    """
    try:
        method = event.get("httpMethod", "POST").upper()

        if method == "POST":
            return handle_save(event)
        if method == "DELETE":
            return handle_delete(event)

        return error_response(405, f"Method {method} not allowed")

    except Exception as e:
        log_exception(logger, "Error processing tracking entry", extra={
            "method": event.get("httpMethod"),
            "error_type": type(e).__name__,
            "error_details": str(e)
        })
        return error_response(500, str(e))
