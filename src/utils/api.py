"""
API Gateway request and response helpers.
"""
import json
from typing import Any, Dict, Optional

from src.services.constants import DEFAULT_REPORT_WINDOW
from src.services.utils import validate_window


def json_response(status_code: int, body: Dict[str, Any]) -> Dict[str, Any]:
    """
    Build an API Gateway proxy response with a JSON body.

    Dates and other non-JSON values are serialized as strings.
    """
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body, default=str)
    }


def error_response(status_code: int, message: str) -> Dict[str, Any]:
    """Build an error response."""
    return json_response(status_code, {"error": message})


def get_query_params(event: Dict[str, Any]) -> Dict[str, str]:
    """Get query string parameters, which API Gateway sends as null when absent."""
    return event.get("queryStringParameters") or {}


def parse_window_days(value: Optional[Any]) -> int:
    """
    Parse a reporting window from a request parameter.

    Args:
        value: Raw parameter value, None for the default window

    Returns:
        A supported window size in days

    Raises:
        InvalidWindowError: If the value is not a supported window
        ValueError: If the value is not an integer
    """
    if value is None or value == "":
        return DEFAULT_REPORT_WINDOW
    return validate_window(int(value))
