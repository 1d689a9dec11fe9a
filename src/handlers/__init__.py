"""
Lambda handlers package for AWS Lambda functions.
"""
from .statistics import handler as dashboard_handler
from .track import handler as track_handler
from .report import handler as report_handler

__all__ = ["dashboard_handler", "track_handler", "report_handler"]
