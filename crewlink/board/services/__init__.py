"""Aggregation services built on the page coordinator."""

from .assignments import AssignmentResolver, contractors_query, is_weekend, jobs_query, parse_day
from .auth import AuthService, normalize_pin
from .details import DetailsService
from .materials import MaterialsResolver, group_by_status, select_mode, split_job_tokens
from .status import STATUS_RULES, classify_status
from .timesheets import TimesheetService, parse_hours, to_four_digits

__all__ = [
    "AssignmentResolver",
    "AuthService",
    "DetailsService",
    "MaterialsResolver",
    "TimesheetService",
    "STATUS_RULES",
    "classify_status",
    "contractors_query",
    "group_by_status",
    "is_weekend",
    "jobs_query",
    "normalize_pin",
    "parse_day",
    "parse_hours",
    "select_mode",
    "split_job_tokens",
    "to_four_digits",
]
