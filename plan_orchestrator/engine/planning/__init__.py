"""Plan validation and plan id helpers."""

from .plan_id import PlanIdParts, format_plan_version_id, parse_plan_id
from .validation import collect_plan_errors, validate_plan

__all__ = [
    "PlanIdParts",
    "collect_plan_errors",
    "format_plan_version_id",
    "parse_plan_id",
    "validate_plan",
]
