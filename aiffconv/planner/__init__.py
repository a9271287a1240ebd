"""Run planning and validation."""

from aiffconv.planner.resolver import apply_format_flags, resolve_build_plan
from aiffconv.planner.validator import validate_request

__all__ = ["apply_format_flags", "resolve_build_plan", "validate_request"]
