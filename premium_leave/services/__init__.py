"""Processing services: field resolution, schedule parsing, classification."""

from .batch import BatchResult, process_table
from .field_resolver import get_field, resolve
from .period_generator import expand_range
from .schedule_parser import (
    interpret_schedule,
    interpret_schedule_with_year,
    parse_schedule,
    parse_schedule_with_year,
)
from .statistics import aggregate
from .table_format import detect_format, extract_header_years
from .urgency import UrgencyInputs, assess, classify

__all__ = [
    "BatchResult",
    "process_table",
    "get_field",
    "resolve",
    "expand_range",
    "interpret_schedule",
    "interpret_schedule_with_year",
    "parse_schedule",
    "parse_schedule_with_year",
    "aggregate",
    "detect_format",
    "extract_header_years",
    "UrgencyInputs",
    "assess",
    "classify",
]
