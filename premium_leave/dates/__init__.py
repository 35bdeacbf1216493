"""Calendar helpers: Portuguese month table and date normalization."""

from .months import describe_month, month_from_text, month_name
from .normalizer import coerce_date, parse_date, serial_to_date

__all__ = [
    "describe_month",
    "month_from_text",
    "month_name",
    "coerce_date",
    "parse_date",
    "serial_to_date",
]
