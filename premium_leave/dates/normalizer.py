from __future__ import annotations

import calendar
import numbers
import re
import warnings
from datetime import date, datetime, timedelta
from typing import Any

import pandas as pd

"""Date token and spreadsheet serial normalization.

Supported token forms, tried in order:
- ``DD/MM/YYYY`` / ``D/M/YYYY`` (and ``DD/MM/YY`` with the 2-digit pivot)
- ISO ``YYYY-MM-DD``
- generic fallback through ``pandas.to_datetime`` (day-first), re-validated
  against the year written in the token

Every routine returns None instead of raising on unparsable input so that a
single bad cell never aborts a batch.

Spreadsheet serials are anchored at 1899-12-30; serials produced by
spreadsheet software already absorb the 1900 leap-year bug, so no extra -1
correction is applied.
"""

__all__ = [
    "YEAR_PIVOT",
    "SERIAL_EPOCH",
    "adjust_two_digit_year",
    "parse_date",
    "serial_to_date",
    "coerce_date",
    "is_empty_marker",
    "first_of_month",
    "last_day_of_month",
    "shift_month",
    "add_years",
    "months_between",
    "full_years_between",
    "month_span",
]

YEAR_PIVOT = 50
MIN_YEAR = 1900
MAX_YEAR = 2100
SERIAL_EPOCH = date(1899, 12, 30)
SERIAL_MIN = 1
SERIAL_MAX = 100_000

_DMY_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4}|\d{2})$")
_ISO_RE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")
_YEAR4_RE = re.compile(r"(?<!\d)(\d{4})(?!\d)")


def adjust_two_digit_year(yy: int) -> int:
    """Pivot a 2-digit year: ``>50 -> 19yy``, ``<=50 -> 20yy``."""
    return 1900 + yy if yy > YEAR_PIVOT else 2000 + yy


def _build_date(year: int, month: int, day: int) -> date | None:
    if not 1 <= month <= 12:
        return None
    if not MIN_YEAR <= year <= MAX_YEAR:
        return None
    if not 1 <= day <= calendar.monthrange(year, month)[1]:
        return None
    return date(year, month, day)


def _parse_fallback(text: str) -> date | None:
    stated_years = {int(y) for y in _YEAR4_RE.findall(text)}
    if not stated_years:
        # sem ano explícito o parser genérico inventaria um
        return None
    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            parsed = pd.to_datetime(text, dayfirst=True, errors="coerce")
    except (ValueError, TypeError, OverflowError):
        return None
    if parsed is None or pd.isna(parsed):
        return None
    if parsed.year not in stated_years:
        return None
    return _build_date(parsed.year, parsed.month, parsed.day)


def parse_date(token: Any) -> date | None:
    """Parse a date token into a validated calendar date.

    Args:
        token: Text such as ``"05/03/2026"``, ``"2026-03-05"`` or ``"5/3/26"``.

    Returns:
        The date, or None when the token is empty, unparsable or names an
        impossible calendar day (``"31/04/2024"``).
    """
    if token is None:
        return None
    text = str(token).strip()
    if not text:
        return None

    m = _DMY_RE.match(text)
    if m:
        day, month, raw_year = int(m.group(1)), int(m.group(2)), m.group(3)
        year = int(raw_year)
        if len(raw_year) == 2:
            year = adjust_two_digit_year(year)
        return _build_date(year, month, day)

    m = _ISO_RE.match(text)
    if m:
        return _build_date(int(m.group(1)), int(m.group(2)), int(m.group(3)))

    return _parse_fallback(text)


def serial_to_date(serial: Any) -> date | None:
    """Convert a spreadsheet day serial to a date.

    Only integral values in ``[1, 100000]`` are accepted; integral floats
    (``45000.0``) are tolerated, booleans are not.
    """
    if isinstance(serial, bool):
        return None
    if isinstance(serial, numbers.Integral):
        value = int(serial)
    elif isinstance(serial, numbers.Real):
        as_float = float(serial)
        if not as_float.is_integer():
            return None
        value = int(as_float)
    else:
        return None
    if not SERIAL_MIN <= value <= SERIAL_MAX:
        return None
    return SERIAL_EPOCH + timedelta(days=value)


def coerce_date(value: Any) -> date | None:
    """Turn any spreadsheet cell into a date (or None).

    Dispatches on the cell type: datetimes and pandas Timestamps are truncated,
    numbers are read as day serials and text goes through :func:`parse_date`.
    """
    if value is None or value is pd.NaT:
        return None
    if isinstance(value, str):
        return parse_date(value)
    if isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, numbers.Real):
        return serial_to_date(value)
    return parse_date(str(value))


def is_empty_marker(value: Any) -> bool:
    """True for the legacy "no leave" placeholders (1899-12-29 / serial 0)."""
    if value is None or isinstance(value, bool):
        return False
    if isinstance(value, str):
        return "1899" in value
    if isinstance(value, (datetime, date)):
        return value.year <= 1899
    if isinstance(value, numbers.Real):
        return value == 0
    return False


def first_of_month(d: date) -> date:
    return d.replace(day=1)


def last_day_of_month(year: int, month: int) -> date:
    return date(year, month, calendar.monthrange(year, month)[1])


def shift_month(year: int, month: int, offset: int) -> tuple[int, int]:
    """Move ``(year, month)`` by ``offset`` months, rolling the year as needed."""
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def add_years(d: date, years: int) -> date:
    try:
        return d.replace(year=d.year + years)
    except ValueError:
        # 29/02 em ano não bissexto
        return d.replace(year=d.year + years, day=28)


def months_between(start: date, end: date) -> int:
    """Whole months from ``start`` to ``end``; may be negative."""
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if end.day < start.day:
        months -= 1
    return months


def full_years_between(start: date, end: date) -> int:
    years = end.year - start.year
    if (end.month, end.day) < (start.month, start.day):
        years -= 1
    return years


def month_span(start: date, end: date) -> int:
    """Number of calendar months touched by ``start..end`` (inclusive)."""
    return (end.year - start.year) * 12 + (end.month - start.month) + 1
