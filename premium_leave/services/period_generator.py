from __future__ import annotations

import re
from datetime import date

from ..dates.months import month_from_text, normalize_month_key
from ..dates.normalizer import MAX_YEAR, MIN_YEAR, adjust_two_digit_year, parse_date, shift_month
from ..models.leave_period import LeavePeriod, PeriodKind

"""Legacy month-range expansion ("início de licença" / "final de licença").

Each side of the range is read as ``(month, year | None)``; missing years are
inferred from the other side (or from today's year) so that the range never
runs backwards. One premium-leave period is emitted per calendar month,
inclusive on both ends.
"""

__all__ = [
    "parse_month_text",
    "expand_range",
]

_MONTH_TEXT_RE = re.compile(r"^([a-z]+)\.?\s*(?:/|-|\bde\b)?\s*(\d{4}|\d{2})?$")


def parse_month_text(text: str | None) -> tuple[int, int | None] | None:
    """Read a month reference such as "janeiro", "jan/25" or "outubro 2026".

    Full dates ("05/01/2026") are also accepted and keep their month and year.

    Returns:
        ``(month, year)`` with ``year`` None when the text states no year, or
        None when the text names no month or states a year outside
        ``MIN_YEAR``..``MAX_YEAR``
    """
    if text is None:
        return None
    raw = str(text).strip()
    if not raw:
        return None

    as_date = parse_date(raw)
    if as_date is not None:
        return as_date.month, as_date.year

    key = normalize_month_key(raw)
    m = _MONTH_TEXT_RE.match(key)
    if not m:
        return None
    month = month_from_text(m.group(1))
    if month is None:
        return None
    raw_year = m.group(2)
    if raw_year is None:
        return month, None
    year = int(raw_year)
    if len(raw_year) == 2:
        year = adjust_two_digit_year(year)
    if not MIN_YEAR <= year <= MAX_YEAR:
        return None
    return month, year


def expand_range(start_text: str | None, end_text: str | None, today: date | None = None) -> list[LeavePeriod]:
    """Expand a start-month / end-month pair into monthly periods.

    Year inference, in precedence order:
    - both sides carry a year: use them
    - only the start: the end inherits it, +1 when its month is earlier
    - only the end: the start inherits it, -1 under the same condition
    - neither: today's year for the start, the end +1 when it would precede

    If the end still precedes the start it is moved to the year after the
    start instead of producing an inverted range.

    Args:
        start_text: First leave month, e.g. "novembro" or "nov/2025"
        end_text: Last leave month
        today: Reference date for year-less ranges (defaults to today)

    Returns:
        One period per month, or ``[]`` when either side is unreadable
    """
    start = parse_month_text(start_text)
    end = parse_month_text(end_text)
    if start is None or end is None:
        return []

    start_month, start_year = start
    end_month, end_year = end
    wraps = end_month < start_month

    if start_year is None or end_year is None:
        if start_year is not None:
            end_year = start_year + 1 if wraps else start_year
        elif end_year is not None:
            start_year = end_year - 1 if wraps else end_year
        else:
            start_year = (today or date.today()).year
            end_year = start_year + 1 if wraps else start_year

    if (end_year, end_month) < (start_year, start_month):
        end_year = start_year + 1

    source = f"{str(start_text).strip()} - {str(end_text).strip()}"
    periods = []
    year, month = start_year, start_month
    while (year, month) <= (end_year, end_month):
        periods.append(LeavePeriod.for_month(year, month, PeriodKind.PREMIUM_LEAVE, source_text=source))
        year, month = shift_month(year, month, 1)
    return periods
