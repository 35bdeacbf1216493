from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date

from ..dates.months import MONTH_ABBREVIATIONS, month_from_text, month_name_pattern
from ..dates.normalizer import (
    MAX_YEAR,
    MIN_YEAR,
    adjust_two_digit_year,
    last_day_of_month,
    parse_date,
    shift_month,
)
from ..models.leave_period import LeavePeriod, PeriodKind, ScheduleStatus

logger = logging.getLogger(__name__)

"""Free-text schedule interpretation ("cronograma").

The text is lower-cased and trimmed, checked against the ambiguity guard and
then offered to an explicit, ordered list of named handlers. Each handler is
a pure function ``text -> list[LeavePeriod]``; an empty list means "no
match" and the dispatcher moves on. The first handler producing periods
wins and later handlers never run.

Handler order (see ``SCHEDULE_HANDLERS``):
1. starts_at             "início em 03/2026 (12 meses consecutivos)"
2. from_date_recurring   "a partir de 03/2026, um mês por ano"
3. specific_plus_annual  "15/02/2026 e janeiro de cada ano a partir de 2027"
4. specific_dates        "10/05/2026 e 10/05/2027"
5. listed_months         "meses: 09/2026; 09/2027"
6. abbreviated_month_year "jan.-28, fev.-29"
7. month_year_annual     "jan/2030 uma por ano"

Unless noted otherwise a period covers its whole start month: day-level
detail in the text is discarded.

The header-year variant additionally understands "<N> meses <DD>/<MM>" and
"<N> meses <DD>/<MM> a <DD>/<MM>" using a year taken from the column header.
"""

__all__ = [
    "ScheduleInterpretation",
    "SCHEDULE_HANDLERS",
    "ANNUAL_REPETITIONS",
    "MONTHLY_REPETITIONS",
    "is_ambiguous",
    "interpret_schedule",
    "interpret_schedule_with_year",
    "parse_schedule",
    "parse_schedule_with_year",
]

ANNUAL_REPETITIONS = 5
MONTHLY_REPETITIONS = 12
DEFAULT_CONSECUTIVE_COUNT = 12

_SPACES_RE = re.compile(r"\s+")
_YEAR4_RE = re.compile(r"\d{4}")
_AMBIGUOUS_RE = re.compile(
    r"um\s+m[êe]s\s*(?:\([^)]*\)\s*)?a\s*cada\s*ano(?!\s*,\s*a\s*partir\s+de)"
)

_STARTS_AT_RE = re.compile(r"in[ií]cio\s+em\s+([^.]+)")
_TOKEN_SPLIT_RE = re.compile(r"[\s,.;:()]+")
_PARENTHETICAL_RE = re.compile(r"\(([^)]*)\)")
_COUNT_RE = re.compile(r"\d+")
_FROM_MONTH_YEAR_RE = re.compile(r"a\s+partir\s+de\s+(\d{1,2})/(\d{4})(?![\d/])")
_FROM_FULL_DATE_RE = re.compile(r"a\s+partir\s+de\s+(\d{1,2}/\d{1,2}/(?:\d{4}|\d{2}))(?!\d)")
_FROM_YEAR_RE = re.compile(r"a\s+partir\s+de\s+(\d{4})(?![\d/])")
_SPECIFIC_DATE_RE = re.compile(r"(?<![\d/])(\d{1,2}/\d{1,2}/(?:\d{4}|\d{2}))(?![\d/])")
_LISTED_RE = re.compile(r"meses\s*:\s*([^.]+)")
_LISTED_SPLIT_RE = re.compile(r"[;,]")
_LISTED_ITEM_RE = re.compile(r"(\d{1,2})/(\d{4})")
_ABBREVIATED_RE = re.compile(r"\b(" + "|".join(MONTH_ABBREVIATIONS) + r")\.?-(\d{2})\b")
_MONTH_YEAR_RE = re.compile(r"\b(" + month_name_pattern() + r")[/\s]*(\d{4})\b")

_HY_RANGE_RE = re.compile(
    r"(\d+)\s*m[eê]s(?:es)?\s*(\d{1,2})/(\d{1,2})\s*(?:-|–|—|at[ée]|a(?=\s))\s*(\d{1,2})/(\d{1,2})(?![\d/])"
)
_HY_RELATIVE_RE = re.compile(
    r"(\d+)\s*m[eê]s(?:es)?\s*(\d{1,2})/(\d{1,2}|" + month_name_pattern() + r")(?![\d/])"
)

_PERIOD_MARKERS = ("início em", "inicio em", "a partir de")


@dataclass(frozen=True)
class ScheduleInterpretation:
    periods: tuple[LeavePeriod, ...]
    status: ScheduleStatus
    handler: str | None = None  # nome do handler vencedor

    @property
    def failed(self) -> bool:
        return self.status.is_failure


def _normalize_text(text: str | None) -> str:
    if text is None:
        return ""
    return _SPACES_RE.sub(" ", str(text).replace("\u00a0", " ")).strip().lower()


def _valid_month(year: int, month: int) -> bool:
    return 1 <= month <= 12 and MIN_YEAR <= year <= MAX_YEAR


def _read_month_token(token: str) -> tuple[int, int] | None:
    """Read ``MM/AAAA``, ``MM/AA`` or ``DD/MM/AA(AA)`` into ``(year, month)``."""
    parts = token.strip().split("/")
    if not all(p.isdigit() for p in parts):
        return None
    if len(parts) == 2:
        month, year = int(parts[0]), int(parts[1])
        if len(parts[1]) == 2:
            year = adjust_two_digit_year(year)
        elif len(parts[1]) != 4:
            return None
    elif len(parts) == 3:
        parsed = parse_date(token)
        if parsed is None:
            return None
        month, year = parsed.month, parsed.year
    else:
        return None
    if not _valid_month(year, month):
        return None
    return year, month


def _yearly(year: int, month: int, kind: PeriodKind, text: str) -> list[LeavePeriod]:
    return [
        LeavePeriod.for_month(year + i, month, kind, source_text=text)
        for i in range(ANNUAL_REPETITIONS)
        if year + i <= MAX_YEAR
    ]


def _monthly(year: int, month: int, count: int, kind: PeriodKind, text: str) -> list[LeavePeriod]:
    periods = []
    for i in range(count):
        y, m = shift_month(year, month, i)
        periods.append(LeavePeriod.for_month(y, m, kind, source_text=text))
    return periods


def is_ambiguous(text: str) -> bool:
    """Yearly recurrence ("um mês a cada ano") with no year anywhere in the text."""
    normalized = _normalize_text(text)
    return bool(_AMBIGUOUS_RE.search(normalized)) and not _YEAR4_RE.search(normalized)


def _starts_at(text: str) -> list[LeavePeriod]:
    m = _STARTS_AT_RE.search(text)
    if not m:
        return []
    token = next((t for t in _TOKEN_SPLIT_RE.split(m.group(1)) if "/" in t), None)
    if token is None:
        return []
    anchor = _read_month_token(token)
    if anchor is None:
        return []
    year, month = anchor

    # contagem: primeiro número do primeiro parêntese após "início em"
    count_m = None
    paren = _PARENTHETICAL_RE.search(text, m.start(1))
    if paren:
        count_m = _COUNT_RE.search(paren.group(1))
    count = int(count_m.group(0)) if count_m else DEFAULT_CONSECUTIVE_COUNT
    if count <= 0:
        count = DEFAULT_CONSECUTIVE_COUNT

    if "consecutiv" in text:
        return _monthly(year, month, count, PeriodKind.CONSECUTIVE, text)
    return [
        LeavePeriod.for_month(
            year,
            month,
            PeriodKind.SINGLE,
            months_count=count if count_m else None,
            source_text=text,
        )
    ]


def _from_date_recurring(text: str) -> list[LeavePeriod]:
    anchor: tuple[int, int] | None = None
    m = _FROM_MONTH_YEAR_RE.search(text)
    if m:
        month, year = int(m.group(1)), int(m.group(2))
        if _valid_month(year, month):
            anchor = (year, month)
    else:
        m = _FROM_FULL_DATE_RE.search(text)
        if m:
            parsed = parse_date(m.group(1))
            if parsed is not None:
                anchor = (parsed.year, parsed.month)
    if anchor is None:
        return []

    year, month = anchor
    if "cada ano" in text or "por ano" in text:
        return _yearly(year, month, PeriodKind.ANNUAL, text)
    return _monthly(year, month, MONTHLY_REPETITIONS, PeriodKind.MONTHLY, text)


def _specific_plus_annual(text: str) -> list[LeavePeriod]:
    if not ("janeiro" in text and "cada ano" in text and "a partir de" in text):
        return []
    periods: list[LeavePeriod] = []
    for token in _SPECIFIC_DATE_RE.findall(text):
        parsed = parse_date(token)
        if parsed is not None:
            periods.append(
                LeavePeriod.for_month(parsed.year, parsed.month, PeriodKind.SPECIFIC, source_text=text)
            )
            break
    m = _FROM_YEAR_RE.search(text)
    if m and _valid_month(int(m.group(1)), 1):
        periods.extend(_yearly(int(m.group(1)), 1, PeriodKind.ANNUAL, text))
    return periods


def _specific_dates(text: str) -> list[LeavePeriod]:
    if any(marker in text for marker in _PERIOD_MARKERS):
        return []
    periods = []
    for token in _SPECIFIC_DATE_RE.findall(text):
        parsed = parse_date(token)
        if parsed is None:
            continue
        periods.append(
            LeavePeriod.for_month(parsed.year, parsed.month, PeriodKind.SPECIFIC, source_text=text)
        )
    return periods


def _listed_months(text: str) -> list[LeavePeriod]:
    m = _LISTED_RE.search(text)
    if not m:
        return []
    periods = []
    for item in _LISTED_SPLIT_RE.split(m.group(1)):
        im = _LISTED_ITEM_RE.search(item)
        if not im:
            continue
        month, year = int(im.group(1)), int(im.group(2))
        if _valid_month(year, month):
            periods.append(LeavePeriod.for_month(year, month, PeriodKind.MONTHLY, source_text=text))
    return periods


def _abbreviated_month_year(text: str) -> list[LeavePeriod]:
    periods = []
    for abbr, yy in _ABBREVIATED_RE.findall(text):
        month = month_from_text(abbr)
        if month is None:
            continue
        year = adjust_two_digit_year(int(yy))
        periods.append(LeavePeriod.for_month(year, month, PeriodKind.ANNUAL, source_text=text))
    return periods


def _month_year_annual(text: str) -> list[LeavePeriod]:
    if "uma por ano" not in text and "a cada ano" not in text:
        return []
    m = _MONTH_YEAR_RE.search(text)
    if not m:
        return []
    month = month_from_text(m.group(1))
    year = int(m.group(2))
    if month is None or not _valid_month(year, month):
        return []
    return _yearly(year, month, PeriodKind.ANNUAL_RECURRING, text)


ScheduleHandler = Callable[[str], list[LeavePeriod]]

SCHEDULE_HANDLERS: tuple[tuple[str, ScheduleHandler], ...] = (
    ("starts_at", _starts_at),
    ("from_date_recurring", _from_date_recurring),
    ("specific_plus_annual", _specific_plus_annual),
    ("specific_dates", _specific_dates),
    ("listed_months", _listed_months),
    ("abbreviated_month_year", _abbreviated_month_year),
    ("month_year_annual", _month_year_annual),
)


def interpret_schedule(text: str | None) -> ScheduleInterpretation:
    """Interpret free schedule text, keeping the reason when nothing is produced.

    Returns:
        ScheduleInterpretation whose status is EMPTY for blank input,
        AMBIGUOUS when the guard rejects the text, PARSED with the winning
        handler name, or UNRECOGNIZED when no handler matched
    """
    normalized = _normalize_text(text)
    if not normalized:
        return ScheduleInterpretation(periods=(), status=ScheduleStatus.EMPTY)

    if is_ambiguous(normalized):
        logger.debug("ambiguous schedule (no anchor year): %r", normalized)
        return ScheduleInterpretation(periods=(), status=ScheduleStatus.AMBIGUOUS)

    for name, handler in SCHEDULE_HANDLERS:
        periods = handler(normalized)
        if periods:
            logger.debug("schedule %r -> %s (%d periods)", normalized, name, len(periods))
            return ScheduleInterpretation(
                periods=tuple(periods), status=ScheduleStatus.PARSED, handler=name
            )

    logger.debug("unrecognized schedule: %r", normalized)
    return ScheduleInterpretation(periods=(), status=ScheduleStatus.UNRECOGNIZED)


def parse_schedule(text: str | None) -> list[LeavePeriod]:
    """Parse free schedule text into leave periods.

    Args:
        text: Raw cell text ("início em 03/2026 (3 meses consecutivos)")

    Returns:
        Periods sorted as produced by the winning handler, or ``[]`` when the
        text is blank, ambiguous or unrecognized. Use
        :func:`interpret_schedule` to tell those cases apart.
    """
    return list(interpret_schedule(text).periods)


def _safe_date(year: int, month: int, day: int) -> date | None:
    if not _valid_month(year, month):
        return None
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _header_year_ranges(text: str, header_year: int) -> list[LeavePeriod]:
    periods = []
    for m in _HY_RANGE_RE.finditer(text):
        count = int(m.group(1))
        start = _safe_date(header_year, int(m.group(3)), int(m.group(2)))
        end = _safe_date(header_year, int(m.group(5)), int(m.group(4)))
        if start is None or end is None:
            continue
        if end < start:
            # faixa que cruza a virada do ano
            end = _safe_date(header_year + 1, end.month, end.day)
            if end is None:
                continue
        periods.append(
            LeavePeriod(
                start=start,
                end=end,
                kind=PeriodKind.PREMIUM_LEAVE,
                months_count=count,
                source_text=m.group(0),
            )
        )
    return periods


def _header_year_relative(text: str, header_year: int) -> list[LeavePeriod]:
    periods = []
    for m in _HY_RELATIVE_RE.finditer(text):
        count = int(m.group(1))
        raw_month = m.group(3)
        month = int(raw_month) if raw_month.isdigit() else month_from_text(raw_month)
        if month is None:
            continue
        start = _safe_date(header_year, month, int(m.group(2)))
        if start is None:
            continue
        end_year, end_month = shift_month(start.year, start.month, max(count, 1) - 1)
        periods.append(
            LeavePeriod(
                start=start,
                end=last_day_of_month(end_year, end_month),
                kind=PeriodKind.PREMIUM_LEAVE,
                months_count=count,
                source_text=m.group(0),
            )
        )
    return periods


def interpret_schedule_with_year(text: str | None, header_year: int | None) -> ScheduleInterpretation:
    """Header-year-aware interpretation.

    Explicit ``DD/MM a DD/MM`` ranges are consumed first so the single-date
    form cannot count them twice. Falls back to :func:`interpret_schedule`
    when neither form matches or no header year is known.

    Args:
        text: Raw cell text
        header_year: Year found in the column header, or None

    Returns:
        ScheduleInterpretation with handler "header_year" when a header-year
        form matched
    """
    normalized = _normalize_text(text)
    if not normalized or header_year is None:
        return interpret_schedule(normalized)

    periods = _header_year_ranges(normalized, header_year)
    remainder = _HY_RANGE_RE.sub(" ", normalized)
    periods.extend(_header_year_relative(remainder, header_year))
    if periods:
        periods.sort(key=lambda p: p.start)
        logger.debug("schedule %r -> header_year %d (%d periods)", normalized, header_year, len(periods))
        return ScheduleInterpretation(
            periods=tuple(periods), status=ScheduleStatus.PARSED, handler="header_year"
        )
    return interpret_schedule(normalized)


def parse_schedule_with_year(text: str | None, header_year: int | None) -> list[LeavePeriod]:
    """Parse schedule text from a column whose header carries the year.

    Args:
        text: Raw cell text, e.g. "2 meses 01/12 - 31/01"
        header_year: Year found in the column header, or None

    Returns:
        Periods anchored to ``header_year``, or the result of
        :func:`parse_schedule` when no header-year form matches
    """
    return list(interpret_schedule_with_year(text, header_year).periods)
