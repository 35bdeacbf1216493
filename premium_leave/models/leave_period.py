from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any

from ..dates.months import describe_month
from ..dates.normalizer import last_day_of_month, month_span

"""LeavePeriod domain model.

A leave period is a dated, immutable block of premium leave. Periods derived
from month-level text always start on the first day of the month and end on
the last day of that month; periods read from the process-oriented sheet
format keep the exact dates written in the sheet.
"""

__all__ = [
    "PeriodKind",
    "ScheduleStatus",
    "LeavePeriod",
]


class PeriodKind(Enum):
    SINGLE = "single"
    CONSECUTIVE = "consecutive"
    SPECIFIC = "specific"
    MONTHLY = "monthly"
    ANNUAL = "annual"
    ANNUAL_RECURRING = "annual-recurring"
    PREMIUM_LEAVE = "premium-leave"


class ScheduleStatus(Enum):
    """How the schedule source of a record was interpreted.

    - EMPTY: nothing scheduled (blank source)
    - PARSED: at least one period produced
    - AMBIGUOUS: yearly recurrence without any anchor year
    - UNRECOGNIZED: text present but no handler matched
    - INVALID: month range or date pair could not be read
    """
    EMPTY = "empty"
    PARSED = "parsed"
    AMBIGUOUS = "ambiguous"
    UNRECOGNIZED = "unrecognized"
    INVALID = "invalid"

    @property
    def is_failure(self) -> bool:
        return self in (ScheduleStatus.AMBIGUOUS, ScheduleStatus.UNRECOGNIZED, ScheduleStatus.INVALID)


@dataclass(frozen=True)
class LeavePeriod:
    start: date
    end: date
    kind: PeriodKind
    months_count: int | None = None  # meses de licença declarados no texto/planilha
    source_text: str | None = None
    process_number: str | None = None
    issue_date: date | None = None
    acquisitive_start: date | None = None
    acquisitive_end: date | None = None

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError(f"period end {self.end} precedes start {self.start}")

    @classmethod
    def for_month(
        cls,
        year: int,
        month: int,
        kind: PeriodKind,
        *,
        months_count: int | None = None,
        source_text: str | None = None,
    ) -> LeavePeriod:
        """Build a period covering one whole calendar month."""
        return cls(
            start=date(year, month, 1),
            end=last_day_of_month(year, month),
            kind=kind,
            months_count=months_count,
            source_text=source_text,
        )

    @property
    def leave_months(self) -> int:
        """Leave months this period consumes.

        The declared count wins; otherwise the number of calendar months the
        period touches.
        """
        if self.months_count is not None:
            return self.months_count
        return month_span(self.start, self.end)

    @property
    def label(self) -> str:
        return describe_month(self.start.year, self.start.month)

    def to_dict(self) -> dict[str, Any]:
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "kind": self.kind.value,
            "months_count": self.months_count,
            "source_text": self.source_text,
            "label": self.label,
            "process_number": self.process_number,
            "issue_date": self.issue_date.isoformat() if self.issue_date else None,
            "acquisitive_start": self.acquisitive_start.isoformat() if self.acquisitive_start else None,
            "acquisitive_end": self.acquisitive_end.isoformat() if self.acquisitive_end else None,
        }
