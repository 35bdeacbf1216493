from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any

from .fields import CanonicalFields
from .leave_period import LeavePeriod, ScheduleStatus

"""EmployeeRecord and the enums describing a classified employee.

Invariant: a record whose schedule failed to parse carries no periods; the
failure is surfaced separately as a data-quality problem.
"""

__all__ = [
    "UrgencyTier",
    "TIER_ORDER",
    "Sex",
    "TableFormat",
    "EmployeeRecord",
]


class UrgencyTier(Enum):
    CRITICAL = "Critical"
    HIGH = "High"
    MODERATE = "Moderate"
    LOW = "Low"


TIER_ORDER: tuple[UrgencyTier, ...] = (
    UrgencyTier.CRITICAL,
    UrgencyTier.HIGH,
    UrgencyTier.MODERATE,
    UrgencyTier.LOW,
)


class Sex(Enum):
    MALE = "male"
    FEMALE = "female"
    UNKNOWN = "unknown"  # avaliado com os limites masculinos

    @classmethod
    def parse(cls, value: Any) -> Sex:
        if value is None:
            return cls.UNKNOWN
        decomposed = unicodedata.normalize("NFD", str(value))
        key = "".join(ch for ch in decomposed if not unicodedata.combining(ch)).strip().lower()
        if key in ("f", "fem", "fem.", "feminino", "mulher"):
            return cls.FEMALE
        if key in ("m", "masc", "masc.", "masculino", "homem"):
            return cls.MALE
        return cls.UNKNOWN


class TableFormat(Enum):
    """Row shape of a sheet.

    - NEW: process-oriented rows, one leave block per row, grouped by employee
    - PREMIUM_LEAVE: legacy start-month / end-month columns
    - GENERIC: free-text schedule column ("cronograma")
    """
    NEW = "new"
    PREMIUM_LEAVE = "premium-leave"
    GENERIC = "generic"


@dataclass(frozen=True)
class EmployeeRecord:
    fields: CanonicalFields
    age_years: int                      # 0 quando desconhecida
    sex: Sex
    admission_date: date | None
    birth_date: date | None
    total_accrued_months: int
    periods: tuple[LeavePeriod, ...]    # ordenados por início
    schedule_text: str
    schedule_status: ScheduleStatus
    schedule_parse_failed: bool
    used_months: int
    scheduled_months: int
    table_format: TableFormat
    urgency_tier: UrgencyTier
    row: int = -1                       # primeira linha de dados (1-based) do servidor

    def __post_init__(self) -> None:
        if self.schedule_parse_failed and self.periods:
            raise ValueError("a record with a failed schedule must not carry periods")

    @property
    def name(self) -> str:
        return self.fields.name

    @property
    def remaining_months(self) -> int:
        return max(0, self.total_accrued_months - self.used_months - self.scheduled_months)

    def next_period(self, today: date) -> LeavePeriod | None:
        """First period starting after ``today``, if any."""
        for period in self.periods:
            if period.start > today:
                return period
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "fields": self.fields.to_dict(),
            "age_years": self.age_years,
            "sex": self.sex.value,
            "admission_date": self.admission_date.isoformat() if self.admission_date else None,
            "birth_date": self.birth_date.isoformat() if self.birth_date else None,
            "total_accrued_months": self.total_accrued_months,
            "used_months": self.used_months,
            "scheduled_months": self.scheduled_months,
            "remaining_months": self.remaining_months,
            "periods": [p.to_dict() for p in self.periods],
            "schedule_text": self.schedule_text,
            "schedule_status": self.schedule_status.value,
            "schedule_parse_failed": self.schedule_parse_failed,
            "table_format": self.table_format.value,
            "urgency_tier": self.urgency_tier.value,
            "row": self.row,
        }
