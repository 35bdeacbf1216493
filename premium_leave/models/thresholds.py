from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from .employee_record import Sex

"""Retirement-eligibility thresholds.

Built once at the boundary (config loader or caller) and passed explicitly to
the classifier for a whole batch; never mutated afterwards.
"""

__all__ = [
    "UrgencyThresholds",
]


@dataclass(frozen=True)
class UrgencyThresholds:
    mandatory_retirement_age: int = 75   # aposentadoria compulsória
    min_points_male: int = 102           # idade + tempo de serviço
    min_points_female: int = 92
    min_age_male: int = 63
    min_age_female: int = 58
    critical_max_months: int = 24
    high_max_months: int = 60
    moderate_max_months: int = 84

    def min_points(self, sex: Sex) -> int:
        return self.min_points_female if sex is Sex.FEMALE else self.min_points_male

    def min_age(self, sex: Sex) -> int:
        return self.min_age_female if sex is Sex.FEMALE else self.min_age_male

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
