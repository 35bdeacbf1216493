from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

"""Summary statistics over a batch of classified employees.

Shape consumed by dashboards and reports:
- total_by_tier: every tier present, zero when empty
- total_by_month: ``YYYY-MM`` (1-based month) -> number of periods starting then
- total_by_year: ``YYYY`` -> number of periods starting that year
"""

__all__ = [
    "LeaveStatistics",
]


@dataclass(frozen=True)
class LeaveStatistics:
    total_employees: int
    total_by_tier: dict[str, int]
    total_by_month: dict[str, int] = field(default_factory=dict)
    total_by_year: dict[str, int] = field(default_factory=dict)
    min_age: int | None = None  # apenas idades conhecidas (> 0)
    max_age: int | None = None
    min_year: int | None = None
    max_year: int | None = None
    parse_failures: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_employees": self.total_employees,
            "total_by_tier": dict(self.total_by_tier),
            "total_by_month": dict(self.total_by_month),
            "total_by_year": dict(self.total_by_year),
            "min_age": self.min_age,
            "max_age": self.max_age,
            "min_year": self.min_year,
            "max_year": self.max_year,
            "parse_failures": self.parse_failures,
        }
