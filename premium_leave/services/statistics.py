from __future__ import annotations

from collections import Counter
from collections.abc import Iterable

from ..models.employee_record import TIER_ORDER, EmployeeRecord
from ..models.statistics import LeaveStatistics

"""Roll classified records up into dashboard counts."""

__all__ = [
    "aggregate",
]


def aggregate(records: Iterable[EmployeeRecord]) -> LeaveStatistics:
    """Count records by tier and periods by start month / year.

    Unknown ages (0) are left out of the age range.
    """
    by_tier: Counter[str] = Counter()
    by_month: Counter[str] = Counter()
    by_year: Counter[str] = Counter()
    ages: list[int] = []
    years: list[int] = []
    total = 0
    failures = 0

    for record in records:
        total += 1
        by_tier[record.urgency_tier.value] += 1
        if record.age_years > 0:
            ages.append(record.age_years)
        if record.schedule_parse_failed:
            failures += 1
        for period in record.periods:
            by_month[f"{period.start.year:04d}-{period.start.month:02d}"] += 1
            by_year[f"{period.start.year:04d}"] += 1
            years.append(period.start.year)

    return LeaveStatistics(
        total_employees=total,
        total_by_tier={tier.value: by_tier.get(tier.value, 0) for tier in TIER_ORDER},
        total_by_month=dict(sorted(by_month.items())),
        total_by_year=dict(sorted(by_year.items())),
        min_age=min(ages) if ages else None,
        max_age=max(ages) if ages else None,
        min_year=min(years) if years else None,
        max_year=max(years) if years else None,
        parse_failures=failures,
    )
