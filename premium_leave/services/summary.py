from __future__ import annotations

from collections.abc import Iterable

from ..models.employee_record import TIER_ORDER
from .batch import BatchResult

"""SUMMARY line rendering for the command-line run.

Format (fixed contract, parsed by wrappers):
SUMMARY files={files} employees={n} problems={n} critical={n} high={n}
moderate={n} low={n} parse_failures={n}
"""

__all__ = [
    "render_summary_line",
]


def render_summary_line(total_files: int, results: Iterable[BatchResult], file_problems: int = 0) -> str:
    """Render the SUMMARY line for a whole run.

    Args:
        total_files: Number of input files detected
        results: One BatchResult per successfully read file
        file_problems: File-level problems (unreadable files) not tied to a batch

    Returns:
        Formatted SUMMARY line

    Examples:
        >>> render_summary_line(0, [])
        'SUMMARY files=0 employees=0 problems=0 critical=0 high=0 moderate=0 low=0 parse_failures=0'
    """
    employees = 0
    problems = file_problems
    failures = 0
    tiers = {tier.value: 0 for tier in TIER_ORDER}
    for result in results:
        employees += result.statistics.total_employees
        problems += len(result.problems)
        failures += result.statistics.parse_failures
        for name, count in result.statistics.total_by_tier.items():
            tiers[name] = tiers.get(name, 0) + count

    tier_part = " ".join(f"{tier.value.lower()}={tiers[tier.value]}" for tier in TIER_ORDER)
    return (
        f"SUMMARY files={total_files} "
        f"employees={employees} "
        f"problems={problems} "
        f"{tier_part} "
        f"parse_failures={failures}"
    )
