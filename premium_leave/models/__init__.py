"""Domain models for the premium-leave schedule engine.

This package contains the value types exchanged between the field resolver,
the schedule parser, the period generator, the urgency classifier and the
statistics aggregator.
"""

from .employee_record import TIER_ORDER, EmployeeRecord, Sex, TableFormat, UrgencyTier
from .fields import FIELD_ALIASES, CanonicalField, CanonicalFields
from .leave_period import LeavePeriod, PeriodKind, ScheduleStatus
from .problem import DataQualityProblem
from .statistics import LeaveStatistics
from .thresholds import UrgencyThresholds

__all__ = [
    # Identity
    "CanonicalField",
    "CanonicalFields",
    "FIELD_ALIASES",
    # Leave
    "LeavePeriod",
    "PeriodKind",
    "ScheduleStatus",
    # Classification
    "EmployeeRecord",
    "Sex",
    "TableFormat",
    "TIER_ORDER",
    "UrgencyTier",
    "UrgencyThresholds",
    # Reporting
    "DataQualityProblem",
    "LeaveStatistics",
]
