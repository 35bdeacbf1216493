from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..dates.normalizer import add_years, full_years_between, months_between
from ..models.employee_record import Sex, UrgencyTier
from ..models.thresholds import UrgencyThresholds

"""Retirement-urgency classification.

Derived quantities:
- points = age + tenure
- remaining = max(0, accrued - used - scheduled)
- months_to_mandatory: exact month count to ``birth + mandatory age`` when the
  birth date is known, otherwise ``(mandatory age - age) * 12``
- eligible_now = points >= min_points[sex] AND age >= min_age[sex]

Priority ladder, first match wins:
1. eligible_now and remaining > 0          -> Critical
2. remaining > months_to_mandatory         -> Critical
3. months_to_mandatory <= critical_max     -> Critical
4. months_to_mandatory <= high_max         -> High
5. months_to_mandatory <= moderate_max     -> Moderate
6. otherwise                               -> Low

Rules 1 and 2 override the time bands, so the tier cannot be derived from
months_to_mandatory alone.
"""

__all__ = [
    "UrgencyInputs",
    "UrgencyAssessment",
    "RULE_INSUFFICIENT_INPUTS",
    "RULE_ELIGIBLE_WITH_BALANCE",
    "RULE_BALANCE_EXCEEDS_HORIZON",
    "RULE_CRITICAL_BAND",
    "RULE_HIGH_BAND",
    "RULE_MODERATE_BAND",
    "RULE_BEYOND_BANDS",
    "assess",
    "classify",
    "tenure_years",
    "age_from_birth_date",
]

RULE_INSUFFICIENT_INPUTS = "INSUFFICIENT_INPUTS"
RULE_ELIGIBLE_WITH_BALANCE = "ELIGIBLE_WITH_BALANCE"
RULE_BALANCE_EXCEEDS_HORIZON = "BALANCE_EXCEEDS_HORIZON"
RULE_CRITICAL_BAND = "CRITICAL_BAND"
RULE_HIGH_BAND = "HIGH_BAND"
RULE_MODERATE_BAND = "MODERATE_BAND"
RULE_BEYOND_BANDS = "BEYOND_BANDS"


@dataclass(frozen=True)
class UrgencyInputs:
    age_years: int
    tenure_years: int
    used_months: int
    scheduled_months: int
    total_accrued_months: int
    sex: Sex = Sex.UNKNOWN
    birth_date: date | None = None


@dataclass(frozen=True)
class UrgencyAssessment:
    tier: UrgencyTier
    rule: str
    age_years: int
    points: int
    remaining_months: int
    months_to_mandatory: int
    eligible_now: bool


def tenure_years(admission: date | None, today: date) -> int:
    """Full years of service since ``admission`` (0 when unknown)."""
    if admission is None:
        return 0
    return max(0, full_years_between(admission, today))


def age_from_birth_date(birth: date | None, today: date) -> int:
    if birth is None:
        return 0
    return max(0, full_years_between(birth, today))


def assess(
    inputs: UrgencyInputs,
    thresholds: UrgencyThresholds,
    today: date | None = None,
) -> UrgencyAssessment:
    """Evaluate the urgency ladder and expose every derived quantity.

    Args:
        inputs: Per-employee figures
        thresholds: Eligibility rules for the whole batch (mandatory)
        today: Reference date (defaults to today)

    Returns:
        UrgencyAssessment with the tier and the ladder rule that fired

    Raises:
        TypeError: If thresholds is None
    """
    if thresholds is None:
        raise TypeError("urgency thresholds are required")
    today = today or date.today()

    age = inputs.age_years
    if age <= 0 and inputs.birth_date is not None:
        age = age_from_birth_date(inputs.birth_date, today)

    remaining = max(0, inputs.total_accrued_months - inputs.used_months - inputs.scheduled_months)

    if age <= 0 and inputs.birth_date is None:
        return UrgencyAssessment(
            tier=UrgencyTier.LOW,
            rule=RULE_INSUFFICIENT_INPUTS,
            age_years=0,
            points=0,
            remaining_months=remaining,
            months_to_mandatory=0,
            eligible_now=False,
        )

    points = age + inputs.tenure_years
    if inputs.birth_date is not None:
        retirement = add_years(inputs.birth_date, thresholds.mandatory_retirement_age)
        months_to_mandatory = max(0, months_between(today, retirement))
    else:
        months_to_mandatory = max(0, (thresholds.mandatory_retirement_age - age) * 12)

    eligible_now = points >= thresholds.min_points(inputs.sex) and age >= thresholds.min_age(inputs.sex)

    if eligible_now and remaining > 0:
        tier, rule = UrgencyTier.CRITICAL, RULE_ELIGIBLE_WITH_BALANCE
    elif remaining > months_to_mandatory:
        tier, rule = UrgencyTier.CRITICAL, RULE_BALANCE_EXCEEDS_HORIZON
    elif months_to_mandatory <= thresholds.critical_max_months:
        tier, rule = UrgencyTier.CRITICAL, RULE_CRITICAL_BAND
    elif months_to_mandatory <= thresholds.high_max_months:
        tier, rule = UrgencyTier.HIGH, RULE_HIGH_BAND
    elif months_to_mandatory <= thresholds.moderate_max_months:
        tier, rule = UrgencyTier.MODERATE, RULE_MODERATE_BAND
    else:
        tier, rule = UrgencyTier.LOW, RULE_BEYOND_BANDS

    return UrgencyAssessment(
        tier=tier,
        rule=rule,
        age_years=age,
        points=points,
        remaining_months=remaining,
        months_to_mandatory=months_to_mandatory,
        eligible_now=eligible_now,
    )


def classify(
    inputs: UrgencyInputs,
    thresholds: UrgencyThresholds,
    today: date | None = None,
) -> UrgencyTier:
    """Urgency tier only; see :func:`assess` for the derived quantities.

    Raises:
        TypeError: If thresholds is None
    """
    return assess(inputs, thresholds, today).tier
