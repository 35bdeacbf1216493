from __future__ import annotations

from datetime import date

import pytest

from premium_leave.models.employee_record import Sex, UrgencyTier
from premium_leave.models.thresholds import UrgencyThresholds
from premium_leave.services.urgency import (
    RULE_BALANCE_EXCEEDS_HORIZON,
    RULE_BEYOND_BANDS,
    RULE_CRITICAL_BAND,
    RULE_ELIGIBLE_WITH_BALANCE,
    RULE_HIGH_BAND,
    RULE_INSUFFICIENT_INPUTS,
    RULE_MODERATE_BAND,
    UrgencyInputs,
    age_from_birth_date,
    assess,
    classify,
    tenure_years,
)

TODAY = date(2026, 10, 19)


def _inputs(age, tenure=0, total=0, used=0, scheduled=0, sex=Sex.MALE, birth=None):
    return UrgencyInputs(
        age_years=age,
        tenure_years=tenure,
        used_months=used,
        scheduled_months=scheduled,
        total_accrued_months=total,
        sex=sex,
        birth_date=birth,
    )


def test_eligible_with_balance_is_critical(thresholds):
    a = assess(_inputs(65, tenure=40, total=5), thresholds, TODAY)
    assert a.tier is UrgencyTier.CRITICAL
    assert a.rule == RULE_ELIGIBLE_WITH_BALANCE
    assert a.points == 105
    assert a.eligible_now
    assert a.remaining_months == 5


def test_eligible_without_balance_falls_to_bands(thresholds):
    a = assess(_inputs(65, tenure=40, total=5, used=3, scheduled=2), thresholds, TODAY)
    assert a.eligible_now
    assert a.remaining_months == 0
    assert a.months_to_mandatory == 120
    assert a.tier is UrgencyTier.LOW


def test_exact_birth_date_horizon(thresholds):
    a = assess(_inputs(66, birth=date(1960, 2, 19)), thresholds, TODAY)
    assert a.months_to_mandatory == 100
    assert a.tier is UrgencyTier.LOW
    assert a.rule == RULE_BEYOND_BANDS


def test_balance_exceeding_horizon_is_critical(thresholds):
    a = assess(_inputs(70, total=80), thresholds, TODAY)
    assert a.months_to_mandatory == 60
    assert a.tier is UrgencyTier.CRITICAL
    assert a.rule == RULE_BALANCE_EXCEEDS_HORIZON


@pytest.mark.parametrize(
    "age,tier,rule",
    [
        (74, UrgencyTier.CRITICAL, RULE_CRITICAL_BAND),
        (73, UrgencyTier.CRITICAL, RULE_CRITICAL_BAND),
        (72, UrgencyTier.HIGH, RULE_HIGH_BAND),
        (70, UrgencyTier.HIGH, RULE_HIGH_BAND),
        (69, UrgencyTier.MODERATE, RULE_MODERATE_BAND),
        (68, UrgencyTier.MODERATE, RULE_MODERATE_BAND),
        (67, UrgencyTier.LOW, RULE_BEYOND_BANDS),
        (60, UrgencyTier.LOW, RULE_BEYOND_BANDS),
    ],
)
def test_time_bands(thresholds, age, tier, rule):
    a = assess(_inputs(age), thresholds, TODAY)
    assert (a.tier, a.rule) == (tier, rule)


def test_past_mandatory_age_is_critical(thresholds):
    a = assess(_inputs(76), thresholds, TODAY)
    assert a.months_to_mandatory == 0
    assert a.tier is UrgencyTier.CRITICAL


def test_female_thresholds(thresholds):
    female = _inputs(58, tenure=34, total=1, sex=Sex.FEMALE)
    assert classify(female, thresholds, TODAY) is UrgencyTier.CRITICAL

    for sex in (Sex.MALE, Sex.UNKNOWN):
        other = _inputs(58, tenure=34, total=1, sex=sex)
        assert classify(other, thresholds, TODAY) is UrgencyTier.LOW


def test_eligibility_needs_points_and_age(thresholds):
    a = assess(_inputs(62, tenure=45, total=3), thresholds, TODAY)
    assert a.points == 107
    assert not a.eligible_now
    assert a.tier is UrgencyTier.LOW


def test_age_derived_from_birth_date(thresholds):
    a = assess(_inputs(0, birth=date(1952, 1, 1)), thresholds, TODAY)
    assert a.age_years == 74
    assert a.months_to_mandatory == 2
    assert a.rule == RULE_CRITICAL_BAND


def test_unknown_age_is_low(thresholds):
    a = assess(_inputs(0, total=100), thresholds, TODAY)
    assert a.tier is UrgencyTier.LOW
    assert a.rule == RULE_INSUFFICIENT_INPUTS


def test_thresholds_are_required():
    with pytest.raises(TypeError):
        assess(_inputs(60), None, TODAY)


def test_custom_thresholds_move_bands():
    strict = UrgencyThresholds(critical_max_months=12, high_max_months=24, moderate_max_months=36)
    assert classify(_inputs(73), strict, TODAY) is UrgencyTier.HIGH
    assert classify(_inputs(72), strict, TODAY) is UrgencyTier.MODERATE


def test_older_never_less_urgent(thresholds):
    order = [UrgencyTier.LOW, UrgencyTier.MODERATE, UrgencyTier.HIGH, UrgencyTier.CRITICAL]
    ranks = [order.index(classify(_inputs(age), thresholds, TODAY)) for age in range(55, 80)]
    assert ranks == sorted(ranks)


def test_tenure_and_age_helpers():
    assert tenure_years(date(1995, 2, 1), TODAY) == 31
    assert tenure_years(None, TODAY) == 0
    assert tenure_years(date(2030, 1, 1), TODAY) == 0
    assert age_from_birth_date(date(1960, 10, 20), TODAY) == 65
    assert age_from_birth_date(None, TODAY) == 0
