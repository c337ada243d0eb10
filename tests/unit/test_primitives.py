"""Unit tests for numeric primitives, lookup tables and date helpers"""

import pytest

from homeu_scores.domain.exceptions import InvalidInputError
from homeu_scores.domain.models import CreditTier, RiskCategory, ScoreGrade
from homeu_scores.domain.primitives import (
    clamp,
    composite_score,
    grade_for,
    make_factor,
    renormalize,
    require_finite,
    require_month,
    require_non_negative,
    require_percentage,
    risk_category_for,
    safe_ratio,
    weighted_sum,
)
from homeu_scores.domain.tables import (
    ACCOUNT_STATUS_RISK,
    DEPOSIT_MULTIPLIERS,
    SEASONAL_COLLECTION_FACTORS,
    SEASONAL_LEVERAGE,
    SPRING_MONTHS,
    SUMMER_MONTHS,
    WINTER_MONTHS,
)
from homeu_scores.utils.date_utils import month_range, months_until, parse_month, shift_month


def test_clamp_bounds():
    """Test clamp at and beyond both bounds"""
    assert clamp(-5) == 0.0
    assert clamp(105) == 100.0
    assert clamp(42.5) == 42.5
    assert clamp(900, 300, 850) == 850


def test_make_factor_rounds_contribution():
    """Contribution is value times weight rounded to cents"""
    factor = make_factor("Test", 53.3333, 0.4, "desc")
    assert factor.value == 53.33
    assert factor.contribution == pytest.approx(21.33)


def test_weighted_sum_rounds_to_one_decimal():
    """Weighted sums round to one decimal place"""
    factors = [make_factor("a", 33.33, 0.5, ""), make_factor("b", 66.67, 0.5, "")]
    assert weighted_sum(factors) == 50.0


def test_composite_score_is_clamped():
    """Composite scores are bounded to 0-100"""
    factors = [make_factor("a", 100.0, 1.5, "")]
    assert composite_score(factors) == 100.0


def test_renormalize_restores_unit_sum():
    """Renormalized weights sum to 1.0"""
    weights = renormalize([("a", 0.30), ("b", 0.20), ("c", 0.25)])
    assert sum(w for _, w in weights) == pytest.approx(1.0)
    assert [name for name, _ in weights] == ["a", "b", "c"]


@pytest.mark.parametrize(
    "score,grade",
    [
        (100.0, ScoreGrade.EXCELLENT),
        (90.0, ScoreGrade.EXCELLENT),
        (89.9, ScoreGrade.GOOD),
        (75.0, ScoreGrade.GOOD),
        (74.9, ScoreGrade.FAIR),
        (60.0, ScoreGrade.FAIR),
        (59.9, ScoreGrade.POOR),
        (40.0, ScoreGrade.POOR),
        (39.9, ScoreGrade.VERY_POOR),
        (0.0, ScoreGrade.VERY_POOR),
    ],
)
def test_grade_thresholds(score, grade):
    """Test grade boundaries"""
    assert grade_for(score) == grade


def test_grade_is_monotonic():
    """Higher scores never map to a worse grade"""
    order = [ScoreGrade.VERY_POOR, ScoreGrade.POOR, ScoreGrade.FAIR, ScoreGrade.GOOD, ScoreGrade.EXCELLENT]
    ranks = [order.index(grade_for(s / 10)) for s in range(0, 1001)]
    assert ranks == sorted(ranks)


@pytest.mark.parametrize(
    "risk,category",
    [
        (0.0, RiskCategory.LOW),
        (25.0, RiskCategory.LOW),
        (25.1, RiskCategory.MODERATE),
        (50.0, RiskCategory.MODERATE),
        (50.1, RiskCategory.HIGH),
        (75.0, RiskCategory.HIGH),
        (75.1, RiskCategory.CRITICAL),
        (100.0, RiskCategory.CRITICAL),
    ],
)
def test_risk_category_bands(risk, category):
    """Test risk category boundaries"""
    assert risk_category_for(risk) == category


def test_safe_ratio_defaults_on_zero_denominator():
    """A zero denominator returns the default ratio"""
    assert safe_ratio(1500, 0) == 1.0
    assert safe_ratio(1500, 2000) == 0.75


def test_guards_raise_invalid_input():
    """Domain guards name the offending field"""
    with pytest.raises(InvalidInputError) as exc:
        require_non_negative("rent_amount", -1)
    assert exc.value.field == "rent_amount"

    with pytest.raises(InvalidInputError):
        require_percentage("occupancy_rate", 100.5)

    with pytest.raises(InvalidInputError):
        require_month("current_month", 0)

    require_month("current_month", 12)


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
def test_guards_reject_non_finite_numbers(value):
    """NaN and infinities are invalid input, never scored"""
    for guard in (require_finite, require_non_negative, require_percentage):
        with pytest.raises(InvalidInputError) as exc:
            guard("current_rent", value)
        assert exc.value.message == "must be a finite number"


def test_seasonal_leverage_table():
    """Every calendar month has a leverage entry; winter highest, summer lowest"""
    assert sorted(SEASONAL_LEVERAGE) == list(range(1, 13))
    for month in WINTER_MONTHS:
        assert SEASONAL_LEVERAGE[month] == 85.0
    for month in SPRING_MONTHS:
        assert SEASONAL_LEVERAGE[month] == 60.0
    for month in SUMMER_MONTHS:
        assert SEASONAL_LEVERAGE[month] == 25.0
    assert SEASONAL_LEVERAGE[9] == SEASONAL_LEVERAGE[10] == 50.0


def test_seasonal_collection_factors_cover_every_month():
    """Every calendar month has a collection factor"""
    assert sorted(SEASONAL_COLLECTION_FACTORS) == list(range(1, 13))
    assert SEASONAL_COLLECTION_FACTORS[12] < 1.0 < SEASONAL_COLLECTION_FACTORS[9]


def test_deposit_multipliers_decrease_with_tier():
    """Better credit tiers need smaller deposits"""
    ordered = [CreditTier.EXCELLENT, CreditTier.GOOD, CreditTier.FAIR, CreditTier.POOR, CreditTier.VERY_POOR]
    multipliers = [DEPOSIT_MULTIPLIERS[t] for t in ordered]
    assert multipliers == [1.0, 1.25, 1.5, 2.0, 2.5]


def test_account_status_table():
    """Test account-status risk values"""
    assert ACCOUNT_STATUS_RISK["active"] < ACCOUNT_STATUS_RISK["unknown"] < ACCOUNT_STATUS_RISK["closed"]


def test_parse_and_shift_month():
    """Test YYYY-MM parsing and month arithmetic across years"""
    assert parse_month("2026-03") == (2026, 3)
    assert shift_month("2026-11", 2) == "2027-01"
    assert month_range("2026-12", 3) == ["2026-12", "2027-01", "2027-02"]

    with pytest.raises(ValueError):
        parse_month("2026-13")
    with pytest.raises(ValueError):
        parse_month("March 2026")
    with pytest.raises(ValueError):
        parse_month("2026-03\n")
    with pytest.raises(ValueError):
        parse_month(" 2026-03")


def test_months_until_wraps_year_end():
    """Months until a target month wrap past December"""
    assert months_until(3, 6) == 3
    assert months_until(11, 2) == 3
    assert months_until(5, 5) == 0
