"""Unit tests for creditworthiness: bureau passthrough and proxy score"""

from dataclasses import replace

import pytest

from homeu_scores.domain.credit import (
    EMPLOYMENT_WEIGHT,
    INCOME_CONSISTENCY_WEIGHT,
    PAYMENT_WEIGHT,
    TENURE_WEIGHT,
    calculate_creditworthiness,
    calculate_creditworthiness_batch,
    credit_tier_for,
)
from homeu_scores.domain.exceptions import InvalidInputError
from homeu_scores.domain.models import CreditTier, CreditworthinessInput


def test_weights_sum_to_one():
    """Proxy factor weights sum to 1.0"""
    assert PAYMENT_WEIGHT + TENURE_WEIGHT + EMPLOYMENT_WEIGHT + INCOME_CONSISTENCY_WEIGHT == pytest.approx(1.0)


def test_actual_score_passes_through():
    """A bureau score is returned as-is with its tier and deposit multiplier"""
    result = calculate_creditworthiness(CreditworthinessInput(renter_id="r_1", actual_credit_score=720))

    assert result.credit_score == 720
    assert result.is_proxy is False
    assert result.credit_tier == CreditTier.GOOD
    assert result.deposit_multiplier == 1.25
    assert result.eviction_penalty == 0


def test_actual_score_ignores_proxy_inputs():
    """Evictions and history never adjust a bureau score"""
    result = calculate_creditworthiness(
        CreditworthinessInput(renter_id="r_1", actual_credit_score=640, previous_evictions=3, missed_payments=10)
    )
    assert result.credit_score == 640
    assert result.credit_tier == CreditTier.FAIR


def test_actual_score_out_of_range_is_invalid():
    """Bureau scores outside 300-850 are rejected"""
    with pytest.raises(InvalidInputError) as exc:
        calculate_creditworthiness(CreditworthinessInput(renter_id="r_1", actual_credit_score=900))
    assert exc.value.field == "actual_credit_score"


def test_proxy_with_defaults_only():
    """A renter with only an ID still gets a full proxy assessment"""
    result = calculate_creditworthiness(CreditworthinessInput(renter_id="r_new"))

    # Composite 37.5 -> 575 + (37.5 - 50) * 5.5 = 506.25
    assert result.credit_score == 506
    assert result.is_proxy is True
    assert result.credit_tier == CreditTier.VERY_POOR
    assert result.deposit_multiplier == 2.5
    assert "Request employment verification" in result.recommendations


def test_strong_proxy(strong_renter_credit):
    """Long tenure and clean payments earn an Excellent proxy score"""
    result = calculate_creditworthiness(strong_renter_credit)

    # Composite 98.5 -> 575 + 48.5 * 5.5 = 841.75
    assert result.credit_score == 842
    assert result.credit_tier == CreditTier.EXCELLENT
    assert result.deposit_multiplier == 1.0


def test_each_eviction_costs_150_points(strong_renter_credit):
    """Each prior eviction lowers the proxy score by a fixed 150 points"""
    one = calculate_creditworthiness(replace(strong_renter_credit, previous_evictions=1))
    two = calculate_creditworthiness(replace(strong_renter_credit, previous_evictions=2))

    assert one.credit_score == 692
    assert one.eviction_penalty == 150
    assert one.credit_tier == CreditTier.GOOD
    assert two.credit_score == 542
    assert two.credit_tier == CreditTier.VERY_POOR


def test_proxy_score_is_clamped():
    """Proxy scores never leave the 300-850 range"""
    result = calculate_creditworthiness(CreditworthinessInput(renter_id="r_1", previous_evictions=5))
    assert result.credit_score == 300


@pytest.mark.parametrize(
    "score,tier",
    [
        (850, CreditTier.EXCELLENT),
        (740, CreditTier.EXCELLENT),
        (739, CreditTier.GOOD),
        (670, CreditTier.GOOD),
        (669, CreditTier.FAIR),
        (620, CreditTier.FAIR),
        (619, CreditTier.POOR),
        (580, CreditTier.POOR),
        (579, CreditTier.VERY_POOR),
        (300, CreditTier.VERY_POOR),
    ],
)
def test_credit_tier_bands(score, tier):
    """Test tier boundaries and deposit multipliers"""
    assert credit_tier_for(score) == tier


def test_batch_preserves_order(strong_renter_credit):
    """Batch results line up with the input renters"""
    renters = [
        CreditworthinessInput(renter_id="a", actual_credit_score=600),
        strong_renter_credit,
        CreditworthinessInput(renter_id="c"),
    ]
    results = calculate_creditworthiness_batch(renters, max_workers=3)

    assert [r.renter_id for r in results] == ["a", "r_strong", "c"]
    assert [r.is_proxy for r in results] == [False, True, True]


def test_batch_invalid_renter_is_named_by_position(strong_renter_credit):
    """A bad renter in a batch is reported with its index"""
    renters = [strong_renter_credit, CreditworthinessInput(renter_id="b", actual_credit_score=900)]
    with pytest.raises(InvalidInputError) as exc:
        calculate_creditworthiness_batch(renters, max_workers=2)
    assert exc.value.field == "renters.1.actual_credit_score"
