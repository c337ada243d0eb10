"""Creditworthiness assessment - bureau passthrough or proxy credit score"""

from typing import List, Tuple

from homeu_scores.domain.exceptions import InvalidInputError
from homeu_scores.domain.models import (
    CreditTier,
    CreditworthinessInput,
    CreditworthinessResult,
    ScoreFactor,
)
from homeu_scores.domain.primitives import (
    clamp,
    make_factor,
    require_non_empty,
    require_non_negative,
    require_percentage,
    weighted_sum,
)
from homeu_scores.domain.tables import (
    CREDIT_SCORE_MAX,
    CREDIT_SCORE_MIN,
    CREDIT_TIER_BANDS,
    DEPOSIT_MULTIPLIERS,
)
from homeu_scores.utils.concurrency import parallel_map

PAYMENT_WEIGHT = 0.40
TENURE_WEIGHT = 0.20
EMPLOYMENT_WEIGHT = 0.25
INCOME_CONSISTENCY_WEIGHT = 0.15

BASELINE_SCORE = (CREDIT_SCORE_MIN + CREDIT_SCORE_MAX) / 2  # 575
POINTS_PER_COMPOSITE_POINT = (CREDIT_SCORE_MAX - CREDIT_SCORE_MIN) / 100  # 5.5
EVICTION_PENALTY = 150  # Two evictions take a baseline proxy below 300


def credit_tier_for(score: float) -> CreditTier:
    for minimum, tier in CREDIT_TIER_BANDS:
        if score >= minimum:
            return tier
    return CreditTier.VERY_POOR


def deposit_multiplier_for(tier: CreditTier) -> float:
    return DEPOSIT_MULTIPLIERS[tier]


def validate_credit_input(data: CreditworthinessInput) -> None:
    require_non_empty("renter_id", data.renter_id)
    if data.actual_credit_score is not None and not (
        CREDIT_SCORE_MIN <= data.actual_credit_score <= CREDIT_SCORE_MAX
    ):
        raise InvalidInputError("actual_credit_score", f"must be between {CREDIT_SCORE_MIN} and {CREDIT_SCORE_MAX}")
    require_non_negative("on_time_payments", data.on_time_payments)
    require_non_negative("late_payments", data.late_payments)
    require_non_negative("missed_payments", data.missed_payments)
    require_non_negative("rental_tenure_months", data.rental_tenure_months)
    require_non_negative("employment_months", data.employment_months)
    require_non_negative("previous_evictions", data.previous_evictions)
    require_percentage("income_consistency", data.income_consistency)


def payment_history_score(data: CreditworthinessInput) -> float:
    total = data.on_time_payments + data.late_payments + data.missed_payments
    if total == 0:
        return 50.0
    rate = data.on_time_payments / total
    if rate >= 0.98:
        return 100.0
    if rate >= 0.95:
        return 85.0
    if rate >= 0.90:
        return 70.0
    if rate >= 0.85:
        return 55.0
    if rate >= 0.70:
        return 35.0
    return 10.0


def tenure_score(months: int) -> float:
    if months >= 36:
        return 100.0
    if months >= 24:
        return 85.0
    if months >= 12:
        return 65.0
    if months >= 6:
        return 45.0
    return 25.0


def employment_score(data: CreditworthinessInput) -> float:
    if not data.employment_verified:
        return 20.0
    if data.employment_months >= 24:
        return 100.0
    if data.employment_months >= 12:
        return 80.0
    return 60.0


def proxy_factors(data: CreditworthinessInput) -> List[ScoreFactor]:
    total = data.on_time_payments + data.late_payments + data.missed_payments
    return [
        make_factor("Payment History", payment_history_score(data), PAYMENT_WEIGHT, f"{total} payments tracked"),
        make_factor(
            "Rental Tenure",
            tenure_score(data.rental_tenure_months),
            TENURE_WEIGHT,
            f"{data.rental_tenure_months} months",
        ),
        make_factor(
            "Employment",
            employment_score(data),
            EMPLOYMENT_WEIGHT,
            f"Verified, {data.employment_months} months" if data.employment_verified else "Unverified",
        ),
        make_factor(
            "Income Consistency",
            clamp(data.income_consistency),
            INCOME_CONSISTENCY_WEIGHT,
            f"{data.income_consistency:.0f}/100",
        ),
    ]


def proxy_recommendations(data: CreditworthinessInput, tier: CreditTier) -> List[str]:
    recommendations = ["Proxy score calculated from HomeU data", "Consider requesting actual credit report"]
    if data.previous_evictions > 0:
        recommendations.append(f"{data.previous_evictions} prior eviction(s) on record")
    if not data.employment_verified:
        recommendations.append("Request employment verification")
    if tier in (CreditTier.POOR, CreditTier.VERY_POOR):
        recommendations.append("Consider requiring a co-signer")
    return recommendations


def calculate_creditworthiness(data: CreditworthinessInput) -> CreditworthinessResult:
    """
    Main entry point: credit score on the 300-850 scale.

    An actual bureau score is passed through untouched. Otherwise a proxy is
    built from a weighted 0-100 composite mapped onto the range around its
    midpoint, less a fixed penalty per prior eviction.
    """
    validate_credit_input(data)

    if data.actual_credit_score is not None:
        score = data.actual_credit_score
        tier = credit_tier_for(score)
        return CreditworthinessResult(
            renter_id=data.renter_id,
            credit_score=score,
            is_proxy=False,
            credit_tier=tier,
            deposit_multiplier=deposit_multiplier_for(tier),
            factors=[
                ScoreFactor(
                    name="Credit Bureau Score",
                    value=float(score),
                    weight=1.0,
                    contribution=float(score),
                    description=f"Actual score: {score}",
                )
            ],
            eviction_penalty=0,
            recommendations=["Actual credit score on file"],
        )

    factors = proxy_factors(data)
    composite = weighted_sum(factors)
    penalty = data.previous_evictions * EVICTION_PENALTY
    raw = BASELINE_SCORE + (composite - 50) * POINTS_PER_COMPOSITE_POINT - penalty
    score = int(round(clamp(raw, CREDIT_SCORE_MIN, CREDIT_SCORE_MAX)))
    tier = credit_tier_for(score)

    return CreditworthinessResult(
        renter_id=data.renter_id,
        credit_score=score,
        is_proxy=True,
        credit_tier=tier,
        deposit_multiplier=deposit_multiplier_for(tier),
        factors=factors,
        eviction_penalty=penalty,
        recommendations=proxy_recommendations(data, tier),
    )


def _assess_indexed(item: Tuple[int, CreditworthinessInput]) -> CreditworthinessResult:
    index, renter = item
    try:
        return calculate_creditworthiness(renter)
    except InvalidInputError as e:
        raise InvalidInputError(f"renters.{index}.{e.field}", e.message) from e


def calculate_creditworthiness_batch(
    renters: List[CreditworthinessInput],
    max_workers: int = 1,
) -> List[CreditworthinessResult]:
    return parallel_map(_assess_indexed, list(enumerate(renters)), max_workers=max_workers)
