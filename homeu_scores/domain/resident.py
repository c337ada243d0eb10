"""Resident-facing scores: apartment desirability, negotiation power, renter score"""

from typing import List, Optional

from homeu_scores.domain.exceptions import InvalidInputError
from homeu_scores.domain.models import (
    DesirabilityInput,
    DesirabilityResult,
    NegotiationInput,
    NegotiationResult,
    NegotiationScript,
    RenterScoreInput,
    RenterScoreResult,
    RenterTier,
    ScoreFactor,
    ScoreGrade,
)
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
    round1,
    round_cents,
    safe_ratio,
)
from homeu_scores.domain.tables import (
    GRADE_LABELS,
    RENTER_TIER_THRESHOLDS,
    SEASONAL_LEVERAGE,
    SUMMER_MONTHS,
    WINTER_MONTHS,
)

# ============================================
# Desirability
# ============================================

DESIRABILITY_WEIGHTS = [
    ("Market Factors", 0.30),
    ("Location", 0.25),
    ("Amenities", 0.20),
    ("Price Trends", 0.15),
    ("Value Position", 0.10),
]


def validate_desirability(data: DesirabilityInput) -> None:
    require_non_negative("current_rent", data.current_rent)
    require_non_negative("market_rent", data.market_rent)
    require_percentage("occupancy_rate", data.occupancy_rate)
    require_non_negative("amenity_count", data.amenity_count)
    require_non_negative("unit_sqft", data.unit_sqft)
    require_non_negative("price_per_sqft", data.price_per_sqft)
    require_non_negative("market_price_per_sqft", data.market_price_per_sqft)
    require_non_negative("concession_value", data.concession_value)
    require_finite("rent_trend_3mo", data.rent_trend_3mo)
    require_finite("rent_trend_12mo", data.rent_trend_12mo)
    if data.google_rating is not None and not 0 <= data.google_rating <= 5:
        raise InvalidInputError("google_rating", "must be between 0 and 5")
    if data.walkability_score is not None:
        require_percentage("walkability_score", data.walkability_score)
    if data.transit_score is not None:
        require_percentage("transit_score", data.transit_score)


def market_factor_score(rent_ratio: float, occupancy_rate: float) -> float:
    if rent_ratio < 0.85:
        score = 80.0
    elif rent_ratio < 0.95:
        score = 70.0
    elif rent_ratio < 1.05:
        score = 60.0
    elif rent_ratio < 1.15:
        score = 40.0
    else:
        score = 20.0

    # Soft occupancy means the landlord is competing for residents
    if occupancy_rate < 85:
        score += 20
    elif occupancy_rate < 92:
        score += 10
    return clamp(score)


def location_score(data: DesirabilityInput) -> Optional[float]:
    """Mean of whichever location signals are present, None if there are none"""
    signals = []
    if data.google_rating is not None:
        signals.append(data.google_rating * 20)
    if data.walkability_score is not None:
        signals.append(data.walkability_score)
    if data.transit_score is not None:
        signals.append(data.transit_score)
    if not signals:
        return None
    return clamp(sum(signals) / len(signals))


def amenities_score(data: DesirabilityInput) -> float:
    score = 50.0 + min(data.amenity_count * 2, 20) - 10

    age = data.as_of_year - data.building_year
    if age <= 5:
        score += 15
    elif age <= 15:
        score += 10
    elif age > 50:
        score -= 10

    if data.unit_sqft >= 1000:
        score += 5
    elif 0 < data.unit_sqft < 500:
        score -= 5
    return clamp(score)


def price_trends_score(data: DesirabilityInput) -> float:
    score = 50.0 - data.rent_trend_3mo * 3 - data.rent_trend_12mo * 1.5
    if data.has_concessions and data.current_rent > 0:
        score += min(data.concession_value / data.current_rent * 10, 10)
    return clamp(score)


def value_position_score(data: DesirabilityInput) -> float:
    if data.market_price_per_sqft <= 0:
        return 50.0
    ratio = data.price_per_sqft / data.market_price_per_sqft
    if ratio < 0.85:
        return 90.0
    if ratio < 0.95:
        return 75.0
    if ratio < 1.05:
        return 60.0
    if ratio < 1.15:
        return 35.0
    return 20.0


def calculate_desirability(data: DesirabilityInput) -> DesirabilityResult:
    """
    Score how attractive an apartment is to a prospective resident.

    Location is optional: when no rating, walkability or transit signal is
    present the factor is dropped and the remaining weights are rescaled,
    so missing data neither helps nor hurts.
    """
    validate_desirability(data)

    rent_ratio = safe_ratio(data.current_rent, data.market_rent)
    location = location_score(data)

    values = {
        "Market Factors": market_factor_score(rent_ratio, data.occupancy_rate),
        "Location": location,
        "Amenities": amenities_score(data),
        "Price Trends": price_trends_score(data),
        "Value Position": value_position_score(data),
    }
    descriptions = {
        "Market Factors": f"Rent vs market: {(rent_ratio - 1) * 100:+.0f}%, {data.occupancy_rate:.0f}% occupied",
        "Location": f"{data.google_rating}/5 rating" if data.google_rating is not None else "Walkability and transit",
        "Amenities": f"{data.amenity_count} amenities, built {data.building_year}",
        "Price Trends": f"3mo: {data.rent_trend_3mo:+.1f}%, 12mo: {data.rent_trend_12mo:+.1f}%",
        "Value Position": f"${data.price_per_sqft:.2f}/sqft",
    }

    weights = [(name, w) for name, w in DESIRABILITY_WEIGHTS if values[name] is not None]
    if location is None:
        weights = renormalize(weights)

    factors = [make_factor(name, values[name], weight, descriptions[name]) for name, weight in weights]
    score = composite_score(factors)
    grade = grade_for(score)

    return DesirabilityResult(
        score=score,
        grade=grade,
        factors=factors,
        summary=f"This apartment scores {score}/100 - {GRADE_LABELS[grade]}.",
        recommendation="This is a solid choice." if score >= 75 else "Consider comparing with other options.",
    )


# ============================================
# Negotiation power
# ============================================

VACANCY_WEIGHT = 0.25
SEASONALITY_WEIGHT = 0.20
TENURE_WEIGHT = 0.15
PAYMENT_RECORD_WEIGHT = 0.15
MARKET_POSITION_WEIGHT = 0.15
COMPETITION_WEIGHT = 0.10

SUGGESTED_RENT_FLOOR = 0.85  # Never suggest asking below 85% of market


def validate_negotiation(data: NegotiationInput) -> None:
    require_non_negative("current_rent", data.current_rent)
    require_non_negative("market_rent", data.market_rent)
    require_percentage("occupancy_rate", data.occupancy_rate)
    require_month("current_month", data.current_month)
    require_non_negative("tenant_tenure_months", data.tenant_tenure_months)
    require_percentage("on_time_payment_rate", data.on_time_payment_rate)
    require_non_negative("competing_offers", data.competing_offers)
    require_finite("market_rent_growth", data.market_rent_growth)


def vacancy_score(occupancy_rate: float) -> float:
    if occupancy_rate < 85:
        return 90.0
    if occupancy_rate < 90:
        return 70.0
    if occupancy_rate < 95:
        return 55.0
    return 25.0


def tenure_score(months: int) -> float:
    if months >= 24:
        return 90.0
    if months >= 12:
        return 70.0
    if months >= 6:
        return 50.0
    return 30.0


def payment_record_score(on_time_rate: float) -> float:
    if on_time_rate >= 98:
        return 95.0
    if on_time_rate >= 95:
        return 80.0
    if on_time_rate >= 90:
        return 60.0
    return 35.0


def market_position_score(rent_ratio: float) -> float:
    """Paying above market is the tenant's leverage"""
    if rent_ratio >= 1.10:
        return 90.0
    if rent_ratio >= 1.0:
        return 65.0
    if rent_ratio >= 0.95:
        return 45.0
    return 25.0


def competition_score(competing_offers: int) -> float:
    """Other applicants for the unit weaken the tenant's hand"""
    return clamp(80.0 - competing_offers * 20)


def max_discount_for(power: float) -> float:
    """Piecewise-linear discount (%) the tenant can reasonably ask for"""
    if power <= 30:
        return power / 10
    if power <= 60:
        return 3 + (power - 30) / 6
    if power <= 80:
        return 8 + (power - 60) / 5
    return 12 + (power - 80) / 6.67


def calculate_negotiation(data: NegotiationInput) -> NegotiationResult:
    validate_negotiation(data)

    rent_ratio = safe_ratio(data.current_rent, data.market_rent)
    factors = [
        make_factor("Vacancy", vacancy_score(data.occupancy_rate), VACANCY_WEIGHT, f"{data.occupancy_rate:.0f}% occupancy"),
        make_factor(
            "Seasonality",
            SEASONAL_LEVERAGE[data.current_month],
            SEASONALITY_WEIGHT,
            f"Month {data.current_month}",
        ),
        make_factor("Tenure", tenure_score(data.tenant_tenure_months), TENURE_WEIGHT, f"{data.tenant_tenure_months} months"),
        make_factor(
            "Payment Record",
            payment_record_score(data.on_time_payment_rate),
            PAYMENT_RECORD_WEIGHT,
            f"{data.on_time_payment_rate:.0f}% on-time",
        ),
        make_factor(
            "Market Position",
            market_position_score(rent_ratio),
            MARKET_POSITION_WEIGHT,
            f"{(rent_ratio - 1) * 100:+.0f}% vs market",
        ),
        make_factor(
            "Competition",
            competition_score(data.competing_offers),
            COMPETITION_WEIGHT,
            f"{data.competing_offers} competing offers",
        ),
    ]
    score = composite_score(factors)
    max_discount = max_discount_for(score)
    suggested_rent = max(data.current_rent * (1 - max_discount / 100), data.market_rent * SUGGESTED_RENT_FLOOR)

    asks = [f"Request a {max_discount:.0f}% rent reduction", "Ask for waived fees"]
    if data.market_rent_growth > 4:
        asks.append(f"Market rents are rising {data.market_rent_growth:.1f}% a year: offer a longer lease to lock in today's rate")
    if data.tenant_tenure_months >= 12:
        asks.append("Ask for a loyalty upgrade such as new appliances or a free parking spot")

    if data.current_month in WINTER_MONTHS:
        best_timing = "Now is a good time to negotiate"
    elif data.current_month in SUMMER_MONTHS:
        best_timing = "Consider waiting for off-peak season"
    else:
        best_timing = "Timing is moderate; off-peak winter months give the most leverage"

    scripts = [
        NegotiationScript(
            scenario="Opening",
            script=(
                f"Hi, I'd like to discuss my lease renewal. I've lived here for {data.tenant_tenure_months} months "
                f"and paid on time {data.on_time_payment_rate:.0f}% of the time. "
                f"Would you consider ${round_cents(suggested_rent):,.2f}/month?"
            ),
        ),
        NegotiationScript(
            scenario="Market Comparison",
            script=(
                f"Comparable units nearby are listed around ${data.market_rent:,.0f}/month, "
                f"and I'm currently paying ${data.current_rent:,.0f}. I'd like to stay if we can close that gap."
            ),
        ),
    ]

    return NegotiationResult(
        score=score,
        grade=grade_for(score),
        factors=factors,
        suggested_rent=round_cents(suggested_rent),
        max_discount=round1(max_discount),
        suggested_asks=asks,
        best_timing=best_timing,
        scripts=scripts,
    )


# ============================================
# HomeU Renter Score
# ============================================

RENTAL_HISTORY_WEIGHT = 0.30
EMPLOYMENT_INCOME_WEIGHT = 0.25
PAYMENT_HISTORY_WEIGHT = 0.25
VERIFICATION_WEIGHT = 0.15
FINANCIAL_WEIGHT = 0.05

MAX_IMPROVEMENT_TIPS = 5


def validate_renter_score(data: RenterScoreInput) -> None:
    require_non_negative("rental_history_months", data.rental_history_months)
    require_non_negative("annual_income", data.annual_income)
    require_non_negative("monthly_rent", data.monthly_rent)
    require_non_negative("on_time_payments", data.on_time_payments)
    require_non_negative("late_payments", data.late_payments)
    require_non_negative("missed_payments", data.missed_payments)
    require_non_negative("employment_tenure_months", data.employment_tenure_months)
    require_non_negative("current_streak", data.current_streak)


def rental_history_score(data: RenterScoreInput) -> float:
    months = data.rental_history_months
    score = 50.0
    if months >= 60:
        score += 30
    elif months >= 36:
        score += 25
    elif months >= 24:
        score += 20
    elif months >= 12:
        score += 10
    elif months < 6:
        score -= 15
    if data.verified_history:
        score += 10
    return clamp(score)


def rent_to_income_pct(data: RenterScoreInput) -> Optional[float]:
    if data.annual_income <= 0:
        return None
    return data.monthly_rent * 12 / data.annual_income * 100


def employment_income_score(data: RenterScoreInput) -> float:
    score = 50.0
    score += 20 if data.employment_verified else -10

    ratio = rent_to_income_pct(data)
    if ratio is None or ratio > 40:
        score -= 25
    elif ratio <= 25:
        score += 25
    elif ratio <= 30:
        score += 15
    elif ratio <= 35:
        score += 5

    if data.employment_verified and data.employment_tenure_months >= 24:
        score += 5
    elif data.employment_tenure_months < 6:
        score -= 5
    return clamp(score)


def payment_history_score(data: RenterScoreInput) -> float:
    score = 50.0
    total = data.on_time_payments + data.late_payments + data.missed_payments
    if total > 0:
        rate = data.on_time_payments / total * 100
        if rate >= 98:
            score += 35
        elif rate >= 95:
            score += 25
        elif rate >= 90:
            score += 15
        elif rate < 70:
            score -= 30
    if data.current_streak >= 24:
        score += 15
    elif data.current_streak >= 12:
        score += 10
    return clamp(score)


def verification_score(data: RenterScoreInput) -> float:
    score = 30.0
    if data.identity_verified:
        score += 40
    if data.bank_linked:
        score += 30
    return clamp(score)


def financial_score(data: RenterScoreInput) -> float:
    score = 50.0
    score += 30 if data.has_sufficient_balance else -20
    if data.balance_check_passed:
        score += 20
    return clamp(score)


def renter_tier_for(score: float) -> RenterTier:
    for minimum, tier in RENTER_TIER_THRESHOLDS:
        if score >= minimum:
            return tier
    return RenterTier.BRONZE


def verified_badges(data: RenterScoreInput) -> List[str]:
    badges = []
    if data.identity_verified:
        badges.append("identity_verified")
    if data.bank_linked:
        badges.append("bank_linked")
    if data.employment_verified:
        badges.append("employment_verified")
    if data.verified_history:
        badges.append("rental_history_verified")
    return badges


def improvement_tips(data: RenterScoreInput) -> List[str]:
    tips = []
    if not data.identity_verified:
        tips.append("Complete identity verification for +40 verification points")
    if not data.bank_linked:
        tips.append("Link your bank account for +30 verification points")
    if not data.employment_verified:
        tips.append("Connect your payroll provider to verify employment")
    if not data.verified_history:
        tips.append("Verify your rental history with a previous landlord")
    if data.current_streak < 6:
        tips.append("Build a payment streak by paying on time")
    if not tips:
        tips.append("Your score is excellent! Keep it up.")
    return tips[:MAX_IMPROVEMENT_TIPS]


def calculate_renter_score(data: RenterScoreInput) -> RenterScoreResult:
    """
    Unified 0-100 renter quality score.

    An eviction on record disqualifies outright. Missing verifications lower
    the score; they never raise.
    """
    validate_renter_score(data)

    if data.eviction_history:
        return RenterScoreResult(
            score=0.0,
            grade=ScoreGrade.VERY_POOR,
            tier=RenterTier.DISQUALIFIED,
            factors=[
                ScoreFactor(
                    name="Eviction",
                    value=0.0,
                    weight=1.0,
                    contribution=0.0,
                    description="Previous eviction on record",
                )
            ],
            improvement_tips=["Contact us for assistance"],
            verified_badges=[],
        )

    ratio = rent_to_income_pct(data)
    badges = verified_badges(data)
    factors = [
        make_factor(
            "Rental History",
            rental_history_score(data),
            RENTAL_HISTORY_WEIGHT,
            f"{data.rental_history_months} months",
        ),
        make_factor(
            "Employment & Income",
            employment_income_score(data),
            EMPLOYMENT_INCOME_WEIGHT,
            f"{ratio:.0f}% rent-to-income" if ratio is not None else "No income reported",
        ),
        make_factor(
            "Payment History",
            payment_history_score(data),
            PAYMENT_HISTORY_WEIGHT,
            f"{data.current_streak} month streak",
        ),
        make_factor(
            "Verification Status",
            verification_score(data),
            VERIFICATION_WEIGHT,
            ", ".join(badges) if badges else "None",
        ),
        make_factor(
            "Financial Standing",
            financial_score(data),
            FINANCIAL_WEIGHT,
            "Sufficient" if data.has_sufficient_balance else "Insufficient",
        ),
    ]
    score = composite_score(factors)

    return RenterScoreResult(
        score=score,
        grade=grade_for(score),
        tier=renter_tier_for(score),
        factors=factors,
        improvement_tips=improvement_tips(data),
        verified_badges=badges,
    )
