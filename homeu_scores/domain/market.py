"""Market intelligence: deal score, leverage score and lease renewal strategy"""

from typing import List

from homeu_scores.domain.exceptions import InvalidInputError
from homeu_scores.domain.models import (
    DealScoreInput,
    DealScoreResult,
    LeverageScoreInput,
    LeverageScoreResult,
    NegotiationScript,
    RenewalAction,
    RenewalStrategyInput,
    RenewalStrategyResult,
)
from homeu_scores.domain.primitives import (
    clamp,
    composite_score,
    grade_for,
    make_factor,
    require_finite,
    require_month,
    require_non_negative,
    require_percentage,
    round1,
    round_cents,
    safe_ratio,
)
from homeu_scores.domain.tables import GRADE_LABELS, SEASONAL_LEVERAGE, SUMMER_MONTHS, WINTER_MONTHS
from homeu_scores.utils.date_utils import months_until

# ============================================
# Deal Score
# ============================================

RENT_POSITION_WEIGHT = 0.35
OCCUPANCY_SIGNAL_WEIGHT = 0.20
CONCESSION_VALUE_WEIGHT = 0.15
PRICE_PER_SQFT_WEIGHT = 0.15
TREND_MOMENTUM_WEIGHT = 0.15

RENT_POSITION_POINTS_PER_PCT = 2.5
MARKET_OCCUPANCY_GAP_POINTS = 1.5

# (upper bound on unit $/sqft over market $/sqft, score)
PRICE_PER_SQFT_TIERS = (
    (0.80, 95.0),
    (0.90, 80.0),
    (1.00, 65.0),
    (1.10, 45.0),
    (1.20, 30.0),
)
PRICE_PER_SQFT_FLOOR = 15.0


def validate_deal(data: DealScoreInput) -> None:
    require_non_negative("current_rent", data.current_rent)
    require_non_negative("market_rent", data.market_rent)
    require_percentage("occupancy_rate", data.occupancy_rate)
    require_percentage("market_occupancy", data.market_occupancy)
    require_non_negative("avg_rent_per_sqft", data.avg_rent_per_sqft)
    require_non_negative("unit_sqft", data.unit_sqft)
    require_non_negative("concession_value", data.concession_value)
    require_non_negative("market_concession_value", data.market_concession_value)
    require_finite("rent_trend_3mo", data.rent_trend_3mo)
    require_finite("rent_trend_12mo", data.rent_trend_12mo)


def rent_position_score(current_rent: float, market_rent: float) -> float:
    """50 at parity, +/- 2.5 points per percent below/above market"""
    if market_rent <= 0:
        return 50.0
    diff_pct = (market_rent - current_rent) / market_rent * 100
    return clamp(50 + diff_pct * RENT_POSITION_POINTS_PER_PCT)


def occupancy_signal_score(occupancy_rate: float, market_occupancy: float) -> float:
    score = 50.0
    if occupancy_rate < 80:
        score += 40
    elif occupancy_rate < 85:
        score += 30
    elif occupancy_rate < 90:
        score += 20
    elif occupancy_rate < 95:
        score += 5
    else:
        score -= 15
    if market_occupancy > 0:
        score += (market_occupancy - occupancy_rate) * MARKET_OCCUPANCY_GAP_POINTS
    return clamp(score)


def concession_value_score(concession_value: float, market_concession_value: float) -> float:
    score = 50.0
    if concession_value > 0:
        score += 15
        if market_concession_value > 0:
            ratio = concession_value / market_concession_value
            if ratio > 1.5:
                score += 25
            elif ratio > 1.0:
                score += 15
            else:
                score += 5
        else:
            score += 20
    elif market_concession_value > 0:
        score -= 15
    return clamp(score)


def price_per_sqft_score(data: DealScoreInput) -> float:
    if data.avg_rent_per_sqft <= 0 or data.unit_sqft <= 0:
        return 50.0
    ratio = (data.current_rent / data.unit_sqft) / data.avg_rent_per_sqft
    for upper, score in PRICE_PER_SQFT_TIERS:
        if ratio < upper:
            return score
    return PRICE_PER_SQFT_FLOOR


def trend_momentum_score(trend_3mo: float, trend_12mo: float) -> float:
    """Falling rents favour the renter; the recent trend counts most"""
    score = 50.0
    if trend_3mo < -3:
        score += 30
    elif trend_3mo < -1:
        score += 20
    elif trend_3mo < 0:
        score += 10
    elif trend_3mo > 3:
        score -= 20
    elif trend_3mo > 1:
        score -= 10

    if trend_12mo < -2:
        score += 10
    elif trend_12mo > 5:
        score -= 10
    return clamp(score)


def calculate_deal_score(data: DealScoreInput) -> DealScoreResult:
    """How good a deal this unit is relative to its market"""
    validate_deal(data)

    if data.market_rent > 0:
        rent_desc = f"{(1 - data.current_rent / data.market_rent) * 100:.0f}% vs market"
    else:
        rent_desc = "N/A"

    factors = [
        make_factor(
            "Rent Position",
            rent_position_score(data.current_rent, data.market_rent),
            RENT_POSITION_WEIGHT,
            rent_desc,
        ),
        make_factor(
            "Occupancy Signal",
            occupancy_signal_score(data.occupancy_rate, data.market_occupancy),
            OCCUPANCY_SIGNAL_WEIGHT,
            f"{data.occupancy_rate:g}% occ",
        ),
        make_factor(
            "Concession Value",
            concession_value_score(data.concession_value, data.market_concession_value),
            CONCESSION_VALUE_WEIGHT,
            f"${data.concession_value:g} concession",
        ),
        make_factor(
            "Price/SqFt Value",
            price_per_sqft_score(data),
            PRICE_PER_SQFT_WEIGHT,
            f"${data.current_rent / data.unit_sqft:.2f}/sqft" if data.unit_sqft > 0 else "N/A",
        ),
        make_factor(
            "Trend Momentum",
            trend_momentum_score(data.rent_trend_3mo, data.rent_trend_12mo),
            TREND_MOMENTUM_WEIGHT,
            f"3-mo: {data.rent_trend_3mo:+g}%",
        ),
    ]
    score = composite_score(factors)
    grade = grade_for(score)

    return DealScoreResult(
        score=score,
        grade=grade,
        factors=factors,
        summary=f"Deal Score {score}/100 - {GRADE_LABELS[grade]} deal.",
        recommendation=(
            "This is a strong deal. Apply soon." if score >= 75 else "Consider negotiating or comparing alternatives."
        ),
    )


# ============================================
# Leverage Score
# ============================================

VACANCY_LEVERAGE_WEIGHT = 0.30
SEASONALITY_WEIGHT = 0.20
MARKET_POSITION_WEIGHT = 0.20
PROPERTY_WEAKNESS_WEIGHT = 0.15
CONCESSION_CLIMATE_WEIGHT = 0.15

# (exclusive lower bound on % above market, score)
MARKET_POSITION_TIERS = ((15, 95.0), (10, 80.0), (5, 65.0), (0, 50.0), (-5, 35.0))
MARKET_POSITION_FLOOR = 20.0

# (exclusive lower bound on % of properties with concessions, score)
CONCESSION_CLIMATE_TIERS = ((60, 90.0), (40, 75.0), (20, 55.0), (5, 35.0))
CONCESSION_CLIMATE_FLOOR = 20.0


def validate_leverage(data: LeverageScoreInput) -> None:
    require_percentage("occupancy_rate", data.occupancy_rate)
    require_percentage("market_occupancy", data.market_occupancy)
    require_month("current_month", data.current_month)
    require_finite("rent_vs_market_pct", data.rent_vs_market_pct)
    if data.rent_vs_market_pct <= 0:
        raise InvalidInputError("rent_vs_market_pct", "must be a positive multiple of market rent")
    require_percentage("concession_prevalence", data.concession_prevalence)
    require_non_negative("building_age", data.building_age)
    require_non_negative("property_units", data.property_units)
    if data.google_rating is not None and not 0 <= data.google_rating <= 5:
        raise InvalidInputError("google_rating", "must be between 0 and 5")


def vacancy_leverage_score(occupancy_rate: float, market_occupancy: float) -> float:
    score = 40.0
    if market_occupancy > 0:
        gap = market_occupancy - occupancy_rate
        if gap > 10:
            score += 50
        elif gap > 5:
            score += 35
        elif gap > 0:
            score += 15
        else:
            score -= 10
    if occupancy_rate < 80:
        score += 10
    elif occupancy_rate > 97:
        score -= 20
    return clamp(score)


def tiered_score(value: float, tiers, floor: float) -> float:
    for lower, score in tiers:
        if value > lower:
            return score
    return floor


def property_weakness_score(data: LeverageScoreInput) -> float:
    """Older, lower-rated and larger buildings struggle more to fill units"""
    score = 40.0
    age = data.building_age
    if age > 40:
        score += 25
    elif age > 25:
        score += 15
    elif age > 15:
        score += 5
    elif age < 5:
        score -= 15

    rating = data.google_rating
    if rating is not None:
        if rating < 3.0:
            score += 25
        elif rating < 3.5:
            score += 15
        elif rating < 4.0:
            score += 5
        elif rating >= 4.5:
            score -= 10

    if data.property_units > 300:
        score += 10
    elif data.property_units > 150:
        score += 5
    return clamp(score)


def leverage_tips(data: LeverageScoreInput) -> List[str]:
    tips = []
    if data.occupancy_rate < 90:
        tips.append("Vacancy is your strongest card: mention you have other options.")
    if data.rent_vs_market_pct > 1.05:
        tips.append("Your rent is above market average. Present comparable listings as evidence.")
    if data.concession_prevalence > 30:
        tips.append("Competitors are offering concessions. Ask for matching incentives.")
    if not tips:
        tips.append("Market conditions are tight. Focus on demonstrating your value as a reliable tenant.")
    return tips


def seasonal_timing(month: int) -> str:
    if month in WINTER_MONTHS:
        return "Now is an excellent time to negotiate. Winter months have the lowest demand."
    if month in SUMMER_MONTHS:
        return "Consider waiting until fall/winter for better leverage."
    return "Current timing is moderate for negotiations."


def calculate_leverage_score(data: LeverageScoreInput) -> LeverageScoreResult:
    """Tenant's negotiating power from market and property conditions"""
    validate_leverage(data)

    pct_above = (data.rent_vs_market_pct - 1.0) * 100
    factors = [
        make_factor(
            "Vacancy Leverage",
            vacancy_leverage_score(data.occupancy_rate, data.market_occupancy),
            VACANCY_LEVERAGE_WEIGHT,
            f"{data.occupancy_rate:g}% occupancy",
        ),
        make_factor(
            "Seasonality",
            SEASONAL_LEVERAGE[data.current_month],
            SEASONALITY_WEIGHT,
            f"Month {data.current_month}",
        ),
        make_factor(
            "Market Position",
            tiered_score(pct_above, MARKET_POSITION_TIERS, MARKET_POSITION_FLOOR),
            MARKET_POSITION_WEIGHT,
            f"{pct_above:+.0f}% vs market",
        ),
        make_factor(
            "Property Weakness",
            property_weakness_score(data),
            PROPERTY_WEAKNESS_WEIGHT,
            f"{data.building_age}yr old, {data.property_units} units",
        ),
        make_factor(
            "Concession Climate",
            tiered_score(data.concession_prevalence, CONCESSION_CLIMATE_TIERS, CONCESSION_CLIMATE_FLOOR),
            CONCESSION_CLIMATE_WEIGHT,
            f"{data.concession_prevalence:g}% offering concessions",
        ),
    ]
    score = composite_score(factors)

    return LeverageScoreResult(
        score=score,
        grade=grade_for(score),
        factors=factors,
        negotiation_tips=leverage_tips(data),
        best_timing=seasonal_timing(data.current_month),
    )


# ============================================
# Renewal Strategy
# ============================================

RENEWAL_RENT_WEIGHT = 0.35
RENEWAL_OCCUPANCY_WEIGHT = 0.30
RENEWAL_SEASONALITY_WEIGHT = 0.15
RENEWAL_TREND_WEIGHT = 0.20

MAX_DISCOUNT_PCT = 20.0
MAX_LOYALTY_DISCOUNT = 10.0
LOYALTY_PCT_PER_YEAR = 2.0

OPTIMAL_WINDOW_MONTHS = (3, 4)  # 60-90 days before the lease ends


def validate_renewal(data: RenewalStrategyInput) -> None:
    require_non_negative("current_rent", data.current_rent)
    require_non_negative("market_rent", data.market_rent)
    require_percentage("occupancy_rate", data.occupancy_rate)
    require_month("current_month", data.current_month)
    require_month("lease_end_month", data.lease_end_month)
    require_non_negative("tenant_tenure_months", data.tenant_tenure_months)
    require_percentage("on_time_payment_rate", data.on_time_payment_rate)
    require_non_negative("concession_value", data.concession_value)
    require_finite("rent_trend_3mo", data.rent_trend_3mo)


def renewal_rent_score(rent_ratio: float) -> float:
    if rent_ratio > 1.15:
        return 95.0
    if rent_ratio > 1.05:
        return 75.0
    if rent_ratio > 1.0:
        return 55.0
    if rent_ratio >= 0.90:
        return 30.0
    return 5.0


def renewal_occupancy_score(occupancy_rate: float) -> float:
    if occupancy_rate < 85:
        return 90.0
    if occupancy_rate < 90:
        return 70.0
    if occupancy_rate < 95:
        return 55.0
    return 15.0


def renewal_trend_score(trend_3mo: float) -> float:
    if trend_3mo < -2:
        return 85.0
    if trend_3mo < 0:
        return 65.0
    if trend_3mo <= 2:
        return 45.0
    return 25.0


def base_discount_for(leverage: float) -> float:
    if leverage > 70:
        return 8.0
    if leverage > 50:
        return 5.0
    if leverage > 30:
        return 3.0
    return 1.0


def payment_bonus_for(on_time_rate: float) -> float:
    if on_time_rate >= 98:
        return 5.0
    if on_time_rate >= 95:
        return 3.0
    return 0.0


def recommend_action(rent_ratio: float, occupancy_rate: float, leverage: float, max_discount: float) -> RenewalAction:
    """
    Decision tree, first match wins:

    1. well above market in a soft building -> negotiate
    2. below market, or a full building at a fair rent -> renew
    3. strong leverage -> negotiate
    4. little room to discount in a full building -> explore alternatives
    5. otherwise -> negotiate
    """
    if rent_ratio > 1.10 and occupancy_rate < 92:
        return RenewalAction.NEGOTIATE
    if rent_ratio < 0.95 or (occupancy_rate > 97 and rent_ratio < 1.05):
        return RenewalAction.RENEW
    if leverage > 60:
        return RenewalAction.NEGOTIATE
    if max_discount < 3 and occupancy_rate > 95:
        return RenewalAction.EXPLORE
    return RenewalAction.NEGOTIATE


def timing_advice_for(months_left: int) -> str:
    low, high = OPTIMAL_WINDOW_MONTHS
    if low <= months_left <= high:
        return "Perfect timing: 60-90 days before lease end is the ideal negotiation window."
    if months_left > high:
        return f"Your lease ends in ~{months_left} months. Start the conversation 60-90 days before expiration."
    return "Initiate negotiations immediately to avoid defaulting to month-to-month rates."


def talking_points_for(data: RenewalStrategyInput, rent_ratio: float) -> List[str]:
    points = []
    if data.tenant_tenure_months >= 12:
        points.append(
            f"You've been a reliable tenant for {data.tenant_tenure_months} months; "
            "turnover costs landlords $3,000-$5,000."
        )
    if data.on_time_payment_rate >= 95:
        points.append(f"Your {data.on_time_payment_rate:.0f}% on-time payment rate makes you a low-risk tenant.")
    if data.market_rent > 0 and data.current_rent > data.market_rent:
        points.append(f"Your rent is {(rent_ratio - 1) * 100:.0f}% above current market rate.")
    if data.concession_value > 0:
        points.append(f"New residents are being offered ${data.concession_value:,.0f} in concessions; ask for the same.")
    if not points:
        points.append("Emphasize your reliability and interest in a long-term stay.")
    return points


def calculate_renewal_strategy(data: RenewalStrategyInput) -> RenewalStrategyResult:
    """
    Lease renewal plan: leverage, discount target, recommended action,
    talking points, scripts and timing.

    The discount combines a leverage-driven base with a loyalty credit
    (2% per year of tenure, at most 10%) and an on-time payment bonus,
    capped at 20%.
    """
    validate_renewal(data)

    rent_ratio = safe_ratio(data.current_rent, data.market_rent)
    factors = [
        make_factor("Rent Position", renewal_rent_score(rent_ratio), RENEWAL_RENT_WEIGHT, f"{(rent_ratio - 1) * 100:+.0f}% vs market"),
        make_factor(
            "Occupancy",
            renewal_occupancy_score(data.occupancy_rate),
            RENEWAL_OCCUPANCY_WEIGHT,
            f"{data.occupancy_rate:g}% occupancy",
        ),
        make_factor(
            "Seasonality",
            SEASONAL_LEVERAGE[data.lease_end_month],
            RENEWAL_SEASONALITY_WEIGHT,
            f"Lease ends in month {data.lease_end_month}",
        ),
        make_factor(
            "Rent Trend",
            renewal_trend_score(data.rent_trend_3mo),
            RENEWAL_TREND_WEIGHT,
            f"3-mo: {data.rent_trend_3mo:+g}%",
        ),
    ]
    leverage = composite_score(factors)

    loyalty = min(data.tenant_tenure_months / 12 * LOYALTY_PCT_PER_YEAR, MAX_LOYALTY_DISCOUNT)
    max_discount = clamp(
        base_discount_for(leverage) + loyalty + payment_bonus_for(data.on_time_payment_rate),
        0.0,
        MAX_DISCOUNT_PCT,
    )
    target_rent = round_cents(data.current_rent * (1 - max_discount / 100))
    months_left = months_until(data.current_month, data.lease_end_month)

    scripts = [
        NegotiationScript(
            scenario="Opening Request",
            script=(
                f"Hi, I'd like to discuss my lease renewal. I've been a great tenant for "
                f"{data.tenant_tenure_months} months. Would you consider renewing at ${target_rent:,.2f}/month?"
            ),
        ),
        NegotiationScript(
            scenario="Alternative Ask",
            script=(
                "If a rent reduction isn't possible, I'd be open to other concessions: waived parking fees, "
                f"a storage unit, or a month of free rent on my current ${data.current_rent:,.2f}/month lease."
            ),
        ),
    ]

    return RenewalStrategyResult(
        recommended_action=recommend_action(rent_ratio, data.occupancy_rate, leverage, max_discount),
        target_rent=target_rent,
        max_discount_pct=round1(max_discount),
        leverage_score=leverage,
        grade=grade_for(leverage),
        factors=factors,
        talking_points=talking_points_for(data, rent_ratio),
        scripts=scripts,
        months_until_lease_end=months_left,
        timing_advice=timing_advice_for(months_left),
    )
