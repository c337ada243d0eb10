"""Collection-likelihood forecasting and portfolio risk aggregation"""

from statistics import mean, median
from typing import List, Optional, Sequence

from homeu_scores.domain.exceptions import InvalidInputError
from homeu_scores.domain.models import (
    AtRiskTenant,
    CollectionForecastInput,
    CollectionForecastResult,
    ConfidenceInterval,
    MonthlyForecast,
    PortfolioRiskInput,
    PortfolioRiskResult,
    PortfolioSummary,
    RiskCategory,
    RiskDistribution,
    TenantRiskInput,
    TenantRiskResult,
)
from homeu_scores.domain.primitives import clamp, require_percentage, round1, round_cents
from homeu_scores.domain.tables import AT_RISK_CATEGORIES, SEASONAL_COLLECTION_FACTORS
from homeu_scores.domain.tenant_risk import calculate_tenant_risks_batch
from homeu_scores.utils.date_utils import parse_month, shift_month

# Blend of current tenant risk and long-run collection behaviour. Current
# risk carries more weight: the tenant mix changes faster than the history.
TENANT_RISK_BLEND = 0.7
HISTORICAL_BLEND = 0.3

ROLLING_MONTHS = 3
BASE_CONFIDENCE = 0.95
CONFIDENCE_DECAY = 0.05
INTERVAL_HALF_WIDTH = 5.0


def validate_portfolio(tenants: Sequence[TenantRiskInput], historical_collection_rate: float) -> None:
    if not tenants:
        raise InvalidInputError("tenants", "must be a non-empty array")
    require_percentage("historical_collection_rate", historical_collection_rate)


def validated_month(field: str, value: str) -> int:
    try:
        _, month = parse_month(value)
    except ValueError as e:
        raise InvalidInputError(field, str(e)) from e
    return month


def seasonal_factor(month: int, enabled: bool) -> float:
    return SEASONAL_COLLECTION_FACTORS[month] if enabled else 1.0


def collection_probability(result: TenantRiskResult, historical_collection_rate: float) -> float:
    """Chance (0-100) this tenant pays in full this month"""
    return TENANT_RISK_BLEND * result.payment_likelihood + HISTORICAL_BLEND * historical_collection_rate


def weighted_collection_rate(
    tenants: Sequence[TenantRiskInput],
    results: Sequence[TenantRiskResult],
    historical_collection_rate: float,
) -> float:
    """Rent-weighted collection probability across the portfolio"""
    total_rent = sum(t.rent_amount for t in tenants)
    if total_rent <= 0:
        return historical_collection_rate
    collected = sum(
        t.rent_amount * collection_probability(r, historical_collection_rate)
        for t, r in zip(tenants, results)
    )
    return collected / total_rent


def at_risk_tenants(
    tenants: Sequence[TenantRiskInput],
    results: Sequence[TenantRiskResult],
) -> List[AtRiskTenant]:
    return [
        AtRiskTenant(
            renter_id=r.renter_id,
            renter_name=r.renter_name,
            property_address=r.property_address,
            rent_amount=t.rent_amount,
            risk_score=r.risk_score,
            payment_likelihood=r.payment_likelihood,
        )
        for t, r in zip(tenants, results)
        if r.risk_category in AT_RISK_CATEGORIES
    ]


def build_forecast(
    data: CollectionForecastInput,
    results: Sequence[TenantRiskResult],
) -> CollectionForecastResult:
    """Assemble a forecast from tenant results that are already scored"""
    month = validated_month("forecast_month", data.forecast_month)
    total_rent = sum(t.rent_amount for t in data.tenants)
    base_rate = weighted_collection_rate(data.tenants, results, data.historical_collection_rate)

    rate = clamp(base_rate * seasonal_factor(month, data.seasonal_adjustment))
    expected = total_rent * rate / 100

    monthly_forecasts = []
    for i in range(ROLLING_MONTHS):
        label = shift_month(data.forecast_month, i)
        month_rate = clamp(base_rate * seasonal_factor((month - 1 + i) % 12 + 1, data.seasonal_adjustment))
        monthly_forecasts.append(
            MonthlyForecast(
                month=label,
                expected_rate=round1(month_rate),
                expected_amount=round_cents(total_rent * month_rate / 100),
                confidence=round(BASE_CONFIDENCE - i * CONFIDENCE_DECAY, 2),
            )
        )

    return CollectionForecastResult(
        forecast_month=data.forecast_month,
        total_expected_rent=round_cents(total_rent),
        expected_collection_rate=round1(rate),
        expected_collection_amount=round_cents(expected),
        expected_shortfall=round_cents(total_rent - expected),
        confidence_interval=ConfidenceInterval(
            lower=round1(clamp(rate - INTERVAL_HALF_WIDTH)),
            upper=round1(clamp(rate + INTERVAL_HALF_WIDTH)),
            confidence=BASE_CONFIDENCE,
        ),
        at_risk_tenants=at_risk_tenants(data.tenants, results),
        monthly_forecasts=monthly_forecasts,
    )


def calculate_collection_forecast(data: CollectionForecastInput, max_workers: int = 1) -> CollectionForecastResult:
    """
    Main entry point: expected rent collection for one month.

    Each tenant's collection probability blends their payment likelihood with
    the portfolio's historical rate; the portfolio rate is the rent-weighted
    mean, optionally scaled by the calendar month's seasonal factor.
    """
    validate_portfolio(data.tenants, data.historical_collection_rate)
    validated_month("forecast_month", data.forecast_month)
    results = calculate_tenant_risks_batch(data.tenants, max_workers=max_workers)
    return build_forecast(data, results)


def risk_distribution(results: Sequence[TenantRiskResult]) -> RiskDistribution:
    counts = {category: 0 for category in RiskCategory}
    for r in results:
        counts[r.risk_category] += 1
    return RiskDistribution(
        low=counts[RiskCategory.LOW],
        moderate=counts[RiskCategory.MODERATE],
        high=counts[RiskCategory.HIGH],
        critical=counts[RiskCategory.CRITICAL],
    )


def rent_weighted_risk(tenants: Sequence[TenantRiskInput], results: Sequence[TenantRiskResult]) -> float:
    total_rent = sum(t.rent_amount for t in tenants)
    if total_rent <= 0:
        return mean(r.risk_score for r in results)
    return sum(t.rent_amount * r.risk_score for t, r in zip(tenants, results)) / total_rent


def calculate_portfolio_risk(data: PortfolioRiskInput, max_workers: int = 1) -> PortfolioRiskResult:
    """
    Portfolio dashboard: overall risk, category distribution and one
    seasonally-adjusted forecast per requested month.
    """
    validate_portfolio(data.tenants, data.historical_collection_rate)
    for i, month in enumerate(data.forecast_months):
        validated_month(f"forecast_months.{i}", month)

    results = calculate_tenant_risks_batch(data.tenants, max_workers=max_workers)
    total_rent = sum(t.rent_amount for t in data.tenants)
    avg_risk = rent_weighted_risk(data.tenants, results)
    overall = clamp(TENANT_RISK_BLEND * avg_risk + HISTORICAL_BLEND * (100 - data.historical_collection_rate))

    forecasts = [
        build_forecast(
            CollectionForecastInput(
                property_manager_id=data.property_manager_id,
                organization_id=data.organization_id,
                forecast_month=month,
                tenants=data.tenants,
                historical_collection_rate=data.historical_collection_rate,
                seasonal_adjustment=True,
            ),
            results,
        )
        for month in data.forecast_months
    ]

    if forecasts:
        expected_collection = forecasts[0].expected_collection_amount
    else:
        expected_collection = total_rent * data.historical_collection_rate / 100

    return PortfolioRiskResult(
        property_manager_id=data.property_manager_id,
        snapshot_date=data.snapshot_date,
        overall_risk_score=round1(overall),
        rent_weighted_risk_score=round1(avg_risk),
        total_tenants=len(data.tenants),
        risk_distribution=risk_distribution(results),
        total_monthly_rent=round_cents(total_rent),
        expected_collection=round_cents(expected_collection),
        forecasts=forecasts,
    )


def _extreme_name(results: Sequence[TenantRiskResult], highest: bool) -> Optional[str]:
    if not results:
        return None
    pick = max if highest else min
    # First tenant wins ties, matching input order
    return pick(results, key=lambda r: r.risk_score).renter_name


def calculate_portfolio_summary(data: PortfolioRiskInput, max_workers: int = 1) -> PortfolioSummary:
    """Pure reduction over the same tenant scores the risk dashboard uses"""
    validate_portfolio(data.tenants, data.historical_collection_rate)
    results = calculate_tenant_risks_batch(data.tenants, max_workers=max_workers)

    scores = [r.risk_score for r in results]
    at_risk = at_risk_tenants(data.tenants, results)

    return PortfolioSummary(
        total_tenants=len(data.tenants),
        total_monthly_rent=round_cents(sum(t.rent_amount for t in data.tenants)),
        average_risk_score=round1(mean(scores)),
        median_risk_score=round1(median(scores)),
        at_risk_count=len(at_risk),
        at_risk_rent_exposure=round_cents(sum(t.rent_amount for t in at_risk)),
        highest_risk_tenant=_extreme_name(results, highest=True),
        lowest_risk_tenant=_extreme_name(results, highest=False),
    )
