"""Tenant risk scoring engine - rent-roll risk for property managers"""

from typing import List, Optional, Tuple

from homeu_scores.domain.exceptions import InvalidInputError
from homeu_scores.domain.models import ScoreFactor, TenantRiskInput, TenantRiskResult
from homeu_scores.domain.primitives import (
    clamp,
    composite_score,
    make_factor,
    require_non_empty,
    require_non_negative,
    risk_category_for,
    round1,
)
from homeu_scores.domain.tables import ACCOUNT_STATUS_RISK, RECOMMENDED_ACTIONS
from homeu_scores.utils.concurrency import parallel_map

PAYMENT_WEIGHT = 0.40
BALANCE_WEIGHT = 0.15
ACCOUNT_WEIGHT = 0.10
INCOME_WEIGHT = 0.20
LEASE_WEIGHT = 0.15

# Calibration constants for payment history risk
LATE_SHARE_POINTS = 40.0
MISSED_SHARE_POINTS = 60.0
DAYS_LATE_POINTS = 20.0
PER_MISSED_PENALTY = 10.0
MISSED_PENALTY_CAP = 30.0
NO_HISTORY_RISK = 50.0

SUFFICIENT_BALANCE_RISK = 10.0
INSUFFICIENT_BALANCE_RISK = 90.0
NO_BALANCE_DATA_RISK = 60.0


def validate_tenant(tenant: TenantRiskInput) -> None:
    require_non_empty("renter_id", tenant.renter_id)
    require_non_negative("rent_amount", tenant.rent_amount)
    require_non_negative("on_time_payments", tenant.on_time_payments)
    require_non_negative("late_payments", tenant.late_payments)
    require_non_negative("missed_payments", tenant.missed_payments)
    require_non_negative("average_days_late", tenant.average_days_late)
    require_non_negative("lease_months_remaining", tenant.lease_months_remaining)
    if tenant.verified_income is not None:
        require_non_negative("verified_income", tenant.verified_income)


def payment_history_risk(tenant: TenantRiskInput) -> float:
    """
    Payment reliability risk.

    A missed payment counts against the tenant three ways: in the missed
    share, in the per-missed penalty, and by lowering the on-time share, so
    each missed payment costs materially more than a late one.
    """
    total = tenant.on_time_payments + tenant.late_payments + tenant.missed_payments
    if total == 0:
        return NO_HISTORY_RISK

    risk = (tenant.late_payments / total) * LATE_SHARE_POINTS
    risk += (tenant.missed_payments / total) * MISSED_SHARE_POINTS
    risk += min(tenant.average_days_late / 30, 1.0) * DAYS_LATE_POINTS
    risk += min(tenant.missed_payments * PER_MISSED_PENALTY, MISSED_PENALTY_CAP)
    return clamp(risk)


def balance_risk(tenant: TenantRiskInput) -> float:
    """No balance check on file is its own moderately negative signal"""
    if tenant.has_sufficient_balance:
        return SUFFICIENT_BALANCE_RISK
    if tenant.balance_check_date is None:
        return NO_BALANCE_DATA_RISK
    return INSUFFICIENT_BALANCE_RISK


def account_risk(tenant: TenantRiskInput) -> float:
    status = (tenant.account_status or "unknown").strip().lower()
    return ACCOUNT_STATUS_RISK.get(status, ACCOUNT_STATUS_RISK["unknown"])


def rent_to_income_pct(tenant: TenantRiskInput) -> Optional[float]:
    if not tenant.verified_income:
        return None
    return tenant.rent_amount * 12 / tenant.verified_income * 100


def income_risk(tenant: TenantRiskInput) -> float:
    risk = 50.0
    risk += -20.0 if tenant.employment_verified else 15.0

    ratio = rent_to_income_pct(tenant)
    if ratio is None:
        risk += 10.0
    elif ratio <= 25:
        risk -= 25.0
    elif ratio <= 30:
        risk -= 15.0
    elif ratio <= 35:
        risk -= 5.0
    elif ratio <= 40:
        risk += 10.0
    else:
        risk += 25.0
    return clamp(risk)


def lease_risk(tenant: TenantRiskInput) -> float:
    risk = 30.0
    if tenant.is_month_to_month:
        risk += 40.0
    elif tenant.lease_months_remaining >= 6:
        risk -= 20.0
    elif tenant.lease_months_remaining >= 3:
        risk -= 10.0
    elif tenant.lease_months_remaining <= 1:
        risk += 15.0
    return clamp(risk)


def tenant_risk_factors(tenant: TenantRiskInput) -> List[ScoreFactor]:
    total = tenant.on_time_payments + tenant.late_payments + tenant.missed_payments
    on_time_pct = tenant.on_time_payments / total * 100 if total else 0.0
    ratio = rent_to_income_pct(tenant)

    if tenant.has_sufficient_balance:
        balance_desc = "Sufficient"
    elif tenant.balance_check_date is None:
        balance_desc = "No balance check on file"
    else:
        balance_desc = "Insufficient"

    income_desc = "Verified" if tenant.employment_verified else "Unverified"
    if ratio is not None:
        income_desc += f", {ratio:.0f}% rent-to-income"

    return [
        make_factor("Payment History", payment_history_risk(tenant), PAYMENT_WEIGHT, f"{on_time_pct:.0f}% on-time"),
        make_factor("Balance Sufficiency", balance_risk(tenant), BALANCE_WEIGHT, balance_desc),
        make_factor("Account Standing", account_risk(tenant), ACCOUNT_WEIGHT, f"Status: {tenant.account_status}"),
        make_factor("Income Adequacy", income_risk(tenant), INCOME_WEIGHT, income_desc),
        make_factor(
            "Lease Stability",
            lease_risk(tenant),
            LEASE_WEIGHT,
            "Month-to-month" if tenant.is_month_to_month else f"{tenant.lease_months_remaining} months remaining",
        ),
    ]


def calculate_tenant_risk(tenant: TenantRiskInput) -> TenantRiskResult:
    """
    Main entry point: score one tenant's risk of not paying rent.

    Risk score runs 0 (safest) to 100 (riskiest); payment likelihood is its
    complement.
    """
    validate_tenant(tenant)

    factors = tenant_risk_factors(tenant)
    risk_score = composite_score(factors)
    category = risk_category_for(risk_score)

    return TenantRiskResult(
        renter_id=tenant.renter_id,
        renter_name=tenant.renter_name,
        property_address=tenant.property_address,
        risk_score=risk_score,
        payment_likelihood=round1(100 - risk_score),
        risk_category=category,
        factors=factors,
        recommended_actions=list(RECOMMENDED_ACTIONS[category]),
    )


def _score_indexed(item: Tuple[int, TenantRiskInput]) -> TenantRiskResult:
    index, tenant = item
    try:
        return calculate_tenant_risk(tenant)
    except InvalidInputError as e:
        raise InvalidInputError(f"tenants.{index}.{e.field}", e.message) from e


def calculate_tenant_risks_batch(
    tenants: List[TenantRiskInput],
    max_workers: int = 1,
) -> List[TenantRiskResult]:
    """
    Score every tenant independently; result[i] belongs to tenants[i].

    An invalid tenant raises with its position in the field path, e.g.
    "tenants.2.rent_amount".
    """
    return parallel_map(_score_indexed, list(enumerate(tenants)), max_workers=max_workers)
