"""Property-manager score endpoints: rent-roll risk, creditworthiness, collection likelihood"""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Request

from homeu_scores.api.dependencies import get_engine
from homeu_scores.api.v1.common import descriptor, run_calculation, success
from homeu_scores.api.v1.schemas import (
    BatchCreditworthinessRequest,
    BatchTenantRiskRequest,
    CollectionLikelihoodRequest,
    CreditworthinessRequest,
    ForecastTenant,
    TenantRiskRequest,
    describe_fields,
)
from homeu_scores.infrastructure.dispatch import ScoringEngine
from homeu_scores.infrastructure.observability.metrics import record_credit_tiers, record_tenant_risk

router = APIRouter()


@router.post("/rent-roll-risk")
def score_rent_roll(
    request: Request,
    payload: Dict[str, Any] = Body(...),
    engine: ScoringEngine = Depends(get_engine),
):
    """
    Tenant risk for one tenant, or a batch when the body carries "tenants".

    Batch results are positional: data[i] scores tenants[i].
    """
    if "tenants" in payload:
        tenants = BatchTenantRiskRequest.model_validate(payload).to_domain()
        results = run_calculation(request, engine, "tenant_risk_batch", tenants, batch_size=len(tenants))
        record_tenant_risk(results)
        return success(results, count=len(results))

    tenant = TenantRiskRequest.model_validate(payload).to_domain()
    result = run_calculation(request, engine, "tenant_risk", tenant, renter_id=tenant.renter_id)
    record_tenant_risk([result])
    return success(result)


@router.get("/rent-roll-risk")
def describe_rent_roll_risk():
    return descriptor(
        "Rent Roll Risk Score API",
        "Calculate risk scores for tenants (single or batch via {\"tenants\": [...]})",
        TenantRiskRequest,
    )


@router.post("/creditworthiness")
def score_creditworthiness(
    request: Request,
    payload: Dict[str, Any] = Body(...),
    engine: ScoringEngine = Depends(get_engine),
):
    """Actual credit score passthrough, or a proxy score from rental history"""
    if "renters" in payload:
        renters = BatchCreditworthinessRequest.model_validate(payload).to_domain()
        results = run_calculation(request, engine, "creditworthiness_batch", renters, batch_size=len(renters))
        record_credit_tiers(results)
        return success(results, count=len(results))

    renter = CreditworthinessRequest.model_validate(payload).to_domain()
    result = run_calculation(request, engine, "creditworthiness", renter, renter_id=renter.renter_id)
    record_credit_tiers([result])
    return success(result)


@router.get("/creditworthiness")
def describe_creditworthiness():
    return descriptor(
        "Credit Worthiness Assessment API",
        "Calculate credit score (300-850): uses the actual score if provided, otherwise a proxy from rental history",
        CreditworthinessRequest,
    )


@router.post("/collection-likelihood")
def score_collection_likelihood(
    body: CollectionLikelihoodRequest,
    request: Request,
    engine: ScoringEngine = Depends(get_engine),
):
    """
    Collection forecast for one month, or the full portfolio view when
    include_portfolio is true.

    Portfolio mode returns {"risk": ..., "summary": ...} built from the same
    tenant scores.
    """
    if body.include_portfolio:
        portfolio = body.to_portfolio()
        risk = run_calculation(
            request, engine, "portfolio_risk", portfolio, property_manager_id=portfolio.property_manager_id
        )
        summary = run_calculation(
            request, engine, "portfolio_summary", portfolio, property_manager_id=portfolio.property_manager_id
        )
        return success({"risk": risk, "summary": summary}, type="portfolio")

    forecast_input = body.to_forecast()
    result = run_calculation(
        request, engine, "collection_forecast", forecast_input, property_manager_id=forecast_input.property_manager_id
    )
    return success(result, type="forecast")


@router.get("/collection-likelihood")
def describe_collection_likelihood():
    tenant_fields = describe_fields(ForecastTenant)
    return descriptor(
        "Collection Likelihood Forecast API",
        "Forecast rent collection rates for a portfolio with seasonal adjustments",
        CollectionLikelihoodRequest,
        tenant_object={"required": tenant_fields["required_fields"], "optional": tenant_fields["optional_fields"]},
    )
