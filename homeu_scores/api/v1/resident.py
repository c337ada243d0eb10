"""Resident-facing score endpoints: desirability, negotiation, renter score, deal, leverage, renewal"""

from fastapi import APIRouter, Depends, Request

from homeu_scores.api.dependencies import get_engine
from homeu_scores.api.v1.common import descriptor, run_calculation, success
from homeu_scores.api.v1.schemas import (
    DealScoreRequest,
    DesirabilityRequest,
    LeverageScoreRequest,
    NegotiationRequest,
    RenewalStrategyRequest,
    RenterScoreRequest,
)
from homeu_scores.infrastructure.dispatch import ScoringEngine

router = APIRouter()


@router.post("/desirability")
def score_desirability(body: DesirabilityRequest, request: Request, engine: ScoringEngine = Depends(get_engine)):
    """Apartment desirability from market, location, amenities, trends and value"""
    result = run_calculation(request, engine, "desirability", body.to_domain())
    return success(result)


@router.get("/desirability")
def describe_desirability():
    return descriptor(
        "Apartment Desirability Score API",
        "Calculate apartment desirability score based on market factors, location, amenities, and value",
        DesirabilityRequest,
    )


@router.post("/negotiation")
def score_negotiation(body: NegotiationRequest, request: Request, engine: ScoringEngine = Depends(get_engine)):
    result = run_calculation(request, engine, "negotiation", body.to_domain())
    return success(result)


@router.get("/negotiation")
def describe_negotiation():
    return descriptor(
        "Rent Negotiation Calculator API",
        "Calculate negotiation power and get strategies for rent reduction",
        NegotiationRequest,
    )


@router.post("/renter-score")
def score_renter(body: RenterScoreRequest, request: Request, engine: ScoringEngine = Depends(get_engine)):
    result = run_calculation(request, engine, "renter_score", body.to_domain())
    return success(result)


@router.get("/renter-score")
def describe_renter_score():
    return descriptor(
        "HomeU Renter Score API",
        "Calculate unified tenant quality score (0-100) with tier, badges and improvement tips",
        RenterScoreRequest,
    )


@router.post("/deal-score")
def score_deal(body: DealScoreRequest, request: Request, engine: ScoringEngine = Depends(get_engine)):
    result = run_calculation(request, engine, "deal_score", body.to_domain())
    return success(result)


@router.get("/deal-score")
def describe_deal_score():
    return descriptor(
        "Deal Score API",
        "Rate how good a unit's rent is relative to its market",
        DealScoreRequest,
    )


@router.post("/leverage-score")
def score_leverage(body: LeverageScoreRequest, request: Request, engine: ScoringEngine = Depends(get_engine)):
    result = run_calculation(request, engine, "leverage_score", body.to_domain())
    return success(result)


@router.get("/leverage-score")
def describe_leverage_score():
    return descriptor(
        "Leverage Score API",
        "Estimate a tenant's negotiating leverage from market and property conditions",
        LeverageScoreRequest,
    )


@router.post("/renewal-strategy")
def score_renewal(body: RenewalStrategyRequest, request: Request, engine: ScoringEngine = Depends(get_engine)):
    """Renewal plan: recommended action, target rent, talking points and timing"""
    result = run_calculation(request, engine, "renewal_strategy", body.to_domain())
    return success(result)


@router.get("/renewal-strategy")
def describe_renewal_strategy():
    return descriptor(
        "Renewal Strategy API",
        "Plan a lease renewal negotiation: target rent, recommended action, scripts and timing",
        RenewalStrategyRequest,
    )
