"""Pydantic schemas for API request validation and defaults"""

from typing import ClassVar, Dict, List, Optional, Type

from pydantic import BaseModel, ConfigDict, Field

from homeu_scores.config import settings
from homeu_scores.domain.models import (
    CollectionForecastInput,
    CreditworthinessInput,
    DealScoreInput,
    DesirabilityInput,
    LeverageScoreInput,
    NegotiationInput,
    PortfolioRiskInput,
    RenewalStrategyInput,
    RenterScoreInput,
    TenantRiskInput,
)
from homeu_scores.utils.date_utils import current_year, now_epoch_ms


def _historical_rate() -> float:
    return settings.default_historical_collection_rate


class RequestModel(BaseModel):
    """Base for every request body: NaN and Infinity are rejected, not scored"""

    model_config = ConfigDict(allow_inf_nan=False)


class ScoreRequest(RequestModel):
    """Request body that maps field-for-field onto a domain input dataclass"""

    domain_model: ClassVar[Type]

    def to_domain(self):
        return self.domain_model(**self.model_dump())


def describe_fields(model: Type[BaseModel]) -> Dict[str, List[str]]:
    """Required and optional field names, in declaration order"""
    required = [name for name, info in model.model_fields.items() if info.is_required()]
    optional = [name for name, info in model.model_fields.items() if not info.is_required()]
    return {"required_fields": required, "optional_fields": optional}


# ============================================
# Resident-facing calculators
# ============================================


class DesirabilityRequest(ScoreRequest):
    """Request body for POST /v1/scores/desirability"""

    domain_model: ClassVar[Type] = DesirabilityInput

    current_rent: float
    market_rent: float
    occupancy_rate: float = Field(..., description="Occupancy, 0-100")
    rent_trend_3mo: float
    rent_trend_12mo: float
    amenity_count: int
    building_year: int
    unit_sqft: float
    price_per_sqft: float
    market_price_per_sqft: float
    as_of_year: int = Field(default_factory=current_year)
    google_rating: Optional[float] = None
    walkability_score: Optional[float] = None
    transit_score: Optional[float] = None
    has_concessions: bool = False
    concession_value: float = 0.0


class NegotiationRequest(ScoreRequest):
    """Request body for POST /v1/scores/negotiation"""

    domain_model: ClassVar[Type] = NegotiationInput

    current_rent: float
    market_rent: float
    occupancy_rate: float
    current_month: int = Field(..., description="Calendar month, 1-12")
    tenant_tenure_months: int
    on_time_payment_rate: float
    market_rent_growth: float = 3.0
    competing_offers: int = 0


class RenterScoreRequest(ScoreRequest):
    """Request body for POST /v1/scores/renter-score"""

    domain_model: ClassVar[Type] = RenterScoreInput

    rental_history_months: int
    annual_income: float
    monthly_rent: float
    on_time_payments: int
    late_payments: int
    missed_payments: int
    verified_history: bool = False
    previous_residences: int = 1
    eviction_history: bool = False
    employment_verified: bool = False
    employment_tenure_months: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    identity_verified: bool = False
    bank_linked: bool = False
    has_sufficient_balance: bool = False
    balance_check_passed: bool = False


class DealScoreRequest(ScoreRequest):
    """Request body for POST /v1/scores/deal-score"""

    domain_model: ClassVar[Type] = DealScoreInput

    current_rent: float
    market_rent: float
    occupancy_rate: float
    avg_rent_per_sqft: float = 0.0
    unit_sqft: float = 0.0
    market_occupancy: float = 0.0
    concession_value: float = 0.0
    market_concession_value: float = 0.0
    rent_trend_3mo: float = 0.0
    rent_trend_12mo: float = 0.0
    google_rating: Optional[float] = None
    building_year: int = 0
    amenity_count: int = 0


class LeverageScoreRequest(ScoreRequest):
    """Request body for POST /v1/scores/leverage-score"""

    domain_model: ClassVar[Type] = LeverageScoreInput

    occupancy_rate: float
    current_month: int
    rent_vs_market_pct: float = Field(..., description="Rent as a multiple of market, 1.05 = 5% above")
    market_occupancy: float = 0.0
    concession_prevalence: float = 0.0
    building_age: int = 0
    google_rating: Optional[float] = None
    property_units: int = 0


class RenewalStrategyRequest(ScoreRequest):
    """Request body for POST /v1/scores/renewal-strategy"""

    domain_model: ClassVar[Type] = RenewalStrategyInput

    current_rent: float
    market_rent: float
    occupancy_rate: float
    current_month: int
    lease_end_month: int
    tenant_tenure_months: int = 0
    on_time_payment_rate: float = 0.0
    rent_trend_3mo: float = 0.0
    concession_value: float = 0.0


# ============================================
# Property-manager calculators
# ============================================


class TenantRiskRequest(ScoreRequest):
    """One tenant on the rent roll"""

    domain_model: ClassVar[Type] = TenantRiskInput

    renter_id: str = Field(..., min_length=1)
    renter_name: str
    property_id: str
    property_address: str
    rent_amount: float
    lease_start_date: int = Field(default_factory=now_epoch_ms, description="Epoch milliseconds")
    on_time_payments: int = 0
    late_payments: int = 0
    average_days_late: float = 0.0
    missed_payments: int = 0
    has_sufficient_balance: bool = False
    balance_check_date: Optional[int] = None
    account_status: str = "unknown"
    verified_income: Optional[float] = None
    employment_verified: bool = False
    lease_months_remaining: int = 0
    is_month_to_month: bool = False


class BatchTenantRiskRequest(RequestModel):
    """Request body for a rent-roll batch: {"tenants": [...]}"""

    tenants: List[TenantRiskRequest] = Field(..., min_length=1)

    def to_domain(self) -> List[TenantRiskInput]:
        return [t.to_domain() for t in self.tenants]


class CreditworthinessRequest(ScoreRequest):
    domain_model: ClassVar[Type] = CreditworthinessInput

    renter_id: str = Field(..., min_length=1)
    actual_credit_score: Optional[int] = None
    on_time_payments: int = 0
    late_payments: int = 0
    missed_payments: int = 0
    rental_tenure_months: int = 0
    employment_months: int = 0
    employment_verified: bool = False
    income_consistency: float = 50.0
    previous_evictions: int = 0


class BatchCreditworthinessRequest(RequestModel):
    """Request body for a creditworthiness batch: {"renters": [...]}"""

    renters: List[CreditworthinessRequest] = Field(..., min_length=1)

    def to_domain(self) -> List[CreditworthinessInput]:
        return [r.to_domain() for r in self.renters]


class ForecastTenant(TenantRiskRequest):
    """Portfolio tenants only need an id and rent; descriptive fields default"""

    renter_name: str = "Unknown"
    property_id: str = ""
    property_address: str = ""


class CollectionLikelihoodRequest(RequestModel):
    """Request body for POST /v1/scores/collection-likelihood"""

    property_manager_id: str
    organization_id: str
    forecast_month: str = Field(..., description="YYYY-MM")
    tenants: List[ForecastTenant]
    historical_collection_rate: float = Field(default_factory=_historical_rate)
    seasonal_adjustment: bool = True
    include_portfolio: bool = False
    forecast_months: Optional[List[str]] = None
    snapshot_date: int = Field(default_factory=now_epoch_ms)

    def tenant_inputs(self) -> List[TenantRiskInput]:
        return [t.to_domain() for t in self.tenants]

    def to_forecast(self) -> CollectionForecastInput:
        return CollectionForecastInput(
            property_manager_id=self.property_manager_id,
            organization_id=self.organization_id,
            forecast_month=self.forecast_month,
            tenants=self.tenant_inputs(),
            historical_collection_rate=self.historical_collection_rate,
            seasonal_adjustment=self.seasonal_adjustment,
        )

    def to_portfolio(self) -> PortfolioRiskInput:
        """Portfolio mode forecasts every requested month, defaulting to forecast_month"""
        return PortfolioRiskInput(
            property_manager_id=self.property_manager_id,
            organization_id=self.organization_id,
            tenants=self.tenant_inputs(),
            snapshot_date=self.snapshot_date,
            historical_collection_rate=self.historical_collection_rate,
            forecast_months=list(self.forecast_months or [self.forecast_month]),
        )

