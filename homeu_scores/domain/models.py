"""Domain models - pure Python dataclasses representing scoring inputs and results"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class ScoreGrade(str, Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"
    VERY_POOR = "VeryPoor"


class RiskCategory(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    CRITICAL = "critical"


class CreditTier(str, Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"
    VERY_POOR = "VeryPoor"


class RenewalAction(str, Enum):
    NEGOTIATE = "negotiate"
    RENEW = "renew"
    EXPLORE = "explore"


class RenterTier(str, Enum):
    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    PLATINUM = "platinum"
    DISQUALIFIED = "disqualified"


@dataclass(frozen=True)
class ScoreFactor:
    """One weighted component of a composite score"""

    name: str
    value: float
    weight: float
    contribution: float
    description: str


@dataclass(frozen=True)
class NegotiationScript:
    scenario: str
    script: str


# ============================================
# Resident-facing calculators
# ============================================


@dataclass(frozen=True)
class DesirabilityInput:
    """Apartment attributes scored for a prospective resident"""

    current_rent: float
    market_rent: float
    occupancy_rate: float  # 0-100
    rent_trend_3mo: float  # % change
    rent_trend_12mo: float  # % change
    amenity_count: int
    building_year: int
    unit_sqft: float
    price_per_sqft: float
    market_price_per_sqft: float
    as_of_year: int
    google_rating: Optional[float] = None  # 0-5
    walkability_score: Optional[float] = None  # 0-100
    transit_score: Optional[float] = None  # 0-100
    has_concessions: bool = False
    concession_value: float = 0.0


@dataclass(frozen=True)
class DesirabilityResult:
    score: float
    grade: ScoreGrade
    factors: List[ScoreFactor]
    summary: str
    recommendation: str


@dataclass(frozen=True)
class NegotiationInput:
    current_rent: float
    market_rent: float
    occupancy_rate: float
    current_month: int  # 1-12
    tenant_tenure_months: int
    on_time_payment_rate: float  # 0-100
    market_rent_growth: float = 3.0  # annual %
    competing_offers: int = 0


@dataclass(frozen=True)
class NegotiationResult:
    score: float
    grade: ScoreGrade
    factors: List[ScoreFactor]
    suggested_rent: float
    max_discount: float
    suggested_asks: List[str]
    best_timing: str
    scripts: List[NegotiationScript]


@dataclass(frozen=True)
class RenterScoreInput:
    """Unified renter profile; unverified fields lower the score"""

    rental_history_months: int
    annual_income: float
    monthly_rent: float
    on_time_payments: int
    late_payments: int
    missed_payments: int
    verified_history: bool = False
    previous_residences: int = 1  # Accepted for client compatibility, not scored
    eviction_history: bool = False
    employment_verified: bool = False
    employment_tenure_months: int = 0
    current_streak: int = 0
    longest_streak: int = 0  # Accepted for client compatibility, not scored
    identity_verified: bool = False
    bank_linked: bool = False
    has_sufficient_balance: bool = False
    balance_check_passed: bool = False


@dataclass(frozen=True)
class RenterScoreResult:
    score: float
    grade: ScoreGrade
    tier: RenterTier
    factors: List[ScoreFactor]
    improvement_tips: List[str]
    verified_badges: List[str]


@dataclass(frozen=True)
class DealScoreInput:
    current_rent: float
    market_rent: float
    occupancy_rate: float  # 0-100
    avg_rent_per_sqft: float = 0.0
    unit_sqft: float = 0.0
    market_occupancy: float = 0.0  # 0-100, 0 = unknown
    concession_value: float = 0.0
    market_concession_value: float = 0.0
    rent_trend_3mo: float = 0.0
    rent_trend_12mo: float = 0.0
    # Property descriptors accepted for client compatibility; the deal score
    # rates price, not the property itself
    google_rating: Optional[float] = None
    building_year: int = 0
    amenity_count: int = 0


@dataclass(frozen=True)
class DealScoreResult:
    score: float
    grade: ScoreGrade
    factors: List[ScoreFactor]
    summary: str
    recommendation: str


@dataclass(frozen=True)
class LeverageScoreInput:
    occupancy_rate: float
    current_month: int  # 1-12
    rent_vs_market_pct: float  # 1.05 = 5% above market
    market_occupancy: float = 0.0  # 0 = unknown
    concession_prevalence: float = 0.0  # % of properties offering concessions
    building_age: int = 0
    google_rating: Optional[float] = None
    property_units: int = 0


@dataclass(frozen=True)
class LeverageScoreResult:
    score: float
    grade: ScoreGrade
    factors: List[ScoreFactor]
    negotiation_tips: List[str]
    best_timing: str


@dataclass(frozen=True)
class RenewalStrategyInput:
    current_rent: float
    market_rent: float
    occupancy_rate: float
    current_month: int  # 1-12
    lease_end_month: int  # 1-12
    tenant_tenure_months: int = 0
    on_time_payment_rate: float = 0.0  # 0-100
    rent_trend_3mo: float = 0.0
    concession_value: float = 0.0


@dataclass(frozen=True)
class RenewalStrategyResult:
    recommended_action: RenewalAction
    target_rent: float
    max_discount_pct: float
    leverage_score: float
    grade: ScoreGrade
    factors: List[ScoreFactor]
    talking_points: List[str]
    scripts: List[NegotiationScript]
    months_until_lease_end: int
    timing_advice: str


# ============================================
# Property-manager calculators
# ============================================


@dataclass(frozen=True)
class TenantRiskInput:
    renter_id: str
    renter_name: str
    property_id: str
    property_address: str
    rent_amount: float
    lease_start_date: int  # epoch ms
    on_time_payments: int = 0
    late_payments: int = 0
    average_days_late: float = 0.0
    missed_payments: int = 0
    has_sufficient_balance: bool = False
    balance_check_date: Optional[int] = None  # epoch ms
    account_status: str = "unknown"
    verified_income: Optional[float] = None  # annual
    employment_verified: bool = False
    lease_months_remaining: int = 0
    is_month_to_month: bool = False


@dataclass(frozen=True)
class TenantRiskResult:
    renter_id: str
    renter_name: str
    property_address: str
    risk_score: float  # 0-100, higher = riskier
    payment_likelihood: float  # 0-100
    risk_category: RiskCategory
    factors: List[ScoreFactor]
    recommended_actions: List[str]


@dataclass(frozen=True)
class CreditworthinessInput:
    renter_id: str
    actual_credit_score: Optional[int] = None
    on_time_payments: int = 0
    late_payments: int = 0
    missed_payments: int = 0
    rental_tenure_months: int = 0
    employment_months: int = 0
    employment_verified: bool = False
    income_consistency: float = 50.0  # 0-100
    previous_evictions: int = 0


@dataclass(frozen=True)
class CreditworthinessResult:
    renter_id: str
    credit_score: int  # 300-850
    is_proxy: bool
    credit_tier: CreditTier
    deposit_multiplier: float
    factors: List[ScoreFactor]
    eviction_penalty: int
    recommendations: List[str]


@dataclass(frozen=True)
class CollectionForecastInput:
    property_manager_id: str
    organization_id: str
    forecast_month: str  # "YYYY-MM"
    tenants: List[TenantRiskInput]
    historical_collection_rate: float = 95.0  # 0-100
    seasonal_adjustment: bool = True


@dataclass(frozen=True)
class ConfidenceInterval:
    lower: float
    upper: float
    confidence: float


@dataclass(frozen=True)
class AtRiskTenant:
    renter_id: str
    renter_name: str
    property_address: str
    rent_amount: float
    risk_score: float
    payment_likelihood: float


@dataclass(frozen=True)
class MonthlyForecast:
    month: str
    expected_rate: float
    expected_amount: float
    confidence: float


@dataclass(frozen=True)
class CollectionForecastResult:
    forecast_month: str
    total_expected_rent: float
    expected_collection_rate: float
    expected_collection_amount: float
    expected_shortfall: float
    confidence_interval: ConfidenceInterval
    at_risk_tenants: List[AtRiskTenant]
    monthly_forecasts: List[MonthlyForecast]


@dataclass(frozen=True)
class RiskDistribution:
    low: int = 0
    moderate: int = 0
    high: int = 0
    critical: int = 0


@dataclass(frozen=True)
class PortfolioRiskInput:
    property_manager_id: str
    organization_id: str
    tenants: List[TenantRiskInput]
    snapshot_date: int  # epoch ms
    historical_collection_rate: float = 95.0
    forecast_months: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class PortfolioRiskResult:
    property_manager_id: str
    snapshot_date: int
    overall_risk_score: float
    rent_weighted_risk_score: float
    total_tenants: int
    risk_distribution: RiskDistribution
    total_monthly_rent: float
    expected_collection: float
    forecasts: List[CollectionForecastResult]


@dataclass(frozen=True)
class PortfolioSummary:
    total_tenants: int
    total_monthly_rent: float
    average_risk_score: float
    median_risk_score: float
    at_risk_count: int
    at_risk_rent_exposure: float
    highest_risk_tenant: Optional[str] = None
    lowest_risk_tenant: Optional[str] = None
