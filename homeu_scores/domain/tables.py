"""Fixed lookup tables shared by the calculators.

Every table is immutable and enumerable so tests can pin each entry
independently of the arithmetic that consumes it.
"""

from types import MappingProxyType

from homeu_scores.domain.models import CreditTier, RenterTier, RiskCategory, ScoreGrade

# (minimum score, grade), checked top-down
GRADE_THRESHOLDS = (
    (90.0, ScoreGrade.EXCELLENT),
    (75.0, ScoreGrade.GOOD),
    (60.0, ScoreGrade.FAIR),
    (40.0, ScoreGrade.POOR),
    (0.0, ScoreGrade.VERY_POOR),
)

# (maximum risk score, category), checked top-down. Equivalent to payment
# likelihood >= 75 low, >= 50 moderate, >= 25 high, else critical.
RISK_CATEGORY_BANDS = (
    (25.0, RiskCategory.LOW),
    (50.0, RiskCategory.MODERATE),
    (75.0, RiskCategory.HIGH),
    (100.0, RiskCategory.CRITICAL),
)

AT_RISK_CATEGORIES = frozenset({RiskCategory.HIGH, RiskCategory.CRITICAL})

RECOMMENDED_ACTIONS = MappingProxyType({
    RiskCategory.CRITICAL: ("Immediate attention required", "Consider payment plan discussion"),
    RiskCategory.HIGH: ("Schedule check-in with tenant", "Send payment reminder before due date"),
    RiskCategory.MODERATE: ("Monitor payment pattern",),
    RiskCategory.LOW: ("Tenant in good standing",),
})

# Risk points by account status; unlisted statuses score as "unknown"
ACCOUNT_STATUS_RISK = MappingProxyType({
    "active": 10.0,
    "pending": 40.0,
    "unknown": 50.0,
    "inactive": 80.0,
    "closed": 95.0,
    "frozen": 95.0,
})

CREDIT_SCORE_MIN = 300
CREDIT_SCORE_MAX = 850

# (minimum credit score, tier), checked top-down
CREDIT_TIER_BANDS = (
    (740, CreditTier.EXCELLENT),
    (670, CreditTier.GOOD),
    (620, CreditTier.FAIR),
    (580, CreditTier.POOR),
    (CREDIT_SCORE_MIN, CreditTier.VERY_POOR),
)

DEPOSIT_MULTIPLIERS = MappingProxyType({
    CreditTier.EXCELLENT: 1.0,
    CreditTier.GOOD: 1.25,
    CreditTier.FAIR: 1.5,
    CreditTier.POOR: 2.0,
    CreditTier.VERY_POOR: 2.5,
})

# Tenant leverage by calendar month: winter demand is lowest
SEASONAL_LEVERAGE = MappingProxyType({
    1: 85.0, 2: 85.0, 3: 60.0, 4: 60.0,
    5: 25.0, 6: 25.0, 7: 25.0, 8: 25.0,
    9: 50.0, 10: 50.0, 11: 85.0, 12: 85.0,
})

WINTER_MONTHS = frozenset({11, 12, 1, 2})
SPRING_MONTHS = frozenset({3, 4})
SUMMER_MONTHS = frozenset({5, 6, 7, 8})

# Collection-rate multiplier by calendar month
SEASONAL_COLLECTION_FACTORS = MappingProxyType({
    1: 0.95, 2: 0.95, 3: 1.02, 4: 1.02,
    5: 1.0, 6: 1.0, 7: 1.0, 8: 1.0,
    9: 1.03, 10: 1.03, 11: 0.95, 12: 0.95,
})

# (minimum score, tier) for the unified renter score
RENTER_TIER_THRESHOLDS = (
    (90.0, RenterTier.PLATINUM),
    (75.0, RenterTier.GOLD),
    (60.0, RenterTier.SILVER),
    (0.0, RenterTier.BRONZE),
)

GRADE_LABELS = MappingProxyType({
    ScoreGrade.EXCELLENT: "excellent",
    ScoreGrade.GOOD: "good",
    ScoreGrade.FAIR: "fair",
    ScoreGrade.POOR: "poor",
    ScoreGrade.VERY_POOR: "very poor",
})
