"""Numeric primitives shared by every calculator"""

import math
from typing import Iterable, List, Tuple

from homeu_scores.domain.exceptions import InvalidInputError
from homeu_scores.domain.models import RiskCategory, ScoreFactor, ScoreGrade
from homeu_scores.domain.tables import GRADE_THRESHOLDS, RISK_CATEGORY_BANDS


def clamp(value: float, lo: float = 0.0, hi: float = 100.0) -> float:
    """Bound value to [lo, hi]"""
    return max(lo, min(hi, value))


def round1(value: float) -> float:
    return round(value, 1)


def round_cents(value: float) -> float:
    return round(value, 2)


def make_factor(name: str, value: float, weight: float, description: str) -> ScoreFactor:
    """Build a factor from an already-bounded sub-score"""
    return ScoreFactor(
        name=name,
        value=round_cents(value),
        weight=weight,
        contribution=round_cents(value * weight),
        description=description,
    )


def weighted_sum(factors: Iterable[ScoreFactor]) -> float:
    """Sum of value x weight, rounded to one decimal place"""
    return round1(sum(f.value * f.weight for f in factors))


def composite_score(factors: List[ScoreFactor]) -> float:
    """Weighted sum clamped to the 0-100 score domain"""
    return clamp(weighted_sum(factors))


def renormalize(weights: List[Tuple[str, float]]) -> List[Tuple[str, float]]:
    """Rescale (name, weight) pairs so the weights sum to 1.0 again"""
    total = sum(w for _, w in weights)
    return [(name, w / total) for name, w in weights]


def grade_for(score: float) -> ScoreGrade:
    """Map a 0-100 score to its grade bucket"""
    for threshold, grade in GRADE_THRESHOLDS:
        if score >= threshold:
            return grade
    return ScoreGrade.VERY_POOR


def risk_category_for(risk_score: float) -> RiskCategory:
    """Map a 0-100 risk score (higher = riskier) to its category"""
    for upper, category in RISK_CATEGORY_BANDS:
        if risk_score <= upper:
            return category
    return RiskCategory.CRITICAL


def safe_ratio(numerator: float, denominator: float, default: float = 1.0) -> float:
    return numerator / denominator if denominator > 0 else default


# Domain guards. Calculators call these so they reject out-of-domain values
# regardless of which host validated the payload.


def require_finite(field: str, value: float) -> None:
    if not math.isfinite(value):
        raise InvalidInputError(field, "must be a finite number")


def require_non_negative(field: str, value: float) -> None:
    require_finite(field, value)
    if value < 0:
        raise InvalidInputError(field, "must be non-negative")


def require_percentage(field: str, value: float) -> None:
    require_finite(field, value)
    if value < 0 or value > 100:
        raise InvalidInputError(field, "must be between 0 and 100")


def require_month(field: str, value: int) -> None:
    if value < 1 or value > 12:
        raise InvalidInputError(field, "must be between 1 and 12")


def require_non_empty(field: str, value: str) -> None:
    if not value or not value.strip():
        raise InvalidInputError(field, "must not be empty")
