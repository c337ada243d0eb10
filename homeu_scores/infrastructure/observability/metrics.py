"""Prometheus metrics for calculator outcomes, fallbacks and score distributions"""

from typing import Iterable

from prometheus_client import Counter, Histogram

from homeu_scores.domain.models import CreditworthinessResult, TenantRiskResult

# Calculator metrics
calculation_counter = Counter(
    "homeu_calculation_total",
    "Calculator invocations",
    ["calculator", "outcome"],  # success | invalid | failed
)

calculation_fallback_counter = Counter(
    "homeu_calculation_fallback_total",
    "Native backend failures recovered by the Python implementation",
    ["calculator"],
)

calculation_duration_histogram = Histogram(
    "homeu_calculation_duration_seconds",
    "Calculator execution time",
    ["calculator"],
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0],
)

# Score distributions
tenant_risk_category_counter = Counter(
    "homeu_tenant_risk_category_total",
    "Tenants scored by risk category",
    ["category"],  # low | moderate | high | critical
)

credit_tier_counter = Counter(
    "homeu_credit_tier_total",
    "Creditworthiness results by tier",
    ["tier", "source"],  # source: actual | proxy
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_calculation(calculator: str, outcome: str, duration_seconds: float) -> None:
    calculation_counter.labels(calculator=calculator, outcome=outcome).inc()
    calculation_duration_histogram.labels(calculator=calculator).observe(duration_seconds)


def record_fallback(calculator: str) -> None:
    calculation_fallback_counter.labels(calculator=calculator).inc()


def record_tenant_risk(results: Iterable[TenantRiskResult]) -> None:
    """Track the risk category mix of scored tenants"""
    for result in results:
        tenant_risk_category_counter.labels(category=result.risk_category.value).inc()


def record_credit_tiers(results: Iterable[CreditworthinessResult]) -> None:
    for result in results:
        source = "proxy" if result.is_proxy else "actual"
        credit_tier_counter.labels(tier=result.credit_tier.value, source=source).inc()
